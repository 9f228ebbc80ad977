"""Errors raised while resolving, selecting and fetching transcripts."""

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class CouldNotRetrieveTranscript(Exception):
    """Base class for every failure tied to a single video."""

    CAUSE_MESSAGE = ""

    def __init__(self, video_id: str):
        self.video_id = video_id
        super().__init__(self._build_error_message())

    @property
    def cause(self) -> str:
        return self.CAUSE_MESSAGE

    def _build_error_message(self) -> str:
        message = (
            f"Could not retrieve a transcript for the video "
            f"{WATCH_URL.format(video_id=self.video_id)}!"
        )
        cause = self.cause
        if cause:
            message += f" This is most likely caused by:\n\n{cause}"
        return message


class UnsupportedFeature(NotImplementedError):
    """Requested an option this client does not implement."""

    def __init__(self, feature: str):
        self.feature = feature
        super().__init__(f"{feature} is not supported")


class VideoUnavailable(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = "The video is no longer available"


class TranscriptsDisabled(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = "Subtitles are disabled for this video"


class TransportFailure(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = "Request to YouTube failed: {reason}"

    def __init__(self, video_id: str, reason: str):
        self.reason = reason
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        return self.CAUSE_MESSAGE.format(reason=self.reason)


class TooManyRequests(TransportFailure):
    CAUSE_MESSAGE = (
        "YouTube is receiving too many requests from this IP and now requires "
        "solving a captcha to continue ({reason})"
    )


class ResponseParseError(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = "The response from YouTube could not be parsed: {reason}"

    def __init__(self, video_id: str, reason: str):
        self.reason = reason
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        return self.CAUSE_MESSAGE.format(reason=self.reason)


class TranslationUnavailable(CouldNotRetrieveTranscript, ValueError):
    CAUSE_MESSAGE = "The requested translation language is not available: {language_code}"

    def __init__(self, video_id: str, language_code: str):
        self.language_code = language_code
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        return self.CAUSE_MESSAGE.format(language_code=self.language_code)


class NoTranscriptFound(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = (
        "No transcripts were found for any of the requested language codes: "
        "{requested_language_codes}\n\n{transcript_data}"
    )

    def __init__(self, video_id: str, requested_language_codes, transcript_data):
        self.requested_language_codes = list(requested_language_codes)
        self._transcript_data = transcript_data
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        return self.CAUSE_MESSAGE.format(
            requested_language_codes=self.requested_language_codes,
            transcript_data=str(self._transcript_data),
        )

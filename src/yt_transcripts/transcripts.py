"""Transcript descriptors, the per-video transcript list and the fetcher that builds it."""

import html
import json
import logging
import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType
from xml.etree import ElementTree

import httpx
from pydantic import ValidationError

from yt_transcripts.errors import (
    WATCH_URL,
    NoTranscriptFound,
    ResponseParseError,
    TooManyRequests,
    TranscriptsDisabled,
    TranslationUnavailable,
    TransportFailure,
    VideoUnavailable,
)
from yt_transcripts.models import TranscriptItem, TranslationLanguage

logger = logging.getLogger(__name__)

_HTML_TAG = re.compile(r"<[^>]*>", re.IGNORECASE)


def _get(http_client: httpx.Client, video_id: str, url: str) -> httpx.Response:
    """GET a URL, mapping httpx failures onto transcript errors."""
    try:
        resp = http_client.get(url)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 429:
            raise TooManyRequests(video_id, str(e)) from e
        raise TransportFailure(video_id, str(e)) from e
    except httpx.HTTPError as e:
        raise TransportFailure(video_id, str(e)) from e
    return resp


class Transcript:
    """One caption track of a video.

    Descriptors are read-only. ``fetch`` downloads the timed text,
    ``translate`` derives a descriptor for another language served by YouTube.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        video_id: str,
        url: str,
        language: str,
        language_code: str,
        is_generated: bool,
        translation_languages: Iterable[TranslationLanguage] = (),
    ):
        self._http_client = http_client
        self._video_id = video_id
        self._url = url
        self._language = language
        self._language_code = language_code
        self._is_generated = is_generated
        self._translation_languages = tuple(translation_languages)
        self._translation_languages_dict = {
            tl.language_code: tl.language for tl in self._translation_languages
        }

    @property
    def video_id(self) -> str:
        return self._video_id

    @property
    def language(self) -> str:
        return self._language

    @property
    def language_code(self) -> str:
        return self._language_code

    @property
    def is_generated(self) -> bool:
        return self._is_generated

    @property
    def translation_languages(self) -> tuple[TranslationLanguage, ...]:
        return self._translation_languages

    @property
    def is_translatable(self) -> bool:
        return len(self._translation_languages) > 0

    def fetch(self) -> list[TranscriptItem]:
        """Download and parse this track's timed text."""
        logger.debug(f"Fetching {self._language_code} transcript for {self._video_id}")
        resp = _get(self._http_client, self._video_id, self._url)
        return _parse_timed_text(self._video_id, resp.text)

    def translate(self, language_code: str) -> "Transcript":
        if language_code not in self._translation_languages_dict:
            raise TranslationUnavailable(self._video_id, language_code)

        return Transcript(
            self._http_client,
            self._video_id,
            f"{self._url}&tlang={language_code}",
            self._translation_languages_dict[language_code],
            language_code,
            True,
        )

    def __str__(self) -> str:
        suffix = "[TRANSLATABLE]" if self.is_translatable else ""
        return f'{self._language_code} ("{self._language}"){suffix}'

    def __repr__(self) -> str:
        return (
            f"Transcript(video_id={self._video_id!r}, language_code={self._language_code!r}, "
            f"is_generated={self._is_generated!r})"
        )


def _parse_timed_text(video_id: str, raw: str) -> list[TranscriptItem]:
    try:
        root = ElementTree.fromstring(raw)
    except ElementTree.ParseError as e:
        raise ResponseParseError(video_id, f"invalid timed text: {e}") from e

    items = []
    for element in root.iter("text"):
        text = "".join(element.itertext())
        if not text:
            continue
        try:
            start = float(element.attrib["start"])
            duration = float(element.attrib.get("dur", "0.0"))
        except (KeyError, ValueError) as e:
            raise ResponseParseError(video_id, f"invalid timing on caption: {e}") from e
        items.append(
            TranscriptItem(
                text=_HTML_TAG.sub("", html.unescape(text)),
                start=start,
                duration=duration,
            )
        )
    return items


class TranscriptList:
    """All transcripts available for one video.

    Iteration yields the manually created transcripts first, then the
    generated ones, each group in the order YouTube reported them.
    """

    def __init__(
        self,
        video_id: str,
        manually_created_transcripts: Mapping[str, Transcript],
        generated_transcripts: Mapping[str, Transcript],
        translation_languages: Iterable[TranslationLanguage] = (),
    ):
        self._video_id = video_id
        self._manually_created = MappingProxyType(dict(manually_created_transcripts))
        self._generated = MappingProxyType(dict(generated_transcripts))
        self._translation_languages = tuple(translation_languages)

    @classmethod
    def build(
        cls, http_client: httpx.Client, video_id: str, captions_json: dict
    ) -> "TranscriptList":
        """Build a list from the ``playerCaptionsTracklistRenderer`` payload."""
        try:
            translation_languages = [
                TranslationLanguage(
                    language=tl["languageName"]["simpleText"],
                    language_code=tl["languageCode"],
                )
                for tl in captions_json.get("translationLanguages", [])
            ]

            manually_created: dict[str, Transcript] = {}
            generated: dict[str, Transcript] = {}
            for caption in captions_json["captionTracks"]:
                is_generated = caption.get("kind", "") == "asr"
                target = generated if is_generated else manually_created
                language_code = caption["languageCode"]
                if language_code in target:
                    logger.debug(
                        f"Ignoring duplicate {language_code} track for {video_id}"
                    )
                    continue
                target[language_code] = Transcript(
                    http_client,
                    video_id,
                    caption["baseUrl"],
                    caption["name"]["simpleText"],
                    language_code,
                    is_generated,
                    translation_languages if caption.get("isTranslatable", False) else (),
                )
        except (KeyError, TypeError, ValidationError) as e:
            raise ResponseParseError(video_id, f"unexpected caption track data: {e!r}") from e

        return cls(video_id, manually_created, generated, translation_languages)

    @property
    def video_id(self) -> str:
        return self._video_id

    @property
    def manually_created(self) -> Mapping[str, Transcript]:
        return self._manually_created

    @property
    def generated(self) -> Mapping[str, Transcript]:
        return self._generated

    @property
    def translation_languages(self) -> tuple[TranslationLanguage, ...]:
        return self._translation_languages

    def __iter__(self) -> Iterator[Transcript]:
        yield from self._manually_created.values()
        yield from self._generated.values()

    def __len__(self) -> int:
        return len(self._manually_created) + len(self._generated)

    def find_transcript(self, language_codes: Sequence[str]) -> Transcript:
        """Find a transcript for the highest-priority language code available.

        Manually created transcripts win over generated ones only when both
        exist for the same code. Translation is never attempted.
        """
        return self._find_transcript(
            language_codes, (self._manually_created, self._generated)
        )

    def find_manually_created_transcript(self, language_codes: Sequence[str]) -> Transcript:
        return self._find_transcript(language_codes, (self._manually_created,))

    def find_generated_transcript(self, language_codes: Sequence[str]) -> Transcript:
        return self._find_transcript(language_codes, (self._generated,))

    def _find_transcript(
        self,
        language_codes: Sequence[str],
        transcript_dicts: Sequence[Mapping[str, Transcript]],
    ) -> Transcript:
        for language_code in language_codes:
            for transcript_dict in transcript_dicts:
                if language_code in transcript_dict:
                    return transcript_dict[language_code]

        raise NoTranscriptFound(self._video_id, language_codes, self)

    def __str__(self) -> str:
        translation_languages = [
            f'{tl.language_code} ("{tl.language}")' for tl in self._translation_languages
        ]
        return (
            f"For this video ({self._video_id}) transcripts are available in the "
            f"following languages:\n\n"
            f"(MANUALLY CREATED)\n{self._describe(self._manually_created.values())}\n\n"
            f"(GENERATED)\n{self._describe(self._generated.values())}\n\n"
            f"(TRANSLATION LANGUAGES)\n{self._describe(translation_languages)}"
        )

    @staticmethod
    def _describe(entries) -> str:
        lines = [f" - {entry}" for entry in entries]
        return "\n".join(lines) if lines else "None"


class TranscriptListFetcher:
    """Resolves the caption tracks of a video by scraping its watch page."""

    def __init__(self, http_client: httpx.Client):
        self._http_client = http_client

    def fetch(self, video_id: str) -> TranscriptList:
        logger.debug(f"Resolving transcript list for {video_id}")
        captions_json = self._extract_captions_json(
            self._fetch_video_html(video_id), video_id
        )
        return TranscriptList.build(self._http_client, video_id, captions_json)

    def _extract_captions_json(self, page: str, video_id: str) -> dict:
        splitted = page.split('"captions":')

        if len(splitted) <= 1:
            if 'class="g-recaptcha"' in page:
                raise TooManyRequests(video_id, "captcha page served")
            if '"playabilityStatus":' not in page:
                raise VideoUnavailable(video_id)
            raise TranscriptsDisabled(video_id)

        try:
            captions = json.loads(
                splitted[1].split(',"videoDetails')[0].replace("\n", "")
            )
        except json.JSONDecodeError as e:
            raise ResponseParseError(video_id, f"invalid captions data: {e}") from e

        if not isinstance(captions, dict):
            raise ResponseParseError(video_id, "captions data is not an object")

        captions_json = captions.get("playerCaptionsTracklistRenderer")
        if not isinstance(captions_json, dict) or "captionTracks" not in captions_json:
            raise TranscriptsDisabled(video_id)

        return captions_json

    def _fetch_video_html(self, video_id: str) -> str:
        resp = _get(self._http_client, video_id, WATCH_URL.format(video_id=video_id))
        return html.unescape(resp.text)

"""Render fetched transcripts as text, JSON, SRT or WebVTT."""

import json
from collections.abc import Sequence

from yt_transcripts.models import TranscriptItem
from yt_transcripts.utils import format_cue_time


class Formatter:
    def format_transcript(self, items: Sequence[TranscriptItem]) -> str:
        raise NotImplementedError


class TextFormatter(Formatter):
    def format_transcript(self, items: Sequence[TranscriptItem]) -> str:
        return "\n".join(item.text for item in items)


class JSONFormatter(Formatter):
    def format_transcript(self, items: Sequence[TranscriptItem]) -> str:
        return json.dumps([item.model_dump() for item in items], ensure_ascii=False)


class _CueFormatter(Formatter):
    """Shared cue layout of SRT and WebVTT."""

    separator = "."
    header = ""

    def _cue_label(self, index: int) -> str | None:
        return None

    def format_transcript(self, items: Sequence[TranscriptItem]) -> str:
        cues = []
        for i, item in enumerate(items):
            end = item.start + item.duration
            # Cues must not overlap the next one.
            if i + 1 < len(items) and items[i + 1].start < end:
                end = items[i + 1].start
            timing = (
                f"{format_cue_time(item.start, self.separator)} --> "
                f"{format_cue_time(end, self.separator)}"
            )
            label = self._cue_label(i + 1)
            lines = [label, timing, item.text] if label else [timing, item.text]
            cues.append("\n".join(lines))
        return self.header + "\n\n".join(cues) + "\n"


class SRTFormatter(_CueFormatter):
    separator = ","

    def _cue_label(self, index: int) -> str | None:
        return str(index)


class WebVTTFormatter(_CueFormatter):
    header = "WEBVTT\n\n"


FORMATTERS: dict[str, type[Formatter]] = {
    "text": TextFormatter,
    "json": JSONFormatter,
    "srt": SRTFormatter,
    "webvtt": WebVTTFormatter,
}


def get_formatter(name: str) -> Formatter:
    try:
        return FORMATTERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown format {name!r}, expected one of: {', '.join(FORMATTERS)}"
        ) from None

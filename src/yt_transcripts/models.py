"""Data models for transcript results."""

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict


class TranscriptItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    start: float
    duration: float


class TranslationLanguage(BaseModel):
    model_config = ConfigDict(frozen=True)

    language: str
    language_code: str


class BatchResult(NamedTuple):
    """Transcripts keyed by video id, plus the ids that could not be retrieved."""

    successes: dict[str, list[TranscriptItem]]
    failures: list[str]

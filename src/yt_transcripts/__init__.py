"""List, select, fetch and translate YouTube transcripts."""

from .api import DEFAULT_LANGUAGES, YouTubeTranscriptApi
from .errors import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    ResponseParseError,
    TooManyRequests,
    TranscriptsDisabled,
    TranslationUnavailable,
    TransportFailure,
    UnsupportedFeature,
    VideoUnavailable,
)
from .models import BatchResult, TranscriptItem, TranslationLanguage
from .transcripts import Transcript, TranscriptList, TranscriptListFetcher

__all__ = [
    "DEFAULT_LANGUAGES",
    "YouTubeTranscriptApi",
    "CouldNotRetrieveTranscript",
    "NoTranscriptFound",
    "ResponseParseError",
    "TooManyRequests",
    "TranscriptsDisabled",
    "TranslationUnavailable",
    "TransportFailure",
    "UnsupportedFeature",
    "VideoUnavailable",
    "BatchResult",
    "TranscriptItem",
    "TranslationLanguage",
    "Transcript",
    "TranscriptList",
    "TranscriptListFetcher",
]

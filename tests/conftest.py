"""Shared test fixtures."""

import json

import httpx
import pytest

from yt_transcripts.models import TranscriptItem

WATCH_URL = "https://www.youtube.com/watch"
TIMEDTEXT_URL = "https://www.youtube.com/api/timedtext"


def _caption_track(video_id, language_code, name, generated=False, translatable=True):
    track = {
        "baseUrl": f"{TIMEDTEXT_URL}?v={video_id}&lang={language_code}",
        "name": {"simpleText": name},
        "languageCode": language_code,
        "isTranslatable": translatable,
    }
    if generated:
        track["baseUrl"] += "&kind=asr"
        track["kind"] = "asr"
    return track


@pytest.fixture
def captions_json():
    """Caption data of a video with manual en/fr tracks and generated de/en tracks."""
    video_id = "dQw4w9WgXcQ"
    return {
        "captionTracks": [
            _caption_track(video_id, "en", "English"),
            _caption_track(video_id, "fr", "Français", translatable=False),
            _caption_track(video_id, "de", "Deutsch (automatisch erzeugt)", generated=True),
            _caption_track(video_id, "en", "English (auto-generated)", generated=True),
        ],
        "translationLanguages": [
            {"languageCode": "es", "languageName": {"simpleText": "Spanish"}},
            {"languageCode": "it", "languageName": {"simpleText": "Italian"}},
        ],
    }


@pytest.fixture
def make_watch_page():
    def _make(captions=None, playable=True, recaptcha=False):
        parts = ["<html><body><script>var ytInitialPlayerResponse = {"]
        if playable:
            parts.append('"playabilityStatus":{"status":"OK"},')
        if captions is not None:
            payload = json.dumps({"playerCaptionsTracklistRenderer": captions})
            parts.append(f'"captions":{payload},')
        parts.append('"videoDetails":{"videoId":"dQw4w9WgXcQ"}};</script>')
        if recaptcha:
            parts.append('<div class="g-recaptcha"></div>')
        parts.append("</body></html>")
        return "".join(parts)

    return _make


@pytest.fixture
def make_timed_text():
    def _make(*lines):
        body = "".join(
            f'<text start="{start}" dur="{dur}">{text}</text>' for text, start, dur in lines
        )
        return f'<?xml version="1.0" encoding="utf-8" ?><transcript>{body}</transcript>'

    return _make


@pytest.fixture
def timed_text_responder(make_timed_text):
    """respx side effect that answers with a transcript naming the served language."""

    def _respond(request):
        params = request.url.params
        language = params.get("tlang") or params["lang"]
        kind = params.get("kind", "manual")
        return httpx.Response(
            200,
            text=make_timed_text(
                (f"hello {language} {kind}", 0.0, 1.5),
                ("second line", 1.5, 2.0),
            ),
        )

    return _respond


@pytest.fixture
def sample_items():
    return [
        TranscriptItem(text="Hello world", start=0.0, duration=2.5),
        TranscriptItem(text="this is a test", start=2.5, duration=3.0),
        TranscriptItem(text="goodbye world", start=5.5, duration=2.0),
    ]

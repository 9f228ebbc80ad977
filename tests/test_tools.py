"""Tests for MCP tool functions."""

import pytest
from unittest.mock import MagicMock

import httpx

from yt_transcripts import server
from yt_transcripts.errors import TranscriptsDisabled
from yt_transcripts.models import BatchResult
from yt_transcripts.transcripts import TranscriptList


@pytest.fixture
def transcript_list(captions_json):
    return TranscriptList.build(httpx.Client(), "dQw4w9WgXcQ", captions_json)


@pytest.fixture(autouse=True)
def setup_server_state(transcript_list, sample_items):
    """Set up server module state for testing."""
    mock_api = MagicMock()
    mock_api.list_transcripts = MagicMock(return_value=transcript_list)
    mock_api.get_transcripts = MagicMock(
        return_value=BatchResult({"dQw4w9WgXcQ": sample_items}, [])
    )

    server._api = mock_api
    server._settings = MagicMock()
    server._settings.rate_limit_per_minute = 100
    server._settings.max_batch_size = 3
    server._settings.default_languages = ["en"]
    server._rate_window.clear()
    yield
    server._rate_window.clear()


@pytest.fixture
def fetched(monkeypatch, sample_items):
    """Make every transcript fetch return the sample items without network."""
    calls = []

    def fake_fetch(self):
        calls.append((self.language_code, self.is_generated))
        return sample_items

    monkeypatch.setattr("yt_transcripts.transcripts.Transcript.fetch", fake_fetch)
    return calls


class TestListTranscripts:
    @pytest.mark.asyncio
    async def test_lists_tracks(self):
        result = await server.list_transcripts("https://youtu.be/dQw4w9WgXcQ")
        assert "## Transcripts: dQw4w9WgXcQ" in result
        assert "(GENERATED)" in result
        server._api.list_transcripts.assert_called_once_with("dQw4w9WgXcQ")

    @pytest.mark.asyncio
    async def test_invalid_url(self):
        result = await server.list_transcripts("not-a-url")
        assert "Error: Invalid YouTube URL" in result

    @pytest.mark.asyncio
    async def test_error_is_rendered(self):
        server._api.list_transcripts.side_effect = TranscriptsDisabled("dQw4w9WgXcQ")
        result = await server.list_transcripts("dQw4w9WgXcQ")
        assert result.startswith("Error listing transcripts for dQw4w9WgXcQ")


class TestGetTranscript:
    @pytest.mark.asyncio
    async def test_default_language(self, fetched):
        result = await server.get_transcript("dQw4w9WgXcQ")
        assert "**Language:** en (English) | **Kind:** manual" in result
        assert "Hello world\nthis is a test" in result
        assert fetched == [("en", False)]

    @pytest.mark.asyncio
    async def test_priority_languages(self, fetched):
        result = await server.get_transcript("dQw4w9WgXcQ", languages=["de", "en"])
        assert "**Kind:** generated" in result
        assert fetched == [("de", True)]

    @pytest.mark.asyncio
    async def test_explicit_translation(self, fetched):
        result = await server.get_transcript("dQw4w9WgXcQ", translate_to="es")
        assert "**Language:** es (Spanish)" in result

    @pytest.mark.asyncio
    async def test_translation_unavailable(self, fetched):
        result = await server.get_transcript("dQw4w9WgXcQ", languages=["fr"], translate_to="es")
        assert result.startswith("Error fetching transcript for dQw4w9WgXcQ")
        assert fetched == []

    @pytest.mark.asyncio
    async def test_no_transcript(self, fetched):
        result = await server.get_transcript("dQw4w9WgXcQ", languages=["es"])
        assert "No transcripts were found" in result

    @pytest.mark.asyncio
    async def test_segments_format(self, fetched):
        result = await server.get_transcript("dQw4w9WgXcQ", format="segments")
        assert "**[0:02]** this is a test" in result

    @pytest.mark.asyncio
    async def test_srt_format(self, fetched):
        result = await server.get_transcript("dQw4w9WgXcQ", format="srt")
        assert "00:00:00,000 --> 00:00:02,500" in result


class TestBatchTranscripts:
    @pytest.mark.asyncio
    async def test_batch(self):
        result = await server.batch_transcripts(["dQw4w9WgXcQ"])
        assert "## Batch Transcripts (1 videos)" in result
        assert "**Segments:** 3" in result
        server._api.get_transcripts.assert_called_once_with(["dQw4w9WgXcQ"], ["en"], True)

    @pytest.mark.asyncio
    async def test_failures_listed(self):
        server._api.get_transcripts.return_value = BatchResult({}, ["dQw4w9WgXcQ"])
        result = await server.batch_transcripts(["dQw4w9WgXcQ"])
        assert "### Failed\n- dQw4w9WgXcQ" in result

    @pytest.mark.asyncio
    async def test_fail_fast_aborts(self):
        server._api.get_transcripts.side_effect = TranscriptsDisabled("dQw4w9WgXcQ")
        result = await server.batch_transcripts(["dQw4w9WgXcQ"], continue_after_error=False)
        assert result.startswith("Error: batch aborted at dQw4w9WgXcQ")

    @pytest.mark.asyncio
    async def test_batch_too_many(self):
        urls = [f"vid{i:08d}xx" for i in range(4)]
        result = await server.batch_transcripts(urls)
        assert "Maximum 3 videos" in result

    @pytest.mark.asyncio
    async def test_batch_invalid_url(self):
        result = await server.batch_transcripts(["not-valid"])
        assert "Invalid URL or video ID" in result


class TestRateLimit:
    @pytest.mark.asyncio
    async def test_rate_limit_exceeded(self):
        server._settings.rate_limit_per_minute = 2
        await server.list_transcripts("dQw4w9WgXcQ")
        await server.list_transcripts("dQw4w9WgXcQ")
        with pytest.raises(ValueError, match="Rate limit exceeded"):
            server._check_rate_limit()

"""Tests for server startup."""

import pytest
from unittest.mock import patch

from yt_transcripts.api import YouTubeTranscriptApi
from yt_transcripts.config import Settings
from yt_transcripts.server import mcp, app_lifespan


class TestServerStartup:
    @pytest.mark.asyncio
    async def test_lifespan_owns_api(self):
        with patch("yt_transcripts.server.Settings", return_value=Settings(rate_limit_per_minute=5)):
            async with app_lifespan(mcp):
                from yt_transcripts import server
                assert isinstance(server._api, YouTubeTranscriptApi)
                assert server._settings.rate_limit_per_minute == 5
                api = server._api

        assert api._http_client.is_closed

    def test_mcp_name(self):
        assert mcp.name == "YouTube Transcripts"

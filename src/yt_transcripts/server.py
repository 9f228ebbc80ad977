"""YouTube Transcripts MCP Server."""

import asyncio
import logging
import sys
import time
from collections import deque
from contextlib import asynccontextmanager
from functools import partial
from typing import Annotated, Literal

from pydantic import Field
from mcp.server.fastmcp import FastMCP

from yt_transcripts.api import YouTubeTranscriptApi
from yt_transcripts.config import Settings, Transport
from yt_transcripts.errors import CouldNotRetrieveTranscript
from yt_transcripts.formatters import get_formatter
from yt_transcripts.models import TranscriptItem
from yt_transcripts.utils import extract_video_id, format_timestamp

# Logging to stderr (MCP convention)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("yt-transcripts")

# Module-level state
_api = None
_settings = None
_rate_window = deque()

# Tool annotations for read-only API tools
TOOL_ANNOTATIONS = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "openWorldHint": True,
}


@asynccontextmanager
async def app_lifespan(server: FastMCP):
    global _api, _settings, _rate_window
    _settings = Settings()
    _rate_window = deque()
    _api = YouTubeTranscriptApi(settings=_settings)
    logger.info("Server started")
    try:
        yield
    finally:
        _api.close()
        logger.info("Server stopped")


mcp = FastMCP(
    "YouTube Transcripts",
    instructions="List, fetch and translate YouTube video transcripts",
    lifespan=app_lifespan,
)


def _check_rate_limit():
    """Sliding window rate limit."""
    now = time.time()
    limit = (_settings.rate_limit_per_minute if _settings else 30)
    while _rate_window and _rate_window[0] < now - 60:
        _rate_window.popleft()
    if len(_rate_window) >= limit:
        raise ValueError(
            f"Rate limit exceeded ({limit}/min). Try again in a few seconds."
        )
    _rate_window.append(now)


async def _run(func, *args, **kwargs):
    """Run a blocking api call in the default executor."""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))


def _languages_or_default(languages: list[str] | None) -> list[str]:
    if languages:
        return languages
    return list(_settings.default_languages) if _settings else ["en"]


def _items_to_markdown(items: list[TranscriptItem]) -> str:
    """Format transcript items as markdown with timestamps."""
    return "\n".join(f"**[{format_timestamp(item.start)}]** {item.text}" for item in items)


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def list_transcripts(
    url: Annotated[str, Field(description="YouTube video URL or video ID (e.g. https://youtube.com/watch?v=dQw4w9WgXcQ or just dQw4w9WgXcQ)")],
) -> str:
    """List the manually created and generated transcripts available for a YouTube video, and the languages they can be translated to."""
    _check_rate_limit()

    video_id = extract_video_id(url)
    if not video_id:
        return f"Error: Invalid YouTube URL or video ID: {url}"

    try:
        transcript_list = await _run(_api.list_transcripts, video_id)
    except CouldNotRetrieveTranscript as e:
        return f"Error listing transcripts for {video_id}: {e}"

    return f"## Transcripts: {video_id}\n\n{transcript_list}"


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def get_transcript(
    url: Annotated[str, Field(description="YouTube video URL or video ID (e.g. https://youtube.com/watch?v=dQw4w9WgXcQ or just dQw4w9WgXcQ)")],
    languages: Annotated[list[str] | None, Field(default=None, description="Language codes in descending priority (e.g. [\"de\", \"en\"]); the first one available is used")] = None,
    format: Annotated[Literal["text", "segments", "json", "srt", "webvtt"], Field(default="text", description="Output format: text, timestamped segments, json, srt or webvtt")] = "text",
    translate_to: Annotated[str | None, Field(default=None, description="Optional language code to translate the selected transcript to")] = None,
) -> str:
    """Get the transcript of a YouTube video in the first available language, optionally translated."""
    _check_rate_limit()

    video_id = extract_video_id(url)
    if not video_id:
        return f"Error: Invalid YouTube URL or video ID: {url}"

    languages = _languages_or_default(languages)
    try:
        transcript_list = await _run(_api.list_transcripts, video_id)
        transcript = transcript_list.find_transcript(languages)
        if translate_to:
            transcript = transcript.translate(translate_to)
        items = await _run(transcript.fetch)
    except CouldNotRetrieveTranscript as e:
        return f"Error fetching transcript for {video_id}: {e}"

    kind = "generated" if transcript.is_generated else "manual"
    header = (
        f"## Transcript: {video_id}\n"
        f"**Language:** {transcript.language_code} ({transcript.language}) | **Kind:** {kind}\n"
    )

    if format == "segments":
        body = _items_to_markdown(items)
    else:
        body = get_formatter(format).format_transcript(items)

    return f"{header}\n{body}"


@mcp.tool(annotations=TOOL_ANNOTATIONS)
async def batch_transcripts(
    urls: Annotated[list[str], Field(description="List of YouTube video URLs or IDs to process")],
    languages: Annotated[list[str] | None, Field(default=None, description="Language codes in descending priority, applied to every video")] = None,
    continue_after_error: Annotated[bool, Field(default=True, description="Keep going when a video has no matching transcript instead of aborting the whole batch")] = True,
) -> str:
    """Get transcripts for multiple YouTube videos in a single request."""
    _check_rate_limit()

    max_batch = _settings.max_batch_size if _settings else 10
    if len(urls) > max_batch:
        return f"Error: Maximum {max_batch} videos per batch."

    video_ids = []
    for u in urls:
        vid = extract_video_id(u)
        if vid is None:
            return f"Error: Invalid URL or video ID: {u}"
        video_ids.append(vid)

    try:
        successes, failures = await _run(
            _api.get_transcripts,
            video_ids,
            _languages_or_default(languages),
            continue_after_error,
        )
    except CouldNotRetrieveTranscript as e:
        return f"Error: batch aborted at {e.video_id}: {e}"

    results = []
    for vid in video_ids:
        if vid not in successes:
            continue
        text = " ".join(item.text for item in successes[vid])
        text_preview = text[:500] + ("..." if len(text) > 500 else "")
        results.append(
            f"### {vid}\n**Segments:** {len(successes[vid])}\n\n{text_preview}\n"
        )

    header = f"## Batch Transcripts ({len(video_ids)} videos)\n"
    body = header + "\n---\n\n".join(results)
    if failures:
        body += "\n### Failed\n" + "\n".join(f"- {vid}" for vid in failures) + "\n"
    return body


# -- MCP Resources --


@mcp.resource("youtube://help")
def help_resource() -> str:
    """Usage guide for the YouTube Transcripts MCP server."""
    return """# YouTube Transcripts MCP Server - Help Guide

## Available Tools

### list_transcripts
Show which transcripts a video has: manually created, generated, and the
languages they can be translated to.
- Example: list_transcripts(url="VIDEO_ID")

### get_transcript
Fetch a transcript, choosing the first available language of a priority list.
- Manually created and generated transcripts are both eligible
- Translation only happens when translate_to is given
- Formats: text, segments, json, srt, webvtt
- Example: get_transcript(url="VIDEO_ID", languages=["de", "en"], translate_to="fr")

### batch_transcripts
Fetch several videos with the same language priority.
- continue_after_error=false aborts on the first failing video
- Example: batch_transcripts(urls=["VIDEO1", "VIDEO2"], languages=["en"])
"""


def main():
    settings = Settings()
    if settings.transport == Transport.STREAMABLE_HTTP:
        mcp.run(transport="streamable-http")
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

"""Entry point for listing, selecting and fetching YouTube transcripts."""

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import NamedTuple

import httpx

from yt_transcripts.config import Settings, settings as default_settings
from yt_transcripts.errors import UnsupportedFeature
from yt_transcripts.models import BatchResult, TranscriptItem
from yt_transcripts.transcripts import TranscriptList, TranscriptListFetcher

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES = ("en",)


class _Outcome(NamedTuple):
    video_id: str
    items: list[TranscriptItem] | None = None
    error: Exception | None = None


class YouTubeTranscriptApi:
    """Retrieves transcripts for one or many videos.

    The api owns the HTTP clients it creates and closes them in ``close()``;
    use it as a context manager::

        with YouTubeTranscriptApi() as api:
            transcript_list = api.list_transcripts("dQw4w9WgXcQ")
            transcript = transcript_list.find_transcript(["de", "en"])
            items = transcript.fetch()
            translated = transcript.translate("fr").fetch()

    A client passed in via ``http_client`` is used for every request made
    without proxies and is left open. One extra client is kept per distinct
    ``proxies`` mapping, at most ``Settings.max_proxied_clients`` of them;
    the least recently used one is closed when the limit is reached.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.Client | None = None,
    ):
        self._settings = settings or default_settings
        self._owns_default_client = http_client is None
        self._http_client = http_client or self._make_client()
        self._proxied_clients: dict[tuple, httpx.Client] = {}

    def __enter__(self) -> "YouTubeTranscriptApi":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        for client in self._proxied_clients.values():
            client.close()
        self._proxied_clients.clear()
        if self._owns_default_client:
            self._http_client.close()

    def list_transcripts(
        self,
        video_id: str,
        proxies: Mapping[str, str] | None = None,
        cookies: str | None = None,
    ) -> TranscriptList:
        """Retrieve the transcripts available for a video.

        Args:
            video_id: YouTube video id
            proxies: mapping of URL scheme to proxy URL, e.g.
                ``{"http": "http://proxy:3128", "https": "http://proxy:3128"}``
            cookies: path to a cookie file; authenticated retrieval is not
                implemented and any value raises ``UnsupportedFeature``

        Returns:
            TranscriptList for the video
        """
        if cookies:
            self._load_cookies(cookies)

        return TranscriptListFetcher(self._client_for(proxies)).fetch(video_id)

    def get_transcript(
        self,
        video_id: str,
        languages: Sequence[str] = DEFAULT_LANGUAGES,
        proxies: Mapping[str, str] | None = None,
        cookies: str | None = None,
    ) -> list[TranscriptItem]:
        """Fetch the transcript of a single video.

        Shortcut for ``list_transcripts(video_id).find_transcript(languages).fetch()``.
        ``languages`` is ordered by descending priority: with ``["de", "en"]``
        the German transcript is returned when it exists, the English one
        otherwise.
        """
        transcript = self.list_transcripts(video_id, proxies, cookies).find_transcript(
            languages
        )
        logger.debug(
            f"Selected {transcript.language_code} "
            f"({'generated' if transcript.is_generated else 'manual'}) for {video_id}"
        )
        return transcript.fetch()

    def get_transcripts(
        self,
        video_ids: Iterable[str],
        languages: Sequence[str] = DEFAULT_LANGUAGES,
        continue_after_error: bool = False,
        proxies: Mapping[str, str] | None = None,
        cookies: str | None = None,
    ) -> BatchResult:
        """Fetch transcripts for several videos, one after another.

        Args:
            video_ids: YouTube video ids, processed in order
            languages: language codes by descending priority
            continue_after_error: record failing videos and carry on instead
                of raising the first error
            proxies: see ``list_transcripts``
            cookies: see ``list_transcripts``

        Returns:
            BatchResult of transcripts keyed by video id and the ids that
            could not be retrieved, in input order
        """
        successes: dict[str, list[TranscriptItem]] = {}
        failures: list[str] = []

        for outcome in self._retrieve_each(video_ids, languages, proxies, cookies):
            if outcome.error is None:
                successes[outcome.video_id] = outcome.items
                continue
            if not continue_after_error:
                raise outcome.error
            logger.warning(f"Could not retrieve transcript for {outcome.video_id}: {outcome.error}")
            failures.append(outcome.video_id)

        return BatchResult(successes, failures)

    def _retrieve_each(
        self,
        video_ids: Iterable[str],
        languages: Sequence[str],
        proxies: Mapping[str, str] | None,
        cookies: str | None,
    ) -> Iterator[_Outcome]:
        for video_id in video_ids:
            try:
                items = self.get_transcript(video_id, languages, proxies, cookies)
            except Exception as e:
                yield _Outcome(video_id, error=e)
            else:
                yield _Outcome(video_id, items=items)

    def _load_cookies(self, cookies: str):
        raise UnsupportedFeature("Cookie based authentication")

    def _client_for(self, proxies: Mapping[str, str] | None) -> httpx.Client:
        if not proxies:
            return self._http_client

        key = tuple(sorted(proxies.items()))
        client = self._proxied_clients.pop(key, None)
        if client is None:
            # Least recently used client goes first.
            while self._proxied_clients and len(self._proxied_clients) >= self._settings.max_proxied_clients:
                oldest = next(iter(self._proxied_clients))
                self._proxied_clients.pop(oldest).close()
            mounts = {
                f"{scheme.rstrip(':/')}://": httpx.HTTPTransport(proxy=proxy)
                for scheme, proxy in proxies.items()
            }
            client = self._make_client(mounts=mounts)
        self._proxied_clients[key] = client
        return client

    def _make_client(self, **kwargs) -> httpx.Client:
        return httpx.Client(
            headers={"Accept-Language": self._settings.accept_language},
            timeout=self._settings.request_timeout,
            follow_redirects=True,
            **kwargs,
        )

"""
YouTube Data API v3 access.

``YouTubeSearch`` is the search adapter used by the ``youtube_search`` tool and
only needs an API key. ``YouTubeAccount`` covers the signed-in user's liked
videos, watch history and ratings; it mints a short-lived access token from the
long-lived refresh token on every call, using google-auth.
"""

import asyncio
import logging
from typing import Any, Iterable, Optional

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport import Request as AuthRequest
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from tubechat.errors import AccountNotConfigured, InvalidArgument, ProviderError
from tubechat.models import VideoRecord

logger = logging.getLogger(__name__)

YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3"
TOKEN_URL = "https://oauth2.googleapis.com/token"
SCOPES = (
    "https://www.googleapis.com/auth/youtube.force-ssl",
    "https://www.googleapis.com/auth/youtube.readonly",
)

DEFAULT_MAX_RESULTS = 5
MAX_RESULTS_LIMIT = 50
PLAYLIST_PAGE_SIZE = 20

LIKED_PLAYLIST = "LL"
HISTORY_PLAYLIST = "HL"

_THUMBNAIL_PREFERENCE = ("medium", "high", "default")


def _thumbnail(snippet: dict[str, Any]) -> str:
    thumbnails = snippet.get("thumbnails") or {}
    for size in _THUMBNAIL_PREFERENCE:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return ""


def _search_rows(items: Iterable[dict[str, Any]]) -> list[VideoRecord]:
    rows: list[VideoRecord] = []
    for item in items:
        video_id = (item.get("id") or {}).get("videoId")
        if not video_id:
            continue
        snippet = item.get("snippet") or {}
        rows.append(
            VideoRecord(
                video_id=video_id,
                title=snippet.get("title", ""),
                thumbnail_url=_thumbnail(snippet),
                channel_title=snippet.get("channelTitle", ""),
                published_at=snippet.get("publishedAt", ""),
            )
        )
    return rows


def _playlist_rows(items: Iterable[dict[str, Any]]) -> list[VideoRecord]:
    rows: list[VideoRecord] = []
    for item in items:
        snippet = item.get("snippet") or {}
        video_id = (snippet.get("resourceId") or {}).get("videoId")
        if not video_id:
            continue
        rows.append(
            VideoRecord(
                video_id=video_id,
                title=snippet.get("title", ""),
                thumbnail_url=_thumbnail(snippet),
                channel_title=snippet.get("videoOwnerChannelTitle", ""),
                published_at=snippet.get("publishedAt", ""),
            )
        )
    return rows


def _provider_error(action: str, err: httpx.HTTPError) -> ProviderError:
    if isinstance(err, httpx.HTTPStatusError):
        status = err.response.status_code
        return ProviderError(f"YouTube {action} failed with HTTP {status}", err, status=status)
    return ProviderError(f"YouTube {action} failed", err)


def validate_search_args(query: Any, max_results: Any) -> None:
    if not isinstance(query, str) or not query.strip():
        raise InvalidArgument("search requires a non-empty 'query' string")
    if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results <= 0:
        raise InvalidArgument("'maxResults' must be a positive integer")


class YouTubeSearch:
    def __init__(
        self,
        api_key: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def search(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> list[VideoRecord]:
        """Search YouTube for videos, in the provider's relevance order."""
        validate_search_args(query, max_results)
        count = min(max_results, MAX_RESULTS_LIMIT)

        logger.info("Searching YouTube (maxResults=%d, query length %d)", count, len(query))
        try:
            response = await self._client.get(
                f"{YOUTUBE_API_URL}/search",
                params={
                    "part": "snippet",
                    "type": "video",
                    "q": query,
                    "maxResults": count,
                },
                # Header, not the key= parameter: request URLs end up in logs.
                headers={"X-Goog-Api-Key": self._api_key},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise _provider_error("search", e) from e
        except ValueError as e:
            raise ProviderError("YouTube search returned invalid JSON", e) from e

        videos = _search_rows(data.get("items", []))[:count]
        logger.info("YouTube search: %d result(s)", len(videos))
        return videos

    async def aclose(self) -> None:
        await self._client.aclose()


class YouTubeAccount:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        auth_request: Optional[AuthRequest] = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._auth_request = auth_request or Request()
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def configured(self) -> bool:
        return bool(self._client_id and self._client_secret and self._refresh_token)

    async def _access_token(self) -> str:
        if not self.configured:
            raise AccountNotConfigured(
                "YouTube account credentials are not configured. "
                "Run `python -m tubechat.auth` and set YOUTUBE_REFRESH_TOKEN."
            )
        creds = Credentials(
            token=None,
            refresh_token=self._refresh_token,
            token_uri=TOKEN_URL,
            client_id=self._client_id,
            client_secret=self._client_secret,
            scopes=SCOPES,
        )
        try:
            await asyncio.to_thread(creds.refresh, self._auth_request)
        except GoogleAuthError as e:
            raise ProviderError("YouTube token refresh failed", e) from e
        if not creds.token:
            raise ProviderError("YouTube token refresh returned no access token")
        return creds.token

    async def _playlist(self, playlist_id: str, max_results: int) -> list[VideoRecord]:
        token = await self._access_token()
        try:
            response = await self._client.get(
                f"{YOUTUBE_API_URL}/playlistItems",
                params={
                    "part": "snippet",
                    "playlistId": playlist_id,
                    "maxResults": min(max(1, max_results), MAX_RESULTS_LIMIT),
                },
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise _provider_error(f"playlist {playlist_id}", e) from e
        except ValueError as e:
            raise ProviderError("YouTube playlist returned invalid JSON", e) from e
        return _playlist_rows(data.get("items", []))

    async def liked(self, max_results: int = PLAYLIST_PAGE_SIZE) -> list[VideoRecord]:
        return await self._playlist(LIKED_PLAYLIST, max_results)

    async def history(self, max_results: int = PLAYLIST_PAGE_SIZE) -> list[VideoRecord]:
        return await self._playlist(HISTORY_PLAYLIST, max_results)

    async def rate(self, video_id: str, rating: str) -> None:
        """Set the user's rating for a video: ``like``, ``dislike`` or ``none``."""
        if not isinstance(video_id, str) or not video_id.strip():
            raise InvalidArgument("Missing videoId")
        token = await self._access_token()
        try:
            response = await self._client.post(
                f"{YOUTUBE_API_URL}/videos/rate",
                params={"id": video_id, "rating": rating},
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise _provider_error("rate", e) from e
        logger.info("Rated video %s as %s", video_id, rating)

    async def like(self, video_id: str) -> None:
        await self.rate(video_id, "like")

    async def unlike(self, video_id: str) -> None:
        await self.rate(video_id, "none")

    async def aclose(self) -> None:
        await self._client.aclose()

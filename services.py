# services.py
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from config import Config
from errors import DataSourceError, InvalidRequest, NotFound, SourceError, TransportError
from models import VideoRecord
from normalize import parse_items

logger = logging.getLogger(__name__)


def _require_text(value: str, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequest(f"{what} is required")
    return value.strip()


def _require_limit(limit: int) -> int:
    if not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0:
        raise InvalidRequest(f"limit must be a positive integer, got {limit!r}")
    return limit


def _require_region(region: str) -> str:
    if not isinstance(region, str) or len(region) != 2 or not region.isalpha():
        raise InvalidRequest(f"region must be a two-letter country code, got {region!r}")
    return region.upper()


class YouTubeDataSource:
    """A service to handle interactions with the YouTube Data API.

    Every call makes exactly one request. Results come back normalized, and
    every failure comes back as a ``DataSourceError`` subclass.
    """

    def __init__(self, config: Config, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._client = httpx.AsyncClient(base_url=config.API_BASE_URL.rstrip("/") + "/", transport=transport)

    async def __aenter__(self) -> "YouTubeDataSource":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def search(self, query: str, limit: int) -> List[VideoRecord]:
        query = _require_text(query, "Search query")
        payload = await self._get("search", {
            "part": "snippet",
            "q": query,
            "maxResults": _require_limit(limit),
            "type": "video",
        })
        return parse_items(payload.get("items"))

    async def fetch_trending(self, region: str, limit: int) -> List[VideoRecord]:
        return await self._fetch_chart(region, limit)

    async def fetch_popular_music(self, region: str, limit: int) -> List[VideoRecord]:
        return await self._fetch_chart(region, limit, category_id=self.config.MUSIC_CATEGORY_ID)

    async def fetch_detail(self, video_id: str) -> VideoRecord:
        video_id = _require_text(video_id, "Video ID")
        payload = await self._get("videos", {
            "part": "snippet,contentDetails,statistics",
            "id": video_id,
        })
        records = parse_items(payload.get("items"), with_details=True)
        if not records:
            raise NotFound(video_id)
        return records[0]

    async def fetch_related(self, video_id: str, limit: int) -> List[VideoRecord]:
        """Related videos are optional extras: any failure yields an empty list."""
        try:
            payload = await self._get("search", {
                "part": "snippet",
                "relatedToVideoId": _require_text(video_id, "Video ID"),
                "type": "video",
                "maxResults": _require_limit(limit),
            })
        except DataSourceError as exc:
            logger.warning("Related videos unavailable for %s: %s", video_id, exc)
            return []
        items = payload.get("items")
        if not isinstance(items, list):
            logger.warning("No related videos in response for %s", video_id)
            return []
        return parse_items(items)

    async def fetch_channel_videos(self, channel_id: str, limit: int) -> List[VideoRecord]:
        payload = await self._get("search", {
            "part": "snippet",
            "channelId": _require_text(channel_id, "Channel ID"),
            "order": "date",
            "type": "video",
            "maxResults": _require_limit(limit),
        })
        return parse_items(payload.get("items"))

    async def _fetch_chart(self, region: str, limit: int, category_id: Optional[str] = None) -> List[VideoRecord]:
        params: Dict[str, Any] = {
            "part": "snippet,contentDetails,statistics",
            "chart": "mostPopular",
            "regionCode": _require_region(region),
            "maxResults": _require_limit(limit),
        }
        if category_id:
            params["videoCategoryId"] = category_id
        payload = await self._get("videos", params)
        return parse_items(payload.get("items"), with_details=True)

    async def _get(self, endpoint: str, params: Dict[str, Any]) -> Mapping[str, Any]:
        """Issues one GET and unwraps the response envelope."""
        logger.debug("GET %s %s", endpoint, params)
        try:
            response = await self._client.get(endpoint, params={**params, "key": self.config.API_KEY})
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {endpoint} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        # The data API reports its own errors with a JSON envelope and a 4xx status.
        if isinstance(payload, Mapping) and payload.get("error"):
            error = payload["error"]
            if isinstance(error, Mapping):
                raise SourceError(str(error.get("message") or "YouTube API Error"), code=error.get("code"))
            raise SourceError(str(error))

        if response.is_error:
            raise TransportError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        if not isinstance(payload, Mapping):
            raise TransportError(f"Invalid JSON in response from {endpoint}", status_code=response.status_code)
        return payload

# normalize.py
"""Turns raw data API items into VideoRecord instances.

Every missing field is replaced by one of the constants below, so a malformed
item can only ever cost its own record (when no id can be found), never the
whole response.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from errors import NormalizationSkip
from models import VideoRecord

logger = logging.getLogger(__name__)

PLACEHOLDER_THUMBNAIL = "https://via.placeholder.com/480x360.png?text=No+Thumbnail"
UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_CHANNEL = "Unknown Channel"
EMPTY_DESCRIPTION = ""
ZERO_DURATION = "PT0S"
ZERO_COUNT = "0"

THUMBNAIL_PREFERENCE = ("high", "medium", "default")


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any, fallback: str) -> str:
    if isinstance(value, str) and value:
        return value
    return fallback


def extract_id(item: Mapping[str, Any]) -> str:
    """Search results nest the id as ``{"videoId": ...}``, video lookups use a plain string."""
    raw_id = item.get("id")
    if isinstance(raw_id, Mapping):
        raw_id = raw_id.get("videoId")
    if not isinstance(raw_id, str) or not raw_id.strip():
        raise NormalizationSkip("item has no usable id")
    return raw_id


def pick_thumbnail(thumbnails: Any) -> str:
    thumbnails = _mapping(thumbnails)
    for size in THUMBNAIL_PREFERENCE:
        url = _mapping(thumbnails.get(size)).get("url")
        if isinstance(url, str) and url:
            return url
    return PLACEHOLDER_THUMBNAIL


def to_count(value: Any) -> int:
    """Counts arrive as decimal strings; anything unparsable counts as zero."""
    if value is None:
        value = ZERO_COUNT
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparsable publishedAt %r, using current time", value)
    return datetime.now(timezone.utc)


def parse_video(item: Any, *, with_details: bool = False) -> VideoRecord:
    """Parses a single raw API item into our VideoRecord data model.

    ``with_details`` is set for items coming from the videos endpoint, which
    always asks for statistics and content details; those records get the zero
    defaults instead of ``None``.
    """
    if not isinstance(item, Mapping):
        raise NormalizationSkip("item is not an object")
    video_id = extract_id(item)
    snippet = _mapping(item.get("snippet"))

    duration = view_count = like_count = comment_count = None
    if with_details:
        details = _mapping(item.get("contentDetails"))
        statistics = _mapping(item.get("statistics"))
        duration = _text(details.get("duration"), ZERO_DURATION)
        view_count = to_count(statistics.get("viewCount"))
        like_count = to_count(statistics.get("likeCount"))
        comment_count = to_count(statistics.get("commentCount"))

    channel_id = snippet.get("channelId")
    return VideoRecord(
        id=video_id,
        title=_text(snippet.get("title"), UNKNOWN_TITLE),
        description=_text(snippet.get("description"), EMPTY_DESCRIPTION),
        thumbnail_url=pick_thumbnail(snippet.get("thumbnails")),
        channel_title=_text(snippet.get("channelTitle"), UNKNOWN_CHANNEL),
        published_at=parse_timestamp(snippet.get("publishedAt")),
        channel_id=channel_id if isinstance(channel_id, str) and channel_id else None,
        duration_iso8601=duration,
        view_count=view_count,
        like_count=like_count,
        comment_count=comment_count,
    )


def parse_items(items: Optional[Iterable[Any]], *, with_details: bool = False) -> List[VideoRecord]:
    """Normalizes a list of raw items in source order, dropping the ones without an id."""
    records: List[VideoRecord] = []
    skipped = 0
    for item in items or ():
        try:
            records.append(parse_video(item, with_details=with_details))
        except NormalizationSkip as exc:
            skipped += 1
            logger.debug("Dropping raw item: %s", exc)
    if skipped:
        logger.debug("Dropped %d of %d raw items", skipped, skipped + len(records))
    return records

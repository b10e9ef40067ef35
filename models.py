# models.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
EMBED_URL = "https://www.youtube.com/embed/{video_id}?autoplay=1"


@dataclass(frozen=True)
class VideoRecord:
    """A data class to hold the normalized details of a single video."""
    id: str
    title: str
    description: str
    thumbnail_url: str
    channel_title: str
    published_at: datetime
    channel_id: Optional[str] = None
    duration_iso8601: Optional[str] = None
    view_count: Optional[int] = None
    like_count: Optional[int] = None
    comment_count: Optional[int] = None

    @property
    def watch_url(self) -> str:
        return WATCH_URL.format(video_id=self.id)

    @property
    def embed_url(self) -> str:
        return EMBED_URL.format(video_id=self.id)


class SelectionPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class AppState:
    """A single object to hold the entire application state.

    Snapshots are never mutated; the store swaps in a new one on every change.
    """
    trending: List[VideoRecord] = field(default_factory=list)
    popular_music: List[VideoRecord] = field(default_factory=list)
    search_results: List[VideoRecord] = field(default_factory=list)
    related: List[VideoRecord] = field(default_factory=list)
    channel: List[VideoRecord] = field(default_factory=list)
    current_item: Optional[VideoRecord] = None
    selection_phase: SelectionPhase = SelectionPhase.IDLE
    is_loading: bool = False
    last_error: Optional[str] = None

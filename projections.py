# projections.py
"""Read-only views the screens render from an ``AppState`` snapshot.

Nothing in here fetches or mutates; every function is recomputed per render.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from models import AppState, SelectionPhase, VideoRecord

MADE_FOR_YOU_FALLBACK_COVERS = (
    "https://images.unsplash.com/photo-1511671782779-c97d3d27a1d4",
    "https://images.unsplash.com/photo-1459749411175-04bf5292ceea",
)


@dataclass(frozen=True)
class Tile:
    id: str
    title: str
    artist: str
    cover: str


@dataclass(frozen=True)
class PlaylistCard:
    id: str
    title: str
    subtitle: str
    description: str
    cover: str
    secondary_description: Optional[str] = None


@dataclass(frozen=True)
class HomeFeed:
    recently_played: List[Tile]
    made_for_you: List[PlaylistCard]
    trending_now: List[Tile]


def _tiles(videos: Sequence[VideoRecord]) -> List[Tile]:
    return [Tile(v.id, v.title, v.channel_title, v.thumbnail_url) for v in videos]


def home_feed(state: AppState) -> HomeFeed:
    popular = state.popular_music
    covers = [
        popular[i].thumbnail_url if len(popular) > i else fallback
        for i, fallback in enumerate(MADE_FOR_YOU_FALLBACK_COVERS)
    ]
    made_for_you = [
        PlaylistCard("1", "TRENDING", "Top Music", "Popular on YouTube Music", covers[0]),
        PlaylistCard(
            "2", "DISCOVERY", "New Releases", "Fresh music for you", covers[1],
            secondary_description="Based on trending videos",
        ),
    ]
    return HomeFeed(
        recently_played=_tiles(popular),
        made_for_you=made_for_you,
        trending_now=_tiles(state.trending),
    )


class ExploreCategory(str, Enum):
    FOR_YOU = "For You"
    CHARTS = "Charts"
    NEW = "New"
    GENRES = "Genres"
    MOODS = "Moods"


@dataclass(frozen=True)
class ExploreItem:
    key: str
    original_id: str
    title: str
    description: str
    thumbnail: str


@dataclass(frozen=True)
class ExploreView:
    title: str
    searching: bool
    items: List[ExploreItem]


def unique_keys(ids: Sequence[str]) -> List[str]:
    """Repeated ids get their list position appended so every key is distinct."""
    seen = set()
    keys = []
    for index, video_id in enumerate(ids):
        keys.append(f"{video_id}_{index}" if video_id in seen else video_id)
        seen.add(video_id)
    return keys


def _explore_items(videos: Sequence[VideoRecord]) -> List[ExploreItem]:
    keys = unique_keys([v.id for v in videos])
    return [
        ExploreItem(
            key=key,
            original_id=v.id,
            title=v.title,
            description=v.channel_title or f"{v.view_count or 0} views",
            thumbnail=v.thumbnail_url,
        )
        for key, v in zip(keys, videos)
    ]


def explore_view(state: AppState, category: ExploreCategory = ExploreCategory.FOR_YOU, query: str = "") -> ExploreView:
    query = query.strip()
    if query:
        return ExploreView(f'Results for "{query}"', True, _explore_items(state.search_results))

    if category is ExploreCategory.CHARTS:
        videos = state.trending
    elif category is ExploreCategory.NEW:
        videos = state.popular_music
    else:
        videos = list(state.trending[:3]) + list(state.popular_music[:3])
    return ExploreView(f"{category.value} Playlists", False, _explore_items(videos))


@dataclass(frozen=True)
class LibraryPlaylist:
    id: str
    title: str
    songs: int
    image: Optional[str]
    videos: Tuple[VideoRecord, ...] = ()


PLACEHOLDER_PLAYLISTS = (
    LibraryPlaylist("1", "Summer Vibes 2023", 45, None),
    LibraryPlaylist("2", "Workout Motivation", 32, None),
)


def library_playlists(state: AppState, query: str = "") -> List[LibraryPlaylist]:
    if state.trending:
        by_channel: Dict[str, List[VideoRecord]] = {}
        for video in state.trending:
            by_channel.setdefault(video.channel_title, []).append(video)
        playlists = [
            LibraryPlaylist(f"trending-{index}", f"{channel} Mix", len(videos), videos[0].thumbnail_url, tuple(videos))
            for index, (channel, videos) in enumerate(by_channel.items())
        ]
    else:
        playlists = list(PLACEHOLDER_PLAYLISTS)

    needle = query.strip().lower()
    if needle:
        playlists = [p for p in playlists if needle in p.title.lower()]
    return playlists


_DURATION_RE = re.compile(r"^P(?:\d+D)?T?(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")


def format_duration(duration: Optional[str]) -> str:
    """PT4M13S -> 4:13, PT1H2M3S -> 1:02:03."""
    if not duration:
        return "0:00"
    match = _DURATION_RE.match(duration)
    if not match:
        return "0:00"
    hours, minutes, seconds = (int(part or 0) for part in match.groups())
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_view_count(count: Optional[int]) -> str:
    if not count:
        return "0 views"
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M views"
    if count >= 1_000:
        return f"{count / 1_000:.1f}K views"
    return f"{count} views"


@dataclass(frozen=True)
class NowPlayingView:
    status: SelectionPhase
    item: Optional[VideoRecord]
    duration: str
    views: str
    related: List[Tile]
    error: Optional[str] = None


def now_playing(state: AppState) -> NowPlayingView:
    item = state.current_item
    return NowPlayingView(
        status=state.selection_phase,
        item=item,
        duration=format_duration(item.duration_iso8601) if item else "0:00",
        views=format_view_count(item.view_count) if item else "0 views",
        related=_tiles(state.related),
        error=state.last_error if state.selection_phase is SelectionPhase.FAILED else None,
    )

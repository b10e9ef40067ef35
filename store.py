# store.py
"""Shared client state.

``MusicStore`` owns every collection and session field. Screens only read
``store.state`` snapshots (or get them pushed through ``subscribe``) and call
the operations below; no failure from the data source ever escapes an
operation, it lands in ``AppState.last_error`` instead.
"""
import asyncio
import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Awaitable, Callable, Iterator, List, Optional, Tuple

from config import Config
from errors import DataSourceError
from models import AppState, SelectionPhase, VideoRecord
from services import YouTubeDataSource

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


class MusicStore:
    def __init__(self, source: YouTubeDataSource, config: Config, *, sequence_selections: bool = True):
        self.source = source
        self.config = config
        self.sequence_selections = sequence_selections
        self._state = AppState()
        self._listeners: List[Listener] = []
        self._in_flight = 0
        self._selection_ticket = 0

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers a callback run after every state change; returns the unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)

    @contextmanager
    def _loading(self) -> Iterator[None]:
        self._in_flight += 1
        self._commit(is_loading=True, last_error=None)
        try:
            yield
        finally:
            self._in_flight -= 1
            self._commit(is_loading=self._in_flight > 0)

    async def initialize(self) -> None:
        """Fills the home feed collections; safe to call again to refresh them."""
        await asyncio.gather(self.load_trending(), self.load_popular_music())

    async def load_trending(self) -> List[VideoRecord]:
        return await self._load_collection(
            "trending",
            lambda: self.source.fetch_trending(self.config.REGION_CODE, self.config.SEARCH_RESULT_LIMIT),
        )

    async def load_popular_music(self) -> List[VideoRecord]:
        return await self._load_collection(
            "popular_music",
            lambda: self.source.fetch_popular_music(self.config.REGION_CODE, self.config.SEARCH_RESULT_LIMIT),
        )

    async def search(self, query: str) -> List[VideoRecord]:
        """Populates ``search_results`` and also hands the records straight back."""
        return await self._load_collection(
            "search_results",
            lambda: self.source.search(query, self.config.SEARCH_RESULT_LIMIT),
        )

    async def load_channel(self, channel_id: str) -> List[VideoRecord]:
        return await self._load_collection(
            "channel",
            lambda: self.source.fetch_channel_videos(channel_id, self.config.SEARCH_RESULT_LIMIT),
        )

    async def _load_collection(self, name: str, fetch: Callable[[], Awaitable[List[VideoRecord]]]) -> List[VideoRecord]:
        with self._loading():
            try:
                videos = await fetch()
            except DataSourceError as exc:
                # The previous collection stays in place.
                logger.error("Loading %s failed: %s", name, exc)
                self._commit(last_error=exc.message)
                return []
            self._commit(**{name: list(videos)})
            logger.info("Loaded %d items into %s", len(videos), name)
            return videos

    async def select_item(self, video_id: str) -> Optional[VideoRecord]:
        """Loads detail and related videos for ``video_id`` and makes it the current item.

        Returns the detail record, or ``None`` when the selection failed or was
        overtaken by a later one.
        """
        self._selection_ticket += 1
        ticket = self._selection_ticket
        with self._loading():
            self._commit(selection_phase=SelectionPhase.LOADING)
            try:
                detail, related = await self._fetch_selection(video_id)
            except DataSourceError as exc:
                if self._is_stale(ticket):
                    logger.warning("Discarding failure of superseded selection %s", video_id)
                    return None
                logger.error("Selecting %s failed: %s", video_id, exc)
                self._commit(selection_phase=SelectionPhase.FAILED, last_error=exc.message)
                return None
            if self._is_stale(ticket):
                logger.warning("Discarding superseded selection %s", video_id)
                return None
            self._commit(current_item=detail, related=related, selection_phase=SelectionPhase.READY)
            logger.info("Now playing %s (%d related)", detail.id, len(related))
            return detail

    async def _fetch_selection(self, video_id: str) -> Tuple[VideoRecord, List[VideoRecord]]:
        related_task = asyncio.ensure_future(self.source.fetch_related(video_id, self.config.SEARCH_RESULT_LIMIT))
        try:
            detail = await self.source.fetch_detail(video_id)
            related = await related_task
        finally:
            # No-op once finished; drops the related lookup when detail failed.
            related_task.cancel()
        return detail, related

    def _is_stale(self, ticket: int) -> bool:
        return self.sequence_selections and ticket != self._selection_ticket

    def clear_selection(self) -> None:
        if self.sequence_selections:
            # Pending selections must not bring the cleared item back.
            self._selection_ticket += 1
        self._commit(current_item=None, related=[], selection_phase=SelectionPhase.IDLE)

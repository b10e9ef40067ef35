# playback.py
import logging
from enum import Enum
from typing import Optional

from models import SelectionPhase, VideoRecord
from store import MusicStore

logger = logging.getLogger(__name__)


class PlayerState(str, Enum):
    """States reported back by whatever widget actually plays the video."""
    UNSTARTED = "unstarted"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"
    ERROR = "error"


class PlaybackCoordinator:
    """Maps selection events to the store and tracks what the player reports."""

    def __init__(self, store: MusicStore):
        self.store = store
        self.player_state = PlayerState.UNSTARTED

    @property
    def current_item(self) -> Optional[VideoRecord]:
        """The last item whose detail and related videos both landed."""
        return self.store.state.current_item

    @property
    def phase(self) -> SelectionPhase:
        return self.store.state.selection_phase

    @property
    def fallback_url(self) -> Optional[str]:
        """Where to send the user when the player gave up on the current item."""
        item = self.store.state.current_item
        if self.player_state is PlayerState.ERROR and item is not None:
            return item.watch_url
        return None

    async def play(self, video_id: str) -> Optional[VideoRecord]:
        self.player_state = PlayerState.UNSTARTED
        return await self.store.select_item(video_id)

    async def auto_select(self) -> Optional[VideoRecord]:
        """Starts the first popular music video when nothing has been picked yet."""
        state = self.store.state
        if state.current_item is not None or not state.popular_music:
            return None
        return await self.play(state.popular_music[0].id)

    def on_player_state(self, new_state: PlayerState) -> Optional[str]:
        """Records a player notification; returns the fallback URL on error."""
        self.player_state = PlayerState(new_state)
        if self.player_state is PlayerState.ERROR:
            logger.warning("Player failed for %s", self.store.state.current_item)
            return self.fallback_url
        return None

    def stop(self) -> None:
        self.player_state = PlayerState.UNSTARTED
        self.store.clear_selection()

"""
Per-song playback controller.

One controller exists per song in the grid and is shared by the song's card
and its detail overlay. Whether a song is the active one is never stored
here: it is read from the playback store each time.
"""

import logging
import webbrowser
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from shared.models import Track, ViewSong
from shared.playback_store import PlaybackStore

logger = logging.getLogger(__name__)

PlayUrlGetter = Callable[[str], Awaitable[str]]
StateListener = Callable[[str, 'CardState'], None]


class CardState(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    ACTIVE = "active"
    FAILED = "failed"


class CardPlaybackController:
    """
    State machine for one song: IDLE -> RESOLVING -> ACTIVE.

    A play failure passes through FAILED and lands back on IDLE without
    touching the store. ACTIVE is derived from the store, so another song
    winning the store demotes this one to IDLE with no action from it.
    """

    def __init__(
        self,
        song: ViewSong,
        store: PlaybackStore,
        get_play_url: PlayUrlGetter,
        opener: Callable[[str], object] = webbrowser.open,
        on_open_detail: Optional[Callable[[ViewSong], None]] = None,
    ):
        self.song = song
        self.store = store
        self._get_play_url = get_play_url
        self._opener = opener
        self._on_open_detail = on_open_detail
        self._resolving = False
        self.last_error: Optional[Exception] = None
        self._listeners: List[StateListener] = []
        self._last_emitted = self.state
        self._unsubscribe = store.subscribe(self._on_track_changed)

    @property
    def song_id(self) -> str:
        return self.song.id

    @property
    def is_current(self) -> bool:
        """True if the store's current track is this song, URL or not."""
        track = self.store.get_track()
        return track is not None and track.id == self.song.id

    @property
    def is_active(self) -> bool:
        track = self.store.get_track()
        return track is not None and track.id == self.song.id and bool(track.url)

    @property
    def is_loading(self) -> bool:
        return self._resolving

    @property
    def state(self) -> CardState:
        if self._resolving:
            return CardState.RESOLVING
        return CardState.ACTIVE if self.is_active else CardState.IDLE

    async def play(self) -> Optional[Track]:
        """
        Resolve the playable URL and make this song the current track.

        Returns the new track, or None if the intent was ignored (already
        resolving) or failed.
        """
        if self._resolving:
            logger.debug("Play ignored for %s: already resolving", self.song.id)
            return None

        self._resolving = True
        self.last_error = None
        self._emit(CardState.RESOLVING)
        try:
            url = await self._get_play_url(self.song.id)
        except Exception as e:
            self._resolving = False
            self.last_error = e
            logger.error("Failed to play track %s: %s", self.song.id, e)
            self._emit(CardState.FAILED)
            self._emit(self.state)
            return None

        track = Track.from_view_song(self.song, url)
        self._resolving = False
        self.store.set_track(track)
        self._emit(self.state)
        return track

    async def download(self) -> Optional[str]:
        """Resolve the playable URL and hand it to the opener. Never raises."""
        try:
            url = await self._get_play_url(self.song.id)
            self._opener(url)
        except Exception as e:
            logger.error("Failed to download track %s: %s", self.song.id, e)
            return None
        return url

    def open_detail(self) -> None:
        if self._on_open_detail is not None:
            self._on_open_detail(self.song)

    def add_listener(self, listener: StateListener) -> None:
        """Observe state changes as (song_id, state)."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispose(self) -> None:
        """Stop following the store. Called when the grid drops this card."""
        self._unsubscribe()
        self._listeners.clear()

    def _on_track_changed(self, track: Optional[Track]) -> None:
        self._emit(self.state)

    def _emit(self, state: CardState) -> None:
        if state is self._last_emitted and state is not CardState.FAILED:
            return
        logger.debug("Card %s: %s -> %s", self.song.id, self._last_emitted.value, state.value)
        self._last_emitted = state
        for listener in list(self._listeners):
            try:
                listener(self.song.id, state)
            except Exception:
                logger.exception("Error in card state listener")

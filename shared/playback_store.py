"""
Now-playing state shared by every card and the detail overlay of a viewer
session.

Exactly one slot: no history, no queue. Consumers receive the store by
reference and subscribe for changes.
"""

import logging
from typing import Callable, List, Optional

from shared.models import Track

logger = logging.getLogger(__name__)

TrackListener = Callable[[Optional[Track]], None]


class PlaybackStore:
    """
    Holds at most one current Track.

    ``set_track`` replaces the slot and notifies listeners synchronously, so
    every subscriber has seen the new value by the time the call returns.
    """

    def __init__(self):
        self._track: Optional[Track] = None
        self._listeners: List[TrackListener] = []

    @property
    def current_track(self) -> Optional[Track]:
        return self._track

    def get_track(self) -> Optional[Track]:
        """Return the current track, or None if nothing is selected."""
        return self._track

    def set_track(self, track: Track) -> None:
        """Replace the current track. The previous one is discarded, never merged."""
        self._track = track
        logger.debug("Now playing: %s", track.id if track else None)
        self._notify(track)

    def clear(self) -> None:
        """Drop the current track."""
        if self._track is None:
            return
        self._track = None
        self._notify(None)

    def subscribe(self, listener: TrackListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        if listener not in self._listeners:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: TrackListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, track: Optional[Track]) -> None:
        for listener in list(self._listeners):
            try:
                listener(track)
            except Exception:
                logger.exception("Error in playback listener %r", listener)

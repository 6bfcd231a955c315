"""
Viewer sessions.

A session wires one viewer's playback store, grid and URL resolution
together. It is created when the viewer first shows up and torn down when
their session ends.
"""

import logging
import threading
import webbrowser
from typing import Callable, Dict, List, Optional

from shared.errors import ViewerRequiredError
from shared.models import ViewSong
from shared.playback_store import PlaybackStore
from storage.resolver import MediaURLResolver
from .grid import LibraryGridController
from .play_url import PlayUrlSource
from .projector import SongProjector
from .repository import SongRepository
from .visibility import song_visible_to, visible_songs

logger = logging.getLogger(__name__)


class LibrarySession:
    """Library state for a single viewer."""

    def __init__(
        self,
        viewer_id: str,
        repository: SongRepository,
        resolver: MediaURLResolver,
        opener: Callable[[str], object] = webbrowser.open,
    ):
        if not viewer_id:
            raise ViewerRequiredError("A viewer is required to render the library")
        self.viewer_id = viewer_id
        self.repository = repository
        self.store = PlaybackStore()
        self.projector = SongProjector(resolver)
        self.play_urls = PlayUrlSource(repository, resolver, viewer_id)
        self.grid = LibraryGridController(self.store, self.play_urls, opener=opener)
        self.loaded = False

    async def fetch_view_songs(self) -> List[ViewSong]:
        """One query for the viewer's own and others' published songs, projected."""
        songs = self.repository.find_songs(lambda song: song_visible_to(song, self.viewer_id))
        return await self.projector.project(visible_songs(songs, self.viewer_id), self.viewer_id)

    async def refresh(self) -> LibraryGridController:
        """Re-fetch and rebuild the grid, e.g. after a new song has been generated."""
        view_songs = await self.fetch_view_songs()
        self.grid.replace_songs(view_songs)
        self.loaded = True
        logger.info("Library for %s: %d songs", self.viewer_id, len(view_songs))
        return self.grid

    async def ensure_loaded(self) -> LibraryGridController:
        if not self.loaded:
            await self.refresh()
        return self.grid

    def close(self) -> None:
        self.grid.dispose()
        self.store.clear()


class SessionRegistry:
    """Sessions by viewer id. Request threads share it."""

    def __init__(self, session_factory: Callable[[str], LibrarySession]):
        self._factory = session_factory
        self._sessions: Dict[str, LibrarySession] = {}
        self._lock = threading.Lock()

    def get(self, viewer_id: str) -> LibrarySession:
        with self._lock:
            session = self._sessions.get(viewer_id)
            if session is None:
                session = self._factory(viewer_id)
                self._sessions[viewer_id] = session
                logger.info("Session started for %s", viewer_id)
            return session

    def peek(self, viewer_id: str) -> Optional[LibrarySession]:
        with self._lock:
            return self._sessions.get(viewer_id)

    def end(self, viewer_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(viewer_id, None)
        if session is None:
            return False
        session.close()
        logger.info("Session ended for %s", viewer_id)
        return True

"""Song library: visibility, projection, per-song playback and viewer sessions."""

from .card import CardPlaybackController, CardState
from .grid import LibraryGridController, DetailOverlay
from .projector import SongProjector
from .repository import SongRepository, InMemorySongRepository, JsonSongRepository
from .session import LibrarySession, SessionRegistry
from .visibility import visible_songs, song_visible_to

__all__ = [
    "CardPlaybackController",
    "CardState",
    "LibraryGridController",
    "DetailOverlay",
    "SongProjector",
    "SongRepository",
    "InMemorySongRepository",
    "JsonSongRepository",
    "LibrarySession",
    "SessionRegistry",
    "visible_songs",
    "song_visible_to",
]

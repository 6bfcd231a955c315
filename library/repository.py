"""
Song repository boundary.

The library core only reads songs. Writes belong to the generation pipeline
and live elsewhere; the implementations here serve a fixed set of songs,
either in memory or loaded from a ``songs.json`` document::

    {
      "users": {"<user id>": "<display name>", ...},
      "songs": [{"id": ..., "created_at": "<iso timestamp>", "owner_id": ..., ...}]
    }
"""

import json
from abc import ABC, abstractmethod
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from shared.errors import SongQueryError
from shared.models import Song

SongPredicate = Callable[[Song], bool]


class SongRepository(ABC):
    """Read access to persisted songs, with the owner display name joined in."""

    @abstractmethod
    def find_songs(self, where: Optional[SongPredicate] = None) -> List[Song]:
        """
        Return songs matching ``where`` in storage order.

        Raises:
            SongQueryError: If the underlying store cannot be read
        """
        pass

    @abstractmethod
    def get_song(self, song_id: str) -> Optional[Song]:
        """Return one song by id, or None."""
        pass


class InMemorySongRepository(SongRepository):
    """Repository over a fixed list of songs."""

    def __init__(self, songs: Iterable[Song], users: Optional[Dict[str, str]] = None):
        self._songs: List[Song] = list(songs)
        self._users: Dict[str, str] = dict(users or {})

    def _join_owner(self, song: Song) -> Song:
        name = self._users.get(song.owner_id, song.owner_name)
        return replace(song, owner_name=name)

    def find_songs(self, where: Optional[SongPredicate] = None) -> List[Song]:
        return [
            self._join_owner(song)
            for song in self._songs
            if where is None or where(song)
        ]

    def get_song(self, song_id: str) -> Optional[Song]:
        for song in self._songs:
            if song.id == song_id:
                return self._join_owner(song)
        return None


class JsonSongRepository(InMemorySongRepository):
    """Repository loaded once from a songs.json document."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            songs = [Song.from_dict(s) for s in data.get("songs", [])]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise SongQueryError(f"Could not load songs from {self.path}: {e}") from e
        super().__init__(songs, data.get("users", {}))

"""
Data models for songs, view projections, and the now-playing track.

This module defines the core data structures used throughout the platform
for representing persisted songs, the per-viewer projection rendered by the
library grid, and the ephemeral track held by the playback store.
"""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Optional, Any
from enum import Enum
from datetime import datetime, timezone

from shared.constants import UNTITLED


class StorageProvider(Enum):
    """Supported media storage backends."""
    CLOUDFLARE_R2 = "r2"
    AWS_S3 = "s3"
    GENERIC_S3 = "generic"
    LOCAL = "local"


_TRUE_STRINGS = {"true", "1", "yes"}
_FALSE_STRINGS = {"false", "0", "no", ""}


def _parse_timestamp(value: Any) -> datetime:
    """Parse an ISO timestamp into naive UTC so every created_at compares."""
    if not isinstance(value, datetime):
        text = str(value).strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        value = datetime.fromisoformat(text)
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _parse_flag(name: str, value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"Invalid boolean for {name}: {value!r}")


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    field_names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in field_names}


@dataclass
class Song:
    """
    A persisted song record as returned by the song repository.

    Attributes:
        id: Unique identifier
        title: Song title (optional, untitled songs render as "Untitled")
        created_at: Creation timestamp
        instrumental: Whether the song has no vocals
        prompt: Free-text description used for generation
        lyrics: Lyrics text
        described_lyrics: Lyrics description used for generation
        full_described_song: Full song description used for generation
        thumbnail_key: Storage key of the cover image
        status: Playback status tag (queued, processing, processed, failed)
        owner_id: Identifier of the owning user
        published: Visibility gate for non-owners, independent of status
        audio_key: Storage key of the playable audio
        owner_name: Owner display name, joined in by the repository
    """
    id: str
    created_at: datetime
    owner_id: str
    title: Optional[str] = None
    instrumental: bool = False
    prompt: Optional[str] = None
    lyrics: Optional[str] = None
    described_lyrics: Optional[str] = None
    full_described_song: Optional[str] = None
    thumbnail_key: Optional[str] = None
    status: Optional[str] = None
    published: bool = False
    audio_key: Optional[str] = None
    owner_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert song to dictionary."""
        data = asdict(self)
        data['created_at'] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Song':
        """Create Song from dictionary, filtering unknown keys."""
        filtered_data = _known_fields(cls, data)
        filtered_data['created_at'] = _parse_timestamp(filtered_data['created_at'])
        filtered_data['published'] = _parse_flag('published', filtered_data.get('published', False))
        filtered_data['instrumental'] = _parse_flag('instrumental', filtered_data.get('instrumental', False))
        return cls(**filtered_data)


@dataclass(frozen=True)
class ViewSong:
    """
    Per-viewer projection of a Song, rebuilt on every fetch.

    Storage keys are replaced by resolved URLs. ``play_url`` is always None
    here; playable URLs are only resolved on an explicit play intent.
    """
    id: str
    title: Optional[str]
    created_at: datetime
    instrumental: bool
    prompt: Optional[str]
    lyrics: Optional[str]
    described_lyrics: Optional[str]
    full_described_song: Optional[str]
    thumbnail_url: Optional[str]
    play_url: Optional[str]
    status: Optional[str]
    owner_name: Optional[str]
    published: bool
    is_own_song: bool = False

    @property
    def display_title(self) -> str:
        return self.title or UNTITLED

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['created_at'] = self.created_at.isoformat()
        return data


@dataclass(frozen=True)
class Track:
    """
    The now-playing projection held by the playback store.

    Built in one piece when a play intent resolves and replaced wholesale by
    the next one.
    """
    id: str
    title: Optional[str]
    url: Optional[str]
    artwork: Optional[str] = None
    prompt: Optional[str] = None
    owner_name: Optional[str] = None

    @classmethod
    def from_view_song(cls, song: ViewSong, url: str) -> 'Track':
        return cls(
            id=song.id,
            title=song.title,
            url=url,
            artwork=song.thumbnail_url,
            prompt=song.prompt,
            owner_name=song.owner_name,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert track to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Track':
        """Create Track from dictionary, filtering unknown keys."""
        return cls(**_known_fields(cls, data))

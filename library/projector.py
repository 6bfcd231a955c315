"""
Projection of persisted songs into the per-viewer view model.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from shared.models import Song, ViewSong
from storage.resolver import MediaURLResolver

logger = logging.getLogger(__name__)


class SongProjector:
    """Builds ViewSong lists, resolving cover thumbnails concurrently."""

    def __init__(self, resolver: MediaURLResolver):
        self._resolver = resolver

    async def _thumbnail_url(self, song: Song) -> Optional[str]:
        try:
            return await self._resolver.resolve_optional(song.thumbnail_key)
        except Exception as e:
            logger.warning("Thumbnail unavailable for song %s: %s", song.id, e)
            return None

    async def project(self, songs: Sequence[Song], viewer_id: str) -> List[ViewSong]:
        """
        Project songs for ``viewer_id``, keeping their order.

        Thumbnails resolve independently; one that fails leaves that song
        without a thumbnail and does not affect the others. Playable URLs
        are left unresolved.
        """
        thumbnails = await asyncio.gather(*(self._thumbnail_url(song) for song in songs))
        return [
            self.project_one(song, viewer_id, thumbnail_url)
            for song, thumbnail_url in zip(songs, thumbnails)
        ]

    @staticmethod
    def project_one(song: Song, viewer_id: str, thumbnail_url: Optional[str]) -> ViewSong:
        return ViewSong(
            id=song.id,
            title=song.title,
            created_at=song.created_at,
            instrumental=song.instrumental,
            prompt=song.prompt,
            lyrics=song.lyrics,
            described_lyrics=song.described_lyrics,
            full_described_song=song.full_described_song,
            thumbnail_url=thumbnail_url,
            play_url=None,
            status=song.status,
            owner_name=song.owner_name,
            published=song.published,
            is_own_song=song.owner_id == viewer_id,
        )

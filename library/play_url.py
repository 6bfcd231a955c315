"""Playable URL lookup by song id."""

from shared.errors import MediaResolutionError, SongNotFoundError
from storage.resolver import MediaURLResolver
from .repository import SongRepository
from .visibility import song_visible_to


class PlayUrlSource:
    """
    Resolves the audio URL of a song on behalf of one viewer.

    Songs the viewer may not see are reported as not found.
    """

    def __init__(self, repository: SongRepository, resolver: MediaURLResolver, viewer_id: str):
        self._repository = repository
        self._resolver = resolver
        self.viewer_id = viewer_id

    async def __call__(self, song_id: str) -> str:
        return await self.get_play_url(song_id)

    async def get_play_url(self, song_id: str) -> str:
        song = self._repository.get_song(song_id)
        if song is None or not song_visible_to(song, self.viewer_id):
            raise SongNotFoundError(song_id)
        if not song.audio_key:
            raise MediaResolutionError(song_id, "song has no audio yet")
        return await self._resolver.resolve(song.audio_key)

import asyncio
from datetime import datetime, timedelta

import pytest

from shared.errors import MediaResolutionError
from shared.models import Song
from library.repository import InMemorySongRepository
from storage.storage_provider import MediaURLSigner
from storage.resolver import MediaURLResolver

BASE_TIME = datetime(2025, 3, 1, 12, 0, 0)


def make_song(song_id, owner_id="alice", published=False, minutes=0, **kwargs):
    return Song(
        id=song_id,
        owner_id=owner_id,
        published=published,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        title=kwargs.pop("title", f"Song {song_id}"),
        thumbnail_key=kwargs.pop("thumbnail_key", f"thumbs/{song_id}.png"),
        audio_key=kwargs.pop("audio_key", f"audio/{song_id}.mp3"),
        **kwargs,
    )


class FakeSigner(MediaURLSigner):
    """Signs keys as https URLs, failing for keys listed in ``failing``."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    def authenticate(self, credentials):
        return True

    def sign(self, storage_key, expires_in=3600):
        self.calls.append(storage_key)
        if storage_key in self.failing:
            raise MediaResolutionError(storage_key, "signer unavailable")
        return f"https://media.test/{storage_key}?expires={expires_in}"


class GatedPlayUrls:
    """
    Play URL getter whose calls block until the test releases them.

    Lets a test decide the order in which concurrent resolutions complete.
    """

    def __init__(self):
        self.gates = {}
        self.requested = []
        self.fail = set()

    def gate(self, song_id):
        if song_id not in self.gates:
            self.gates[song_id] = asyncio.Event()
        return self.gates[song_id]

    def release(self, song_id):
        self.gate(song_id).set()

    async def __call__(self, song_id):
        self.requested.append(song_id)
        await self.gate(song_id).wait()
        if song_id in self.fail:
            raise MediaResolutionError(song_id, "signer unavailable")
        return f"https://media.test/audio/{song_id}.mp3"


@pytest.fixture
def signer():
    return FakeSigner()


@pytest.fixture
def resolver(signer):
    return MediaURLResolver(signer)


@pytest.fixture
def scenario_repository():
    """Alice owns S1 (private) and S2 (published); Bob owns S3 (published) and S4 (private)."""
    songs = [
        make_song("S1", owner_id="alice", published=False, minutes=1),
        make_song("S2", owner_id="alice", published=True, minutes=2),
        make_song("S3", owner_id="bob", published=True, minutes=3),
        make_song("S4", owner_id="bob", published=False, minutes=4),
    ]
    return InMemorySongRepository(songs, users={"alice": "Alice", "bob": "Bob"})

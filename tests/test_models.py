from datetime import datetime

import pytest

from shared.models import Song, Track
from library.projector import SongProjector


def test_song_from_dict_filters_unknown_keys():
    song = Song.from_dict({
        "id": "a",
        "owner_id": "u1",
        "created_at": "2025-01-01T10:00:00",
        "published": 1,
        "userId": "legacy",
    })
    assert song.created_at == datetime(2025, 1, 1, 10, 0, 0)
    assert song.published is True
    assert song.instrumental is False
    assert Song.from_dict(song.to_dict()) == song


def test_track_from_view_song_and_dict():
    song = Song(id="a", owner_id="u1", created_at=datetime(2025, 1, 1), title=None, owner_name="Dana")
    view = SongProjector.project_one(song, "someone", None)
    track = Track.from_view_song(view, "https://media.test/a.mp3")
    assert track.artwork is None
    assert track.owner_name == "Dana"
    assert view.display_title == "Untitled"
    assert Track.from_dict({**track.to_dict(), "position": 12}) == track


def test_song_from_dict_parses_flag_strings():
    base = {"id": "a", "owner_id": "u1", "created_at": "2025-01-01T10:00:00"}
    assert Song.from_dict({**base, "published": "false"}).published is False
    assert Song.from_dict({**base, "published": "True"}).published is True
    assert Song.from_dict({**base, "instrumental": "false"}).instrumental is False
    assert Song.from_dict({**base, "published": None}).published is False
    for bad in ("nope", 2, [], 0.5):
        with pytest.raises(ValueError):
            Song.from_dict({**base, "published": bad})


def test_song_from_dict_normalizes_timestamps_to_utc():
    base = {"id": "a", "owner_id": "u1"}
    zulu = Song.from_dict({**base, "created_at": "2025-01-01T10:00:00Z"})
    offset = Song.from_dict({**base, "created_at": "2025-01-01T12:00:00+02:00"})
    assert zulu.created_at == datetime(2025, 1, 1, 10, 0, 0)
    assert offset.created_at == zulu.created_at
    assert zulu.created_at.tzinfo is None

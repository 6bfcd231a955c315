"""Which songs a viewer may see."""

from typing import Iterable, List

from shared.models import Song


def song_visible_to(song: Song, viewer_id: str) -> bool:
    """A viewer sees all of their own songs and everyone else's published ones."""
    return song.owner_id == viewer_id or song.published is True


def visible_songs(songs: Iterable[Song], viewer_id: str) -> List[Song]:
    """
    Filter songs down to those visible to ``viewer_id``, newest first.

    The sort is stable, so songs created at the same instant keep the order
    they were given in.
    """
    visible = [song for song in songs if song_visible_to(song, viewer_id)]
    return sorted(visible, key=lambda song: song.created_at, reverse=True)

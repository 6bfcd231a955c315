"""
Library grid: the ordered songs of one viewer, their cards, and the detail
overlay.
"""

import logging
import webbrowser
from typing import Callable, Dict, List, Optional, Sequence

from shared.constants import NO_DESCRIPTION, UNTITLED
from shared.errors import SongNotFoundError
from shared.models import Track, ViewSong
from shared.playback_store import PlaybackStore
from .card import CardPlaybackController, CardState, PlayUrlGetter

logger = logging.getLogger(__name__)


def owner_label(song: ViewSong) -> str:
    """What a card shows as the author line."""
    if song.is_own_song:
        return "You"
    return song.owner_name or ""


def card_badges(song: ViewSong) -> List[str]:
    badges = []
    if song.is_own_song:
        badges.append("Your Song")
    if song.instrumental:
        badges.append("Instrumental")
    if song.published:
        badges.append("Published")
    return badges


def card_summary(song: ViewSong) -> Dict[str, object]:
    """Text content of a grid card."""
    return {
        'id': song.id,
        'title': song.title or UNTITLED,
        'description': song.prompt or NO_DESCRIPTION,
        'owner': owner_label(song),
        'badges': card_badges(song),
        'thumbnail_url': song.thumbnail_url,
    }


class DetailOverlay:
    """
    The opened song's detail view.

    Playback goes through the same controller as the song's card, so both
    surfaces share its resolving guard and the session's store.
    """

    def __init__(self, song: ViewSong, card: CardPlaybackController):
        self.song = song
        self._card = card

    @property
    def state(self) -> CardState:
        return self._card.state

    @property
    def is_active(self) -> bool:
        return self._card.is_active

    async def play(self) -> Optional[Track]:
        return await self._card.play()

    async def download(self) -> Optional[str]:
        return await self._card.download()

    def to_dict(self) -> Dict[str, object]:
        # Instrumental and published badges only; the overlay has no "Your Song" badge.
        badges = [b for b in card_badges(self.song) if b != "Your Song"]
        return {
            'id': self.song.id,
            'title': self.song.display_title,
            'owner': self.song.owner_name,
            'badges': badges,
            'thumbnail_url': self.song.thumbnail_url,
            'description': self.song.prompt,
            'lyrics': self.song.lyrics,
            'state': self.state.value,
        }


class LibraryGridController:
    """Owns the viewer's songs, one card controller per song and the opened overlay."""

    def __init__(
        self,
        store: PlaybackStore,
        get_play_url: PlayUrlGetter,
        songs: Sequence[ViewSong] = (),
        opener: Callable[[str], object] = webbrowser.open,
    ):
        self.store = store
        self._get_play_url = get_play_url
        self._opener = opener
        self._songs: List[ViewSong] = []
        self._cards: Dict[str, CardPlaybackController] = {}
        self._opened_id: Optional[str] = None
        self.replace_songs(songs)

    @property
    def songs(self) -> List[ViewSong]:
        return list(self._songs)

    @property
    def is_empty(self) -> bool:
        return not self._songs

    def replace_songs(self, songs: Sequence[ViewSong]) -> None:
        """Swap in a freshly projected list. Cards are rebuilt, never patched."""
        for card in self._cards.values():
            card.dispose()
        self._songs = list(songs)
        self._cards = {
            song.id: CardPlaybackController(
                song,
                self.store,
                self._get_play_url,
                opener=self._opener,
                on_open_detail=self._open_song,
            )
            for song in self._songs
        }
        if self._opened_id is not None and self._opened_id not in self._cards:
            logger.debug("Opened song %s no longer listed; closing detail", self._opened_id)
            self._opened_id = None

    def card(self, song_id: str) -> CardPlaybackController:
        try:
            return self._cards[song_id]
        except KeyError:
            raise SongNotFoundError(song_id) from None

    def cards(self) -> List[CardPlaybackController]:
        return [self._cards[song.id] for song in self._songs]

    def active_song_id(self) -> Optional[str]:
        """Id of the listed song the store is playing, if any."""
        for card in self._cards.values():
            if card.is_active:
                return card.song_id
        return None

    def _open_song(self, song: ViewSong) -> None:
        self.open_detail(song.id)

    def open_detail(self, song_id: str) -> DetailOverlay:
        card = self.card(song_id)
        self._opened_id = song_id
        return DetailOverlay(card.song, card)

    def close_detail(self) -> None:
        self._opened_id = None

    @property
    def detail(self) -> Optional[DetailOverlay]:
        if self._opened_id is None:
            return None
        card = self._cards[self._opened_id]
        return DetailOverlay(card.song, card)

    def dispose(self) -> None:
        for card in self._cards.values():
            card.dispose()
        self._cards = {}
        self._songs = []
        self._opened_id = None

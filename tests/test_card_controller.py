import asyncio
from unittest.mock import MagicMock

from library.card import CardPlaybackController, CardState
from library.projector import SongProjector
from shared.models import Track
from shared.playback_store import PlaybackStore
from conftest import GatedPlayUrls, make_song


def make_view(song_id, owner_id="alice"):
    song = make_song(song_id, owner_id=owner_id, prompt=f"prompt {song_id}", owner_name="Alice")
    return SongProjector.project_one(song, "alice", f"https://media.test/thumbs/{song_id}.png")


async def ok_url(song_id):
    return f"https://media.test/audio/{song_id}.mp3"


async def broken_url(song_id):
    raise RuntimeError("signer unavailable")


def test_initial_state_is_idle():
    card = CardPlaybackController(make_view("X"), PlaybackStore(), ok_url)
    assert card.state is CardState.IDLE
    assert not card.is_active


def test_play_writes_full_track():
    store = PlaybackStore()
    card = CardPlaybackController(make_view("X"), store, ok_url)

    track = asyncio.run(card.play())

    assert track == Track(
        id="X",
        title="Song X",
        url="https://media.test/audio/X.mp3",
        artwork="https://media.test/thumbs/X.png",
        prompt="prompt X",
        owner_name="Alice",
    )
    assert store.get_track() is track
    assert card.state is CardState.ACTIVE


def test_active_requires_matching_id_and_url():
    store = PlaybackStore()
    card = CardPlaybackController(make_view("X"), store, ok_url)

    store.set_track(Track(id="X", title=None, url=None))
    assert card.is_current
    assert not card.is_active
    assert card.state is CardState.IDLE

    store.set_track(Track(id="Y", title=None, url="https://a"))
    assert not card.is_active

    store.set_track(Track(id="X", title=None, url="https://a"))
    assert card.is_active
    assert card.state is CardState.ACTIVE


def test_failure_passes_through_failed_back_to_idle(caplog):
    store = PlaybackStore()
    previous = Track(id="other", title=None, url="https://a")
    store.set_track(previous)
    card = CardPlaybackController(make_view("X"), store, broken_url)
    states = []
    card.add_listener(lambda song_id, state: states.append(state))

    result = asyncio.run(card.play())

    assert result is None
    assert states == [CardState.RESOLVING, CardState.FAILED, CardState.IDLE]
    assert card.state is CardState.IDLE
    assert not card.is_loading
    assert isinstance(card.last_error, RuntimeError)
    assert store.get_track() is previous
    assert "Failed to play track X" in caplog.text


def test_second_play_while_resolving_is_ignored():
    async def scenario():
        store = PlaybackStore()
        urls = GatedPlayUrls()
        card = CardPlaybackController(make_view("X"), store, urls)

        first = asyncio.create_task(card.play())
        await asyncio.sleep(0)
        assert card.state is CardState.RESOLVING

        assert await card.play() is None
        assert urls.requested == ["X"]

        urls.release("X")
        track = await first
        return store, card, track

    store, card, track = asyncio.run(scenario())
    assert store.get_track() is track
    assert card.state is CardState.ACTIVE


def test_playing_another_song_demotes_the_active_one():
    store = PlaybackStore()
    x = CardPlaybackController(make_view("X"), store, ok_url)
    y = CardPlaybackController(make_view("Y"), store, ok_url)
    x_states = []
    x.add_listener(lambda song_id, state: x_states.append(state))

    asyncio.run(x.play())
    assert x.state is CardState.ACTIVE

    asyncio.run(y.play())
    assert y.state is CardState.ACTIVE
    assert x.state is CardState.IDLE
    assert x_states[-1] is CardState.IDLE


def test_last_completion_wins_over_request_order():
    async def scenario():
        store = PlaybackStore()
        urls = GatedPlayUrls()
        x = CardPlaybackController(make_view("X"), store, urls)
        y = CardPlaybackController(make_view("Y"), store, urls)

        play_x = asyncio.create_task(x.play())
        await asyncio.sleep(0)
        play_y = asyncio.create_task(y.play())
        await asyncio.sleep(0)
        assert urls.requested == ["X", "Y"]

        # Y was requested second but completes first.
        urls.release("Y")
        await play_y
        assert store.get_track().id == "Y"
        assert x.state is CardState.RESOLVING

        urls.release("X")
        await play_x
        return store, x, y

    store, x, y = asyncio.run(scenario())
    assert store.get_track().id == "X"
    assert x.state is CardState.ACTIVE
    assert y.state is CardState.IDLE


def test_play_on_active_song_replays_without_toggling():
    store = PlaybackStore()
    card = CardPlaybackController(make_view("X"), store, ok_url)
    first = asyncio.run(card.play())
    second = asyncio.run(card.play())
    assert second is not first
    assert store.get_track() is second
    assert card.state is CardState.ACTIVE


def test_download_opens_url_and_leaves_store_alone():
    store = PlaybackStore()
    opener = MagicMock()
    card = CardPlaybackController(make_view("X"), store, ok_url, opener=opener)

    url = asyncio.run(card.download())

    assert url == "https://media.test/audio/X.mp3"
    opener.assert_called_once_with(url)
    assert store.get_track() is None
    assert card.state is CardState.IDLE


def test_download_failure_is_swallowed(caplog):
    opener = MagicMock()
    card = CardPlaybackController(make_view("X"), PlaybackStore(), broken_url, opener=opener)
    assert asyncio.run(card.download()) is None
    opener.assert_not_called()
    assert card.state is CardState.IDLE
    assert "Failed to download track X" in caplog.text


def test_open_detail_does_not_touch_store():
    store = PlaybackStore()
    on_open = MagicMock()
    view = make_view("X")
    card = CardPlaybackController(view, store, ok_url, on_open_detail=on_open)
    card.open_detail()
    on_open.assert_called_once_with(view)
    assert store.get_track() is None


def test_dispose_stops_following_store():
    store = PlaybackStore()
    card = CardPlaybackController(make_view("X"), store, ok_url)
    listener = MagicMock()
    card.add_listener(listener)
    card.dispose()
    store.set_track(Track(id="X", title=None, url="https://a"))
    listener.assert_not_called()

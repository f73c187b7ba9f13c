import pytest

from src.client.playback import PlaybackState, PlaybackStatus
from src.models.dto import SongOrigin
from tests.support.stubs import FakePlayer, make_song


@pytest.mark.unit
def test_switching_songs_unloads_previous():
    player = FakePlayer()
    state = PlaybackState(player)

    assert state.set_current_song(make_song(1)) is True
    assert state.set_current_song(make_song(2)) is True

    assert player.calls == [
        ("load", "/music/song-1.mp3", True),
        ("unload",),
        ("load", "/music/song-2.mp3", True),
    ]
    assert state.current_song.id == "song-2"
    assert state.is_playing


@pytest.mark.unit
def test_catalog_song_without_preview_is_not_loaded():
    player = FakePlayer()
    state = PlaybackState(player)
    song = make_song(1, origin=SongOrigin.CATALOG, preview_url=None)

    assert state.set_current_song(song) is False
    assert player.calls == []
    assert state.current_song is song
    assert not state.is_loaded


@pytest.mark.unit
def test_load_failure_is_recorded():
    state = PlaybackState(FakePlayer(fail_on_load=True))
    assert state.set_current_song(make_song(1)) is False
    assert isinstance(state.last_error, RuntimeError)
    assert not state.is_playing


@pytest.mark.unit
def test_status_updates_and_finish():
    player = FakePlayer()
    state = PlaybackState(player)
    state.set_current_song(make_song(1))

    player.on_status(PlaybackStatus(is_loaded=True, is_playing=True, position_ms=1500, duration_ms=180000))
    assert (state.position_ms, state.duration_ms, state.is_playing) == (1500, 180000, True)

    player.on_status(PlaybackStatus(is_loaded=True, is_playing=True, position_ms=180000,
                                    duration_ms=180000, did_just_finish=True))
    assert state.is_playing is False


@pytest.mark.unit
def test_toggle_and_seek_require_loaded_sound():
    player = FakePlayer()
    state = PlaybackState(player)
    state.toggle()
    state.seek(1000)
    assert player.calls == []

    state.set_current_song(make_song(1))
    player.on_status(PlaybackStatus(is_loaded=True, is_playing=True, position_ms=0, duration_ms=5000))
    state.toggle()
    state.toggle()
    state.seek(9000)
    state.seek(-5)

    assert player.calls[1:] == [("pause",), ("play",), ("seek", 5000), ("seek", 0)]

    state.stop()
    assert player.calls[-1] == ("unload",)
    assert not state.is_loaded

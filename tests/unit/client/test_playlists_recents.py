import pytest

from src.client.playlists import PlaylistLibrary
from src.client.recents import RecentSearches, RecentSongs
from src.client.storage import PLAYLISTS_KEY, RECENT_SONGS_KEY
from src.core.errors import ValidationError
from tests.support.stubs import make_song


class _Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.mark.unit
@pytest.mark.parametrize("name", ["", "   ", None])
def test_blank_playlist_name_is_rejected(store, name):
    library = PlaylistLibrary(store)
    with pytest.raises(ValidationError) as exc:
        library.create(name)
    assert exc.value.message == "Playlist name is required"
    assert library.list() == []


@pytest.mark.unit
def test_create_with_name_only(store):
    library = PlaylistLibrary(store, clock=_Clock(1_700_000_000.5))
    playlist = library.create("  Road Trip  ")

    assert playlist.name == "Road Trip"
    assert playlist.songs == []
    assert playlist.is_public is False
    assert playlist.id == "1700000000500"
    assert [p.id for p in PlaylistLibrary(store).list()] == [playlist.id]


@pytest.mark.unit
def test_ids_stay_unique_within_the_same_millisecond(store):
    library = PlaylistLibrary(store, clock=_Clock(1.0))
    ids = {library.create(f"P{i}").id for i in range(3)}
    assert len(ids) == 3


@pytest.mark.unit
def test_add_and_remove_songs(store):
    library = PlaylistLibrary(store)
    playlist = library.create("Mix", description=" chill ", is_public=True)
    song = make_song(1)

    library.add_song(playlist.id, song)
    library.add_song(playlist.id, song)
    library.add_song(playlist.id, make_song(2))
    stored = library.get(playlist.id)
    assert [s.id for s in stored.songs] == ["song-1", "song-2"]
    assert stored.description == "chill"

    library.remove_song(playlist.id, "song-1")
    assert [s.id for s in library.get(playlist.id).songs] == ["song-2"]

    with pytest.raises(KeyError):
        library.add_song("missing", song)

    assert library.delete(playlist.id) is True
    assert library.delete(playlist.id) is False


@pytest.mark.unit
def test_unreadable_playlist_entries_are_skipped(store):
    store.set(PLAYLISTS_KEY, [{"id": "1", "name": "Ok"}, {"id": "2"}])
    assert [p.id for p in PlaylistLibrary(store).list()] == ["1"]


@pytest.mark.unit
def test_recent_songs_move_to_front_and_cap_at_twenty(store):
    recents = RecentSongs(store)
    for i in range(25):
        recents.save(make_song(i))
    recents.save(make_song(10))

    ids = [s.id for s in recents.list()]
    assert len(ids) == 20
    assert ids[0] == "song-10"
    assert ids.count("song-10") == 1
    assert "song-4" not in ids


@pytest.mark.unit
def test_recent_songs_unreadable_store_reads_empty(store):
    store.set(RECENT_SONGS_KEY, [{"title": "no id"}])
    assert RecentSongs(store).list() == []


@pytest.mark.unit
def test_recent_searches_dedupe_and_cap_at_five(store):
    searches = RecentSearches(store)
    for q in ["a", "b", "", "  ", "b", "c", "d", "e", "f"]:
        searches.add(q)
    assert searches.list() == ["f", "e", "d", "c", "b"]

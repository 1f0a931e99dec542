import unittest

from media_provider.errors import TransportError
from media_provider.filters import AlbumFilter
from media_provider.providers.subsonic import SubsonicMediaProvider
from media_provider.providers.subsonic.iterators import ALBUM_SORT_ORDERS


def _albums(start: int, count: int, **fields) -> list[dict]:
    return [
        dict({"id": f"al-{i}", "name": f"Album {i}", "year": 1990 + i, "coverArt": f"cov-{i}"}, **fields)
        for i in range(start, start + count)
    ]


class _PagingTransport:
    def __init__(self, albums: list[dict], songs: list[dict] | None = None) -> None:
        self.albums = albums
        self.songs = songs or []
        self.requests: list[tuple] = []
        self.fail_at_offset: int | None = None

    def get_album_list(self, list_type, size, offset, **extra):
        self.requests.append((list_type, size, offset, extra))
        if self.fail_at_offset == offset:
            raise TransportError("page failed")
        return self.albums[offset : offset + size]

    def search(self, query, *, album_count=0, album_offset=0, song_count=0, song_offset=0, **_):
        self.requests.append(("search3", query, album_count, album_offset, song_count, song_offset))
        return {
            "album": self.albums[album_offset : album_offset + album_count],
            "song": self.songs[song_offset : song_offset + song_count],
        }


class TestAlbumIteration(unittest.TestCase):
    def test_sort_orders_are_listed(self) -> None:
        provider = SubsonicMediaProvider(_PagingTransport([]))
        self.assertEqual(provider.album_sort_orders(), list(ALBUM_SORT_ORDERS))
        self.assertIn("Random", provider.album_sort_orders())

    def test_pages_until_short_page(self) -> None:
        transport = _PagingTransport(_albums(0, 7))
        provider = SubsonicMediaProvider(transport, page_size=3)
        albums = list(provider.iterate_albums("Recently Added", AlbumFilter()))
        self.assertEqual([album.id for album in albums], [f"al-{i}" for i in range(7)])
        self.assertEqual([request[2] for request in transport.requests], [0, 3, 6])
        self.assertEqual(transport.requests[0][0], "newest")

    def test_year_sort_passes_range(self) -> None:
        transport = _PagingTransport([])
        provider = SubsonicMediaProvider(transport)
        self.assertEqual(list(provider.iterate_albums("Year (descending)", AlbumFilter())), [])
        self.assertEqual(transport.requests[0][0], "byYear")
        self.assertEqual(transport.requests[0][3], {"fromYear": 3000, "toYear": 0})

    def test_filter_applies_across_pages(self) -> None:
        transport = _PagingTransport(_albums(0, 10))
        provider = SubsonicMediaProvider(transport, page_size=4)
        albums = list(provider.iterate_albums("Title (A-Z)", AlbumFilter(min_year=1996)))
        self.assertEqual([album.year for album in albums], [1996, 1997, 1998, 1999])

    def test_random_order_stops_when_nothing_new(self) -> None:
        class _Repeating(_PagingTransport):
            def get_album_list(self, list_type, size, offset, **extra):
                self.requests.append((list_type, size, offset, extra))
                return self.albums[:size]

        transport = _Repeating(_albums(0, 2))
        provider = SubsonicMediaProvider(transport, page_size=2)
        albums = list(provider.iterate_albums("Random", AlbumFilter()))
        self.assertEqual([album.id for album in albums], ["al-0", "al-1"])
        self.assertEqual(len(transport.requests), 2)

    def test_unknown_sort_order(self) -> None:
        provider = SubsonicMediaProvider(_PagingTransport([]))
        with self.assertRaises(ValueError):
            provider.iterate_albums("Loudest", AlbumFilter())

    def test_prefetch_only_for_matching_albums(self) -> None:
        seen: list[str] = []
        provider = SubsonicMediaProvider(_PagingTransport(_albums(0, 3)))
        provider.set_prefetch_cover_callback(seen.append)
        list(provider.iterate_albums("Recently Added", AlbumFilter(max_year=1991)))
        self.assertEqual(seen, ["cov-0", "cov-1"])

    def test_page_failure_propagates_to_consumer(self) -> None:
        transport = _PagingTransport(_albums(0, 6))
        transport.fail_at_offset = 3
        provider = SubsonicMediaProvider(transport, page_size=3)
        iterator = provider.iterate_albums("Recently Added", AlbumFilter())
        self.assertEqual([next(iterator).id for _ in range(3)], ["al-0", "al-1", "al-2"])
        with self.assertRaises(TransportError):
            next(iterator)


class TestSearchIteration(unittest.TestCase):
    def test_search_albums_filters(self) -> None:
        transport = _PagingTransport(_albums(0, 4, starred="2020-05-05T00:00:00Z"))
        provider = SubsonicMediaProvider(transport, page_size=10)
        albums = list(provider.search_albums("album", AlbumFilter(exclude_favorited=True)))
        self.assertEqual(albums, [])

    def test_iterate_tracks_pages_songs(self) -> None:
        songs = [{"id": f"tr-{i}", "title": f"Song {i}"} for i in range(5)]
        transport = _PagingTransport([], songs)
        provider = SubsonicMediaProvider(transport, page_size=2)
        tracks = list(provider.iterate_tracks(""))
        self.assertEqual([track.id for track in tracks], [f"tr-{i}" for i in range(5)])
        song_offsets = [request[5] for request in transport.requests]
        self.assertEqual(song_offsets, [0, 2, 4])


if __name__ == "__main__":
    unittest.main()

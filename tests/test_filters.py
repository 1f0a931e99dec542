import unittest

from media_provider.filters import AlbumFilter
from media_provider.models import Album


def _album(**kwargs) -> Album:
    fields = {"id": "al-1", "name": "Album", "year": 2001, "genres": ("Rock",)}
    fields.update(kwargs)
    return Album(**fields)


class TestAlbumFilter(unittest.TestCase):
    def test_nil_filter_matches_everything(self) -> None:
        album_filter = AlbumFilter()
        self.assertTrue(album_filter.is_nil())
        for album in (_album(), _album(favorite=True), _album(year=0, genres=())):
            self.assertTrue(album_filter.matches(album))

    def test_none_never_matches(self) -> None:
        self.assertFalse(AlbumFilter().matches(None))

    def test_is_nil_false_when_any_clause_set(self) -> None:
        for album_filter in (
            AlbumFilter(min_year=1990),
            AlbumFilter(max_year=1990),
            AlbumFilter(genres=("Jazz",)),
            AlbumFilter(exclude_favorited=True),
            AlbumFilter(exclude_unfavorited=True),
        ):
            self.assertFalse(album_filter.is_nil())

    def test_favorite_exclusions(self) -> None:
        self.assertFalse(AlbumFilter(exclude_favorited=True).matches(_album(favorite=True)))
        self.assertTrue(AlbumFilter(exclude_favorited=True).matches(_album(favorite=False)))
        self.assertFalse(AlbumFilter(exclude_unfavorited=True).matches(_album(favorite=False)))
        self.assertTrue(AlbumFilter(exclude_unfavorited=True).matches(_album(favorite=True)))

    def test_both_exclusions_reject_every_album(self) -> None:
        album_filter = AlbumFilter(exclude_favorited=True, exclude_unfavorited=True)
        self.assertFalse(album_filter.matches(_album(favorite=True)))
        self.assertFalse(album_filter.matches(_album(favorite=False)))

    def test_year_range(self) -> None:
        album_filter = AlbumFilter(min_year=1990, max_year=1999)
        self.assertTrue(album_filter.matches(_album(year=1990)))
        self.assertTrue(album_filter.matches(_album(year=1999)))
        self.assertFalse(album_filter.matches(_album(year=1989)))
        self.assertFalse(album_filter.matches(_album(year=2000)))
        self.assertTrue(AlbumFilter(min_year=1990).matches(_album(year=2024)))

    def test_genres_match_any_case_insensitively(self) -> None:
        album = _album(genres=("jazz", "ROCK"))
        self.assertTrue(AlbumFilter(genres=("Rock",)).matches(album))
        self.assertTrue(AlbumFilter(genres=("Pop", "Jazz")).matches(album))
        self.assertFalse(AlbumFilter(genres=("Pop",)).matches(album))


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .models import Album


@dataclass(frozen=True, slots=True)
class AlbumFilter:
    min_year: int = 0
    max_year: int = 0  # 0 matches any
    genres: tuple[str, ...] = ()  # empty matches any

    # exclude_favorited and exclude_unfavorited are mutually exclusive by convention
    exclude_favorited: bool = False
    exclude_unfavorited: bool = False

    def is_nil(self) -> bool:
        """True if the filter matches every album."""
        return (
            self.min_year == 0
            and self.max_year == 0
            and not self.genres
            and not self.exclude_favorited
            and not self.exclude_unfavorited
        )

    def matches(self, album: Optional[Album]) -> bool:
        if album is None:
            return False
        if self.exclude_favorited and album.favorite:
            return False
        if self.exclude_unfavorited and not album.favorite:
            return False
        year = album.year
        if year < self.min_year or (self.max_year > 0 and year > self.max_year):
            return False
        if not self.genres:
            return True
        return genres_match(self.genres, album.genres)


def genres_match(filter_genres: Iterable[str], album_genres: Iterable[str]) -> bool:
    wanted = {genre.casefold() for genre in filter_genres}
    return any(genre.casefold() in wanted for genre in album_genres if genre)

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, List, Optional

from ...filters import AlbumFilter
from ...models import Album, Track
from .client import Record, SubsonicTransport
from .translate import to_album, to_track

logger = logging.getLogger(__name__)

SORT_RECENTLY_ADDED = "Recently Added"
SORT_RECENTLY_PLAYED = "Recently Played"
SORT_FREQUENTLY_PLAYED = "Frequently Played"
SORT_RANDOM = "Random"
SORT_TITLE = "Title (A-Z)"
SORT_ARTIST = "Artist (A-Z)"
SORT_YEAR_ASCENDING = "Year (ascending)"
SORT_YEAR_DESCENDING = "Year (descending)"

# display name -> (getAlbumList2 type, extra parameters)
ALBUM_SORT_ORDERS: dict[str, tuple[str, dict[str, Any]]] = {
    SORT_RECENTLY_ADDED: ("newest", {}),
    SORT_RECENTLY_PLAYED: ("recent", {}),
    SORT_FREQUENTLY_PLAYED: ("frequent", {}),
    SORT_RANDOM: ("random", {}),
    SORT_TITLE: ("alphabeticalByName", {}),
    SORT_ARTIST: ("alphabeticalByArtist", {}),
    SORT_YEAR_ASCENDING: ("byYear", {"fromYear": 0, "toYear": 3000}),
    SORT_YEAR_DESCENDING: ("byYear", {"fromYear": 3000, "toYear": 0}),
}

PageFetcher = Callable[[int, int], List[Record]]


class _PagedIterator:
    def __init__(self, fetch_page: PageFetcher, page_size: int, dedupe: bool = False) -> None:
        self._fetch_page = fetch_page
        self._page_size = page_size
        self._dedupe = dedupe
        self._seen: set[str] = set()
        self._offset = 0
        self._buffer: List[Record] = []
        self._done = False

    def __iter__(self) -> "_PagedIterator":
        return self

    def _next_record(self) -> Optional[Record]:
        while not self._buffer:
            if self._done:
                return None
            page = self._fetch_page(self._offset, self._page_size)
            self._offset += len(page)
            if len(page) < self._page_size:
                self._done = True
            if self._dedupe:
                fresh = [record for record in page if record.get("id") not in self._seen]
                if page and not fresh:
                    logger.debug("Page at offset %d produced nothing new; stopping", self._offset)
                    self._done = True
                self._seen.update(record.get("id") for record in fresh)
                page = fresh
            self._buffer = list(page)
        return self._buffer.pop(0)


class AlbumIterator(_PagedIterator):
    def __init__(
        self,
        fetch_page: PageFetcher,
        page_size: int,
        album_filter: AlbumFilter,
        prefetch_cover: Optional[Callable[[str], None]] = None,
        dedupe: bool = False,
    ) -> None:
        super().__init__(fetch_page, page_size, dedupe)
        self.album_filter = album_filter
        self._prefetch_cover = prefetch_cover

    def __next__(self) -> Album:
        while True:
            record = self._next_record()
            if record is None:
                raise StopIteration
            album = to_album(record)
            if album is None or not self.album_filter.matches(album):
                continue
            if self._prefetch_cover and album.cover_art_id:
                self._prefetch_cover(album.cover_art_id)
            return album


class TrackIterator(_PagedIterator):
    def __next__(self) -> Track:
        record = self._next_record()
        if record is None:
            raise StopIteration
        return to_track(record)


def album_list_iterator(
    client: SubsonicTransport,
    sort_order: str,
    album_filter: AlbumFilter,
    page_size: int,
    prefetch_cover: Optional[Callable[[str], None]] = None,
) -> Iterator[Album]:
    try:
        list_type, extra = ALBUM_SORT_ORDERS[sort_order]
    except KeyError:
        raise ValueError(f"Unknown album sort order: {sort_order!r}") from None

    def fetch(offset: int, size: int) -> List[Record]:
        return client.get_album_list(list_type, size, offset, **extra)

    return AlbumIterator(
        fetch,
        page_size,
        album_filter,
        prefetch_cover,
        dedupe=list_type == "random",
    )


def album_search_iterator(
    client: SubsonicTransport,
    query: str,
    album_filter: AlbumFilter,
    page_size: int,
    prefetch_cover: Optional[Callable[[str], None]] = None,
) -> Iterator[Album]:
    def fetch(offset: int, size: int) -> List[Record]:
        result = client.search(query, album_count=size, album_offset=offset)
        return list(result.get("album") or [])

    return AlbumIterator(fetch, page_size, album_filter, prefetch_cover)


def track_search_iterator(client: SubsonicTransport, query: str, page_size: int) -> Iterator[Track]:
    def fetch(offset: int, size: int) -> List[Record]:
        result = client.search(query, song_count=size, song_offset=offset)
        return list(result.get("song") or [])

    return TrackIterator(fetch, page_size)

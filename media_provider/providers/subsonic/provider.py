from __future__ import annotations

import logging
import time
from typing import BinaryIO, Callable, Optional, Sequence

from ...batching import DEFAULT_BATCH_SIZE, run_batched
from ...cache import DEFAULT_TTL_SECONDS, TimedCache
from ...errors import EmptyResponseError
from ...filters import AlbumFilter
from ...models import (
    AlbumInfo,
    AlbumWithTracks,
    Artist,
    ArtistInfo,
    ArtistWithAlbums,
    Favorites,
    Genre,
    Playlist,
    PlaylistWithTracks,
    RatingFavoriteParameters,
    SearchResult,
    Track,
)
from ...provider import AlbumIterator, PrefetchCoverCallback, TrackIterator
from . import translate
from .client import SubsonicTransport
from .iterators import (
    ALBUM_SORT_ORDERS,
    album_list_iterator,
    album_search_iterator,
    track_search_iterator,
)

logger = logging.getLogger(__name__)

TRANSCODE_OFFSET_EXTENSION = "transcodeOffset"
DEFAULT_PAGE_SIZE = 50


class SubsonicMediaProvider:
    """``MediaProvider`` backed by a Subsonic-compatible server.

    Also satisfies ``SupportsRating`` and ``SupportsStreamOffset``. Genres
    and playlists are cached per instance for ``cache_ttl_seconds``.
    """

    def __init__(
        self,
        client: SubsonicTransport,
        *,
        cache_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        rating_batch_size: int = DEFAULT_BATCH_SIZE,
        page_size: int = DEFAULT_PAGE_SIZE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.client = client
        self.rating_batch_size = rating_batch_size
        self.page_size = page_size
        self._clock = clock
        self._prefetch_cover: Optional[PrefetchCoverCallback] = None
        self._genres = TimedCache("genres", self._fetch_genres, cache_ttl_seconds, clock)
        self._playlists = TimedCache("playlists", self._fetch_playlists, cache_ttl_seconds, clock)

    def set_prefetch_cover_callback(self, callback: Optional[PrefetchCoverCallback]) -> None:
        self._prefetch_cover = callback

    # -- reads -------------------------------------------------------------

    def get_track(self, track_id: str) -> Optional[Track]:
        return translate.to_track(self.client.get_song(track_id))

    def get_album(self, album_id: str) -> Optional[AlbumWithTracks]:
        return translate.to_album_with_tracks(self.client.get_album(album_id))

    def get_album_info(self, album_id: str) -> AlbumInfo:
        return translate.to_album_info(self.client.get_album_info(album_id)) or AlbumInfo()

    def get_artist(self, artist_id: str) -> Optional[ArtistWithAlbums]:
        return translate.to_artist_with_albums(self.client.get_artist(artist_id))

    def get_artist_info(self, artist_id: str) -> ArtistInfo:
        info = self.client.get_artist_info(artist_id)
        if info is None:
            raise EmptyResponseError("server returned empty artist info")
        return translate.to_artist_info(info)

    def get_artists(self) -> list[Artist]:
        return [translate.to_artist(record) for record in self.client.get_artists()]

    def get_cover_art(self, cover_art_id: str, size: int = 0) -> bytes:
        return self.client.get_cover_art(cover_art_id, size if size > 0 else None)

    def get_favorites(self) -> Favorites:
        return translate.to_favorites(self.client.get_starred())

    def get_genres(self) -> list[Genre]:
        return list(self._genres.get())

    def get_playlist(self, playlist_id: str) -> Optional[PlaylistWithTracks]:
        return translate.to_playlist_with_tracks(self.client.get_playlist(playlist_id))

    def get_playlists(self) -> list[Playlist]:
        return list(self._playlists.get())

    def get_random_tracks(self, genre: str, count: int) -> list[Track]:
        records = self.client.get_random_songs(count, genre or None)
        return [translate.to_track(record) for record in records]

    def get_similar_tracks(self, artist_id: str, count: int) -> list[Track]:
        records = self.client.get_similar_songs(artist_id, count)
        return [translate.to_track(record) for record in records]

    def get_top_tracks(self, artist: Artist, count: int) -> list[Track]:
        records = self.client.get_top_songs(artist.name, count if count > 0 else None)
        return [translate.to_track(record) for record in records]

    def _fetch_genres(self) -> tuple[Genre, ...]:
        return tuple(translate.to_genre(record) for record in self.client.get_genres())

    def _fetch_playlists(self) -> tuple[Playlist, ...]:
        return tuple(translate.to_playlist(record) for record in self.client.get_playlists())

    # -- iteration and search ----------------------------------------------

    def album_sort_orders(self) -> list[str]:
        return list(ALBUM_SORT_ORDERS)

    def iterate_albums(self, sort_order: str, album_filter: AlbumFilter) -> AlbumIterator:
        return album_list_iterator(
            self.client, sort_order, album_filter, self.page_size, self._prefetch_cover
        )

    def search_albums(self, search_query: str, album_filter: AlbumFilter) -> AlbumIterator:
        return album_search_iterator(
            self.client, search_query, album_filter, self.page_size, self._prefetch_cover
        )

    def iterate_tracks(self, search_query: str) -> TrackIterator:
        return track_search_iterator(self.client, search_query, self.page_size)

    def search_all(self, search_query: str, max_results: int) -> list[SearchResult]:
        count = max(max_results, 1)
        record = self.client.search(
            search_query, artist_count=count, album_count=count, song_count=count
        )
        results = translate.to_search_results(record, max_results)
        if self._prefetch_cover:
            for result in results:
                if result.cover_art_id:
                    self._prefetch_cover(result.cover_art_id)
        return results

    # -- streaming ---------------------------------------------------------

    def get_stream_url(self, track_id: str, force_raw: bool = False) -> str:
        params = {"format": "raw"} if force_raw else {}
        return self.client.stream_url(track_id, params)

    def can_stream_with_offset(self) -> bool:
        # a failed or malformed extension query means unsupported
        try:
            extensions = self.client.get_open_subsonic_extensions()
            names = [ext.get("name") for ext in extensions]
        except Exception as exc:
            logger.debug("Could not query OpenSubsonic extensions: %s", exc)
            return False
        logger.debug("OpenSubsonic extensions: %s", names)
        return TRANSCODE_OFFSET_EXTENSION in names

    def get_stream_url_with_offset(self, track_id: str, offset_seconds: int) -> str:
        return self.client.stream_url(track_id, {"timeOffset": offset_seconds})

    def download_track(self, track_id: str) -> BinaryIO:
        return self.client.download(track_id)

    # -- playlists ---------------------------------------------------------

    def create_playlist(self, name: str, track_ids: Sequence[str]) -> None:
        self.client.create_playlist(list(track_ids), name=name)

    def can_make_public_playlist(self) -> bool:
        return True

    def edit_playlist(self, playlist_id: str, name: str, description: str, public: bool) -> None:
        self.client.update_playlist(playlist_id, name=name, comment=description, public=public)

    def add_playlist_tracks(self, playlist_id: str, track_ids: Sequence[str]) -> None:
        self.client.update_playlist(playlist_id, song_ids_to_add=list(track_ids))

    def remove_playlist_tracks(self, playlist_id: str, track_indexes: Sequence[int]) -> None:
        self.client.update_playlist(playlist_id, song_indexes_to_remove=list(track_indexes))

    def replace_playlist_tracks(self, playlist_id: str, track_ids: Sequence[str]) -> None:
        self.client.create_playlist(list(track_ids), playlist_id=playlist_id)

    def delete_playlist(self, playlist_id: str) -> None:
        self.client.delete_playlist(playlist_id)

    # -- favorites, ratings, playback --------------------------------------

    def set_favorite(self, params: RatingFavoriteParameters, favorite: bool) -> None:
        call = self.client.star if favorite else self.client.unstar
        call(
            ids=list(params.track_ids),
            album_ids=list(params.album_ids),
            artist_ids=list(params.artist_ids),
        )

    def set_rating(self, params: RatingFavoriteParameters, rating: int) -> None:
        # no bulk endpoint for ratings; bound the number of requests in flight
        run_batched(
            params.track_ids,
            lambda track_id: self.client.set_rating(track_id, rating),
            self.rating_batch_size,
        )

    def client_decides_scrobble(self) -> bool:
        return True

    def track_began_playback(self, track_id: str) -> None:
        self.client.scrobble(track_id, self._now_ms(), submission=False)

    def track_ended_playback(self, track_id: str, position_secs: int, submission: bool) -> None:
        if not submission:
            return
        self.client.scrobble(track_id, self._now_ms(), submission=True)

    def rescan_library(self) -> None:
        self.client.start_scan()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

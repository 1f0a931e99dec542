"""
Provider contract for music servers.

Applications talk to a server through a ``MediaProvider``; optional
capabilities are separate protocols that a provider may also satisfy and
that callers detect with ``isinstance``.
"""

from __future__ import annotations

from typing import BinaryIO, Callable, Iterator, Optional, Protocol, Sequence, runtime_checkable

from .filters import AlbumFilter
from .models import (
    Album,
    AlbumInfo,
    AlbumWithTracks,
    Artist,
    ArtistInfo,
    ArtistWithAlbums,
    Favorites,
    Genre,
    LoginResponse,
    Playlist,
    PlaylistWithTracks,
    RatingFavoriteParameters,
    SearchResult,
    Track,
)

AlbumIterator = Iterator[Album]
TrackIterator = Iterator[Track]
PrefetchCoverCallback = Callable[[str], None]


@runtime_checkable
class MediaProvider(Protocol):
    def set_prefetch_cover_callback(self, callback: Optional[PrefetchCoverCallback]) -> None: ...

    def get_track(self, track_id: str) -> Optional[Track]: ...

    def get_album(self, album_id: str) -> Optional[AlbumWithTracks]: ...

    def get_album_info(self, album_id: str) -> AlbumInfo: ...

    def get_artist(self, artist_id: str) -> Optional[ArtistWithAlbums]: ...

    def get_artist_info(self, artist_id: str) -> ArtistInfo: ...

    def get_playlist(self, playlist_id: str) -> Optional[PlaylistWithTracks]: ...

    def get_cover_art(self, cover_art_id: str, size: int = 0) -> bytes: ...

    def album_sort_orders(self) -> list[str]: ...

    def iterate_albums(self, sort_order: str, album_filter: AlbumFilter) -> AlbumIterator: ...

    def iterate_tracks(self, search_query: str) -> TrackIterator: ...

    def search_albums(self, search_query: str, album_filter: AlbumFilter) -> AlbumIterator: ...

    def search_all(self, search_query: str, max_results: int) -> list[SearchResult]: ...

    def get_random_tracks(self, genre: str, count: int) -> list[Track]: ...

    def get_similar_tracks(self, artist_id: str, count: int) -> list[Track]: ...

    def get_artists(self) -> list[Artist]: ...

    def get_genres(self) -> list[Genre]: ...

    def get_favorites(self) -> Favorites: ...

    def get_stream_url(self, track_id: str, force_raw: bool = False) -> str: ...

    def get_top_tracks(self, artist: Artist, count: int) -> list[Track]: ...

    def set_favorite(self, params: RatingFavoriteParameters, favorite: bool) -> None: ...

    def get_playlists(self) -> list[Playlist]: ...

    def create_playlist(self, name: str, track_ids: Sequence[str]) -> None: ...

    def can_make_public_playlist(self) -> bool: ...

    def edit_playlist(self, playlist_id: str, name: str, description: str, public: bool) -> None: ...

    def add_playlist_tracks(self, playlist_id: str, track_ids: Sequence[str]) -> None: ...

    def remove_playlist_tracks(self, playlist_id: str, track_indexes: Sequence[int]) -> None: ...

    def replace_playlist_tracks(self, playlist_id: str, track_ids: Sequence[str]) -> None: ...

    def delete_playlist(self, playlist_id: str) -> None: ...

    def client_decides_scrobble(self) -> bool:
        """True if ``submission`` passed to ``track_ended_playback`` is honoured.

        If false, ``track_began_playback`` already counts the play.
        """
        ...

    def track_began_playback(self, track_id: str) -> None: ...

    def track_ended_playback(self, track_id: str, position_secs: int, submission: bool) -> None: ...

    def download_track(self, track_id: str) -> BinaryIO: ...

    def rescan_library(self) -> None: ...


@runtime_checkable
class SupportsStreamOffset(Protocol):
    def can_stream_with_offset(self) -> bool: ...

    def get_stream_url_with_offset(self, track_id: str, offset_seconds: int) -> str: ...


@runtime_checkable
class SupportsRating(Protocol):
    def set_rating(self, params: RatingFavoriteParameters, rating: int) -> None: ...


@runtime_checkable
class Server(Protocol):
    def login(self, username: str, password: str) -> LoginResponse: ...

    def media_provider(self) -> MediaProvider: ...

from __future__ import annotations

import hashlib
import io
import logging
import secrets
from typing import Any, BinaryIO, Dict, List, Mapping, Optional, Protocol, Sequence

import httpx

from ...config import ServerSettings
from ...errors import SubsonicError, TransportError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

_ERROR_CONTENT_TYPES = ("application/json", "text/xml", "application/xml")


class SubsonicTransport(Protocol):
    """Calls the media provider needs from a Subsonic-compatible server.

    Records are the parsed JSON objects from the server's responses, with
    list envelopes (``{"genres": {"genre": [...]}}``) already unwrapped.
    Every call may raise ``TransportError``.
    """

    def ping(self) -> Record: ...

    def get_song(self, song_id: str) -> Optional[Record]: ...

    def get_album(self, album_id: str) -> Optional[Record]: ...

    def get_album_info(self, album_id: str) -> Optional[Record]: ...

    def get_artist(self, artist_id: str) -> Optional[Record]: ...

    def get_artist_info(self, artist_id: str) -> Optional[Record]: ...

    def get_artists(self) -> List[Record]: ...

    def get_cover_art(self, cover_art_id: str, size: Optional[int] = None) -> bytes: ...

    def get_starred(self) -> Record: ...

    def get_genres(self) -> List[Record]: ...

    def get_playlist(self, playlist_id: str) -> Optional[Record]: ...

    def get_playlists(self) -> List[Record]: ...

    def get_random_songs(self, size: int, genre: Optional[str] = None) -> List[Record]: ...

    def get_similar_songs(self, item_id: str, count: int) -> List[Record]: ...

    def get_top_songs(self, artist_name: str, count: Optional[int] = None) -> List[Record]: ...

    def get_album_list(self, list_type: str, size: int, offset: int, **extra: Any) -> List[Record]: ...

    def search(
        self,
        query: str,
        *,
        artist_count: int = 0,
        artist_offset: int = 0,
        album_count: int = 0,
        album_offset: int = 0,
        song_count: int = 0,
        song_offset: int = 0,
    ) -> Record: ...

    def stream_url(self, song_id: str, params: Optional[Mapping[str, Any]] = None) -> str: ...

    def create_playlist(
        self,
        song_ids: Sequence[str],
        *,
        name: Optional[str] = None,
        playlist_id: Optional[str] = None,
    ) -> None: ...

    def update_playlist(
        self,
        playlist_id: str,
        *,
        name: Optional[str] = None,
        comment: Optional[str] = None,
        public: Optional[bool] = None,
        song_ids_to_add: Optional[Sequence[str]] = None,
        song_indexes_to_remove: Optional[Sequence[int]] = None,
    ) -> None: ...

    def delete_playlist(self, playlist_id: str) -> None: ...

    def star(
        self,
        ids: Sequence[str] = (),
        album_ids: Sequence[str] = (),
        artist_ids: Sequence[str] = (),
    ) -> None: ...

    def unstar(
        self,
        ids: Sequence[str] = (),
        album_ids: Sequence[str] = (),
        artist_ids: Sequence[str] = (),
    ) -> None: ...

    def set_rating(self, item_id: str, rating: int) -> None: ...

    def scrobble(self, song_id: str, time_ms: int, submission: bool) -> None: ...

    def download(self, song_id: str) -> BinaryIO: ...

    def start_scan(self) -> Record: ...

    def get_open_subsonic_extensions(self) -> List[Record]: ...


class SubsonicClient:
    """``SubsonicTransport`` over HTTP using the server's JSON format."""

    def __init__(self, settings: ServerSettings, http: Optional[httpx.Client] = None) -> None:
        self.settings = settings
        self._http = http or httpx.Client(
            base_url=f"{settings.url}/rest/",
            timeout=settings.timeout_seconds,
            follow_redirects=True,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "SubsonicClient":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def ping(self) -> Record:
        return self._get("ping")

    def get_song(self, song_id: str) -> Optional[Record]:
        return self._get("getSong", id=song_id).get("song")

    def get_album(self, album_id: str) -> Optional[Record]:
        return self._get("getAlbum", id=album_id).get("album")

    def get_album_info(self, album_id: str) -> Optional[Record]:
        return self._get("getAlbumInfo2", id=album_id).get("albumInfo")

    def get_artist(self, artist_id: str) -> Optional[Record]:
        return self._get("getArtist", id=artist_id).get("artist")

    def get_artist_info(self, artist_id: str) -> Optional[Record]:
        return self._get("getArtistInfo2", id=artist_id).get("artistInfo2")

    def get_artists(self) -> List[Record]:
        indexes = _list(self._get("getArtists").get("artists"), "index")
        return [artist for index in indexes for artist in _list(index, "artist")]

    def get_cover_art(self, cover_art_id: str, size: Optional[int] = None) -> bytes:
        return self._get_binary("getCoverArt", id=cover_art_id, size=size)

    def get_starred(self) -> Record:
        return self._get("getStarred2").get("starred2") or {}

    def get_genres(self) -> List[Record]:
        return _list(self._get("getGenres").get("genres"), "genre")

    def get_playlist(self, playlist_id: str) -> Optional[Record]:
        return self._get("getPlaylist", id=playlist_id).get("playlist")

    def get_playlists(self) -> List[Record]:
        return _list(self._get("getPlaylists").get("playlists"), "playlist")

    def get_random_songs(self, size: int, genre: Optional[str] = None) -> List[Record]:
        data = self._get("getRandomSongs", size=size, genre=genre)
        return _list(data.get("randomSongs"), "song")

    def get_similar_songs(self, item_id: str, count: int) -> List[Record]:
        data = self._get("getSimilarSongs2", id=item_id, count=count)
        return _list(data.get("similarSongs2"), "song")

    def get_top_songs(self, artist_name: str, count: Optional[int] = None) -> List[Record]:
        data = self._get("getTopSongs", artist=artist_name, count=count)
        return _list(data.get("topSongs"), "song")

    def get_album_list(self, list_type: str, size: int, offset: int, **extra: Any) -> List[Record]:
        data = self._get("getAlbumList2", type=list_type, size=size, offset=offset, **extra)
        return _list(data.get("albumList2"), "album")

    def search(
        self,
        query: str,
        *,
        artist_count: int = 0,
        artist_offset: int = 0,
        album_count: int = 0,
        album_offset: int = 0,
        song_count: int = 0,
        song_offset: int = 0,
    ) -> Record:
        data = self._get(
            "search3",
            query=query,
            artistCount=artist_count,
            artistOffset=artist_offset,
            albumCount=album_count,
            albumOffset=album_offset,
            songCount=song_count,
            songOffset=song_offset,
        )
        return data.get("searchResult3") or {}

    def stream_url(self, song_id: str, params: Optional[Mapping[str, Any]] = None) -> str:
        request = self._http.build_request(
            "GET", "stream", params=self._params(id=song_id, **dict(params or {}))
        )
        return str(request.url)

    def create_playlist(
        self,
        song_ids: Sequence[str],
        *,
        name: Optional[str] = None,
        playlist_id: Optional[str] = None,
    ) -> None:
        self._get("createPlaylist", name=name, playlistId=playlist_id, songId=list(song_ids))

    def update_playlist(
        self,
        playlist_id: str,
        *,
        name: Optional[str] = None,
        comment: Optional[str] = None,
        public: Optional[bool] = None,
        song_ids_to_add: Optional[Sequence[str]] = None,
        song_indexes_to_remove: Optional[Sequence[int]] = None,
    ) -> None:
        self._get(
            "updatePlaylist",
            playlistId=playlist_id,
            name=name,
            comment=comment,
            public=public,
            songIdToAdd=list(song_ids_to_add or []),
            songIndexToRemove=list(song_indexes_to_remove or []),
        )

    def delete_playlist(self, playlist_id: str) -> None:
        self._get("deletePlaylist", id=playlist_id)

    def star(
        self,
        ids: Sequence[str] = (),
        album_ids: Sequence[str] = (),
        artist_ids: Sequence[str] = (),
    ) -> None:
        self._get("star", id=list(ids), albumId=list(album_ids), artistId=list(artist_ids))

    def unstar(
        self,
        ids: Sequence[str] = (),
        album_ids: Sequence[str] = (),
        artist_ids: Sequence[str] = (),
    ) -> None:
        self._get("unstar", id=list(ids), albumId=list(album_ids), artistId=list(artist_ids))

    def set_rating(self, item_id: str, rating: int) -> None:
        self._get("setRating", id=item_id, rating=rating)

    def scrobble(self, song_id: str, time_ms: int, submission: bool) -> None:
        self._get("scrobble", id=song_id, time=time_ms, submission=submission)

    def download(self, song_id: str) -> BinaryIO:
        return io.BytesIO(self._get_binary("download", id=song_id))

    def start_scan(self) -> Record:
        return self._get("startScan").get("scanStatus") or {}

    def get_open_subsonic_extensions(self) -> List[Record]:
        extensions = self._get("getOpenSubsonicExtensions").get("openSubsonicExtensions")
        return list(extensions or [])

    def _auth_params(self) -> Dict[str, str]:
        settings = self.settings
        if settings.legacy_auth:
            return {"u": settings.username, "p": "enc:" + settings.password.encode("utf-8").hex()}
        salt = secrets.token_hex(8)
        token = hashlib.md5((settings.password + salt).encode("utf-8")).hexdigest()
        return {"u": settings.username, "t": token, "s": salt}

    def _params(self, **kwargs: Any) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "v": self.settings.api_version,
            "c": self.settings.client_name,
            "f": "json",
        }
        params.update(self._auth_params())
        for key, value in kwargs.items():
            if value is None or value == []:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[key] = value
        return params

    def _request(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.get(endpoint, params=self._params(**kwargs))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.debug("Subsonic request %s failed: %s", endpoint, exc)
            raise TransportError(f"{endpoint} request failed: {exc}") from exc
        return response

    def _get(self, endpoint: str, **kwargs: Any) -> Record:
        return _unwrap(endpoint, self._request(endpoint, **kwargs))

    def _get_binary(self, endpoint: str, **kwargs: Any) -> bytes:
        response = self._request(endpoint, **kwargs)
        content_type = response.headers.get("content-type", "")
        if content_type.startswith(_ERROR_CONTENT_TYPES):
            # binary endpoints answer errors with a regular response document
            _unwrap(endpoint, response)
            raise TransportError(f"{endpoint} returned {content_type} instead of data")
        return response.content


def _unwrap(endpoint: str, response: httpx.Response) -> Record:
    try:
        payload = response.json()
    except ValueError as exc:
        raise TransportError(f"{endpoint} returned a malformed response") from exc
    body = payload.get("subsonic-response") if isinstance(payload, dict) else None
    if not isinstance(body, dict):
        raise TransportError(f"{endpoint} returned no subsonic-response")
    if body.get("status") == "failed":
        error = body.get("error") or {}
        raise SubsonicError(error.get("code"), error.get("message") or "unknown error")
    return body


def _list(container: Optional[Mapping[str, Any]], key: str) -> List[Record]:
    if not container:
        return []
    items = container.get(key) or []
    # some servers collapse single-element lists into an object
    if isinstance(items, dict):
        return [items]
    return list(items)

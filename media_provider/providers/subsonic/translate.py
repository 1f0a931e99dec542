"""Conversion of Subsonic response records into the domain model.

Every function is pure: the same record always yields an equal entity and
``None`` yields ``None``. Records follow the Subsonic JSON format, including
the OpenSubsonic extension fields (``artists``, ``genres``,
``releaseTypes``, ``isCompilation``) when the server sends them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ...models import (
    Album,
    AlbumInfo,
    AlbumWithTracks,
    Artist,
    ArtistInfo,
    ArtistWithAlbums,
    ContentType,
    Favorites,
    Genre,
    Playlist,
    PlaylistWithTracks,
    SearchResult,
    Track,
)
from ...release_types import classify_release_types

Record = Mapping[str, Any]

# zero values servers use for "never starred"
_UNSET_STAMPS = {(1, 1, 1, 0, 0, 0), (1970, 1, 1, 0, 0, 0)}


def is_starred(value: Any) -> bool:
    """True if ``starred`` carries a real timestamp rather than a zero value."""
    if not value:
        return False
    if isinstance(value, datetime):
        stamp = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            stamp = datetime.fromisoformat(text)
        except ValueError:
            return True
    fields = (stamp.year, stamp.month, stamp.day, stamp.hour, stamp.minute, stamp.second)
    return fields not in _UNSET_STAMPS


def artist_pairs(record: Record) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Artist ids and names, preferring the multi-artist extension list."""
    artists = record.get("artists") or []
    if artists:
        ids = tuple(_str(artist.get("id")) for artist in artists)
        names = tuple(_str(artist.get("name")) for artist in artists)
        return ids, names
    return (_str(record.get("artistId")),), (_str(record.get("artist")),)


def album_genres(record: Record) -> tuple[str, ...]:
    """Genre names, preferring the multi-genre extension list."""
    genres = record.get("genres") or []
    if genres:
        return tuple(_str(genre.get("name")) for genre in genres)
    return (_str(record.get("genre")),)


def to_track(record: Optional[Record]) -> Optional[Track]:
    if record is None:
        return None
    artist_ids, artist_names = artist_pairs(record)
    return Track(
        id=_str(record.get("id")),
        cover_art_id=_str(record.get("coverArt")),
        parent_id=_str(record.get("parent")),
        name=_str(record.get("title")),
        duration=_int(record.get("duration")),
        track_number=_int(record.get("track")),
        disc_number=_int(record.get("discNumber")),
        genre=_str(record.get("genre")),
        artist_ids=artist_ids,
        artist_names=artist_names,
        album=_str(record.get("album")),
        album_id=_str(record.get("albumId")),
        year=_int(record.get("year")),
        rating=_int(record.get("userRating")),
        favorite=is_starred(record.get("starred")),
        play_count=_int(record.get("playCount")),
        file_path=_str(record.get("path")),
        size=_int(record.get("size")),
        bit_rate=_int(record.get("bitRate")),
        comment=_str(record.get("comment")),
    )


def _album_fields(record: Record) -> dict[str, Any]:
    artist_ids, artist_names = artist_pairs(record)
    return {
        "id": _str(record.get("id")),
        "cover_art_id": _str(record.get("coverArt")),
        "name": _str(record.get("name")),
        "duration": _int(record.get("duration")),
        "artist_ids": artist_ids,
        "artist_names": artist_names,
        "year": _int(record.get("year")),
        "track_count": _int(record.get("songCount")),
        "genres": album_genres(record),
        "favorite": is_starred(record.get("starred")),
        "release_types": classify_release_types(
            record.get("releaseTypes"), bool(record.get("isCompilation"))
        ),
    }


def to_album(record: Optional[Record]) -> Optional[Album]:
    if record is None:
        return None
    return Album(**_album_fields(record))


def to_album_with_tracks(record: Optional[Record]) -> Optional[AlbumWithTracks]:
    if record is None:
        return None
    return AlbumWithTracks(**_album_fields(record), tracks=_map(to_track, record.get("song")))


def to_album_info(record: Optional[Record]) -> Optional[AlbumInfo]:
    if record is None:
        return None
    return AlbumInfo(
        notes=_str(record.get("notes")),
        last_fm_url=_str(record.get("lastFmUrl")),
        musicbrainz_id=_str(record.get("musicBrainzId")),
    )


def _artist_fields(record: Record) -> dict[str, Any]:
    return {
        "id": _str(record.get("id")),
        "cover_art_id": _str(record.get("coverArt")),
        "name": _str(record.get("name")),
        "favorite": is_starred(record.get("starred")),
        "album_count": _int(record.get("albumCount")),
    }


def to_artist(record: Optional[Record]) -> Optional[Artist]:
    if record is None:
        return None
    return Artist(**_artist_fields(record))


def to_artist_with_albums(record: Optional[Record]) -> Optional[ArtistWithAlbums]:
    if record is None:
        return None
    return ArtistWithAlbums(**_artist_fields(record), albums=_map(to_album, record.get("album")))


def to_artist_info(record: Optional[Record]) -> Optional[ArtistInfo]:
    if record is None:
        return None
    return ArtistInfo(
        biography=_str(record.get("biography")),
        last_fm_url=_str(record.get("lastFmUrl")),
        image_url=_str(record.get("largeImageUrl")),
        similar_artists=_map(to_artist, record.get("similarArtist")),
    )


def _playlist_fields(record: Record) -> dict[str, Any]:
    return {
        "id": _str(record.get("id")),
        "cover_art_id": _str(record.get("coverArt")),
        "name": _str(record.get("name")),
        "description": _str(record.get("comment")),
        "owner": _str(record.get("owner")),
        "public": bool(record.get("public")),
        "track_count": _int(record.get("songCount")),
        "duration": _int(record.get("duration")),
    }


def to_playlist(record: Optional[Record]) -> Optional[Playlist]:
    if record is None:
        return None
    return Playlist(**_playlist_fields(record))


def to_playlist_with_tracks(record: Optional[Record]) -> Optional[PlaylistWithTracks]:
    if record is None:
        return None
    return PlaylistWithTracks(**_playlist_fields(record), tracks=_map(to_track, record.get("entry")))


def to_genre(record: Optional[Record]) -> Optional[Genre]:
    if record is None:
        return None
    return Genre(
        name=_str(record.get("value") or record.get("name")),
        album_count=_int(record.get("albumCount")),
        track_count=_int(record.get("songCount")),
    )


def to_favorites(record: Optional[Record]) -> Favorites:
    record = record or {}
    return Favorites(
        albums=_map(to_album, record.get("album")),
        artists=_map(to_artist, record.get("artist")),
        tracks=_map(to_track, record.get("song")),
    )


def to_search_results(record: Optional[Record], max_results: int) -> list[SearchResult]:
    record = record or {}
    results: list[SearchResult] = []
    for artist in record.get("artist") or []:
        results.append(
            SearchResult(
                name=_str(artist.get("name")),
                id=_str(artist.get("id")),
                type=ContentType.ARTIST,
                cover_art_id=_str(artist.get("coverArt")),
                size=_int(artist.get("albumCount")),
            )
        )
    for album in record.get("album") or []:
        _, names = artist_pairs(album)
        results.append(
            SearchResult(
                name=_str(album.get("name")),
                id=_str(album.get("id")),
                type=ContentType.ALBUM,
                cover_art_id=_str(album.get("coverArt")),
                size=_int(album.get("songCount")),
                artist_name=", ".join(name for name in names if name),
            )
        )
    for song in record.get("song") or []:
        _, names = artist_pairs(song)
        results.append(
            SearchResult(
                name=_str(song.get("title")),
                id=_str(song.get("id")),
                type=ContentType.TRACK,
                cover_art_id=_str(song.get("coverArt")),
                artist_name=", ".join(name for name in names if name),
            )
        )
    return results[:max_results] if max_results > 0 else results


def _map(convert, records: Optional[Iterable[Record]]) -> tuple:
    return tuple(convert(record) for record in records or ())


def _str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0

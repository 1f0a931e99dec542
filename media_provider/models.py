from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class ReleaseTypes(enum.IntFlag):
    ALBUM = enum.auto()
    AUDIOBOOK = enum.auto()
    AUDIO_DRAMA = enum.auto()
    BROADCAST = enum.auto()
    COMPILATION = enum.auto()
    DEMO = enum.auto()
    DJ_MIX = enum.auto()
    EP = enum.auto()
    FIELD_RECORDING = enum.auto()
    INTERVIEW = enum.auto()
    LIVE = enum.auto()
    MIXTAPE = enum.auto()
    REMIX = enum.auto()
    SINGLE = enum.auto()
    SOUNDTRACK = enum.auto()
    SPOKEN_WORD = enum.auto()


class ContentType(enum.Enum):
    TRACK = "track"
    ALBUM = "album"
    ARTIST = "artist"
    PLAYLIST = "playlist"
    GENRE = "genre"


def _check_artists(kind: str, ids: tuple[str, ...], names: tuple[str, ...]) -> None:
    if len(ids) != len(names):
        raise ValueError(
            f"{kind} artist ids and names differ in length ({len(ids)} != {len(names)})"
        )


@dataclass(frozen=True, slots=True)
class Track:
    id: str
    name: str = ""
    cover_art_id: str = ""
    parent_id: str = ""
    duration: int = 0
    track_number: int = 0
    disc_number: int = 0
    genre: str = ""
    artist_ids: tuple[str, ...] = ()
    artist_names: tuple[str, ...] = ()
    album: str = ""
    album_id: str = ""
    year: int = 0
    rating: int = 0
    favorite: bool = False
    play_count: int = 0
    file_path: str = ""
    size: int = 0
    bit_rate: int = 0
    comment: str = ""

    def __post_init__(self) -> None:
        _check_artists("track", self.artist_ids, self.artist_names)


@dataclass(frozen=True, slots=True)
class Album:
    id: str
    name: str = ""
    cover_art_id: str = ""
    duration: int = 0
    artist_ids: tuple[str, ...] = ()
    artist_names: tuple[str, ...] = ()
    year: int = 0
    track_count: int = 0
    genres: tuple[str, ...] = ()
    favorite: bool = False
    release_types: ReleaseTypes = ReleaseTypes.ALBUM

    def __post_init__(self) -> None:
        _check_artists("album", self.artist_ids, self.artist_names)
        if not self.release_types:
            raise ValueError("album release types must not be empty")


@dataclass(frozen=True, slots=True)
class AlbumWithTracks(Album):
    tracks: tuple[Track, ...] = ()


@dataclass(frozen=True, slots=True)
class AlbumInfo:
    notes: str = ""
    last_fm_url: str = ""
    musicbrainz_id: str = ""


@dataclass(frozen=True, slots=True)
class Artist:
    id: str
    name: str = ""
    cover_art_id: str = ""
    favorite: bool = False
    album_count: int = 0


@dataclass(frozen=True, slots=True)
class ArtistWithAlbums(Artist):
    albums: tuple[Album, ...] = ()


@dataclass(frozen=True, slots=True)
class ArtistInfo:
    biography: str = ""
    last_fm_url: str = ""
    image_url: str = ""
    similar_artists: tuple[Artist, ...] = ()


@dataclass(frozen=True, slots=True)
class Playlist:
    id: str
    name: str = ""
    cover_art_id: str = ""
    description: str = ""
    owner: str = ""
    public: bool = False
    track_count: int = 0
    duration: int = 0


@dataclass(frozen=True, slots=True)
class PlaylistWithTracks(Playlist):
    tracks: tuple[Track, ...] = ()


@dataclass(frozen=True, slots=True)
class Genre:
    name: str
    album_count: int = 0
    track_count: int = 0


@dataclass(frozen=True, slots=True)
class Favorites:
    albums: tuple[Album, ...] = ()
    artists: tuple[Artist, ...] = ()
    tracks: tuple[Track, ...] = ()


@dataclass(frozen=True, slots=True)
class SearchResult:
    name: str
    id: str
    type: ContentType
    cover_art_id: str = ""
    # track count for albums, album count for artists
    size: int = 0
    artist_name: str = ""


@dataclass(frozen=True, slots=True)
class RatingFavoriteParameters:
    album_ids: tuple[str, ...] = ()
    artist_ids: tuple[str, ...] = ()
    track_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class LoginResponse:
    error: Optional[Exception] = None
    is_auth_error: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

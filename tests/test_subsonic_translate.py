import unittest

from media_provider.models import ContentType, ReleaseTypes
from media_provider.providers.subsonic import translate


SONG = {
    "id": "tr-1",
    "parent": "al-1",
    "title": "Intro",
    "album": "First",
    "albumId": "al-1",
    "artist": "Legacy Artist",
    "artistId": "ar-legacy",
    "track": 1,
    "discNumber": 1,
    "year": 1999,
    "genre": "Rock",
    "coverArt": "al-1",
    "size": 4_000_000,
    "duration": 215,
    "bitRate": 320,
    "path": "First/01 Intro.flac",
    "playCount": 7,
    "userRating": 4,
    "starred": "2023-04-01T10:00:00.000Z",
    "comment": "remastered",
}

ALBUM = {
    "id": "al-1",
    "name": "First",
    "artist": "Legacy Artist",
    "artistId": "ar-legacy",
    "coverArt": "al-1",
    "songCount": 10,
    "duration": 2400,
    "year": 1999,
    "genre": "Rock",
}


class TestStarred(unittest.TestCase):
    def test_missing_or_zero_timestamps_are_not_favorites(self) -> None:
        for value in (None, "", "0001-01-01T00:00:00Z", "1970-01-01T00:00:00Z"):
            with self.subTest(value=value):
                self.assertFalse(translate.is_starred(value))

    def test_real_timestamp_is_favorite(self) -> None:
        self.assertTrue(translate.is_starred("2023-04-01T10:00:00.000Z"))
        self.assertTrue(translate.is_starred("2021-01-01T00:00:00+02:00"))


class TestToTrack(unittest.TestCase):
    def test_none_yields_none(self) -> None:
        self.assertIsNone(translate.to_track(None))

    def test_maps_fields(self) -> None:
        track = translate.to_track(SONG)
        self.assertEqual(track.id, "tr-1")
        self.assertEqual(track.name, "Intro")
        self.assertEqual(track.parent_id, "al-1")
        self.assertEqual(track.album_id, "al-1")
        self.assertEqual(track.duration, 215)
        self.assertEqual(track.rating, 4)
        self.assertEqual(track.play_count, 7)
        self.assertEqual(track.file_path, "First/01 Intro.flac")
        self.assertEqual(track.comment, "remastered")
        self.assertTrue(track.favorite)

    def test_legacy_artist_fields_become_single_pair(self) -> None:
        track = translate.to_track(SONG)
        self.assertEqual(track.artist_ids, ("ar-legacy",))
        self.assertEqual(track.artist_names, ("Legacy Artist",))

    def test_extension_artists_take_precedence(self) -> None:
        record = dict(
            SONG,
            artists=[{"id": "ar-2", "name": "Second"}, {"id": "ar-1", "name": "First"}],
        )
        track = translate.to_track(record)
        self.assertEqual(track.artist_ids, ("ar-2", "ar-1"))
        self.assertEqual(track.artist_names, ("Second", "First"))

    def test_empty_extension_list_falls_back_to_legacy(self) -> None:
        track = translate.to_track(dict(SONG, artists=[]))
        self.assertEqual(track.artist_ids, ("ar-legacy",))

    def test_translation_is_repeatable(self) -> None:
        self.assertEqual(translate.to_track(SONG), translate.to_track(SONG))

    def test_unstarred_track(self) -> None:
        record = dict(SONG)
        del record["starred"]
        self.assertFalse(translate.to_track(record).favorite)


class TestToAlbum(unittest.TestCase):
    def test_legacy_album(self) -> None:
        album = translate.to_album(ALBUM)
        self.assertEqual(album.artist_ids, ("ar-legacy",))
        self.assertEqual(album.genres, ("Rock",))
        self.assertEqual(album.track_count, 10)
        self.assertEqual(album.release_types, ReleaseTypes.ALBUM)
        self.assertFalse(album.favorite)

    def test_extension_artists_and_genres(self) -> None:
        record = dict(
            ALBUM,
            artists=[{"id": "ar-9", "name": "Nine"}],
            genres=[{"name": "Jazz"}, {"name": "Fusion"}],
        )
        album = translate.to_album(record)
        self.assertEqual(album.artist_ids, ("ar-9",))
        self.assertEqual(album.artist_names, ("Nine",))
        self.assertEqual(album.genres, ("Jazz", "Fusion"))

    def test_live_compilation(self) -> None:
        record = dict(ALBUM, releaseTypes=["Live", "Compilation"], isCompilation=True)
        album = translate.to_album(record)
        self.assertEqual(album.release_types, ReleaseTypes.LIVE | ReleaseTypes.COMPILATION)

    def test_album_with_tracks(self) -> None:
        album = translate.to_album_with_tracks(dict(ALBUM, song=[SONG, dict(SONG, id="tr-2")]))
        self.assertEqual([track.id for track in album.tracks], ["tr-1", "tr-2"])
        self.assertEqual(album.name, "First")

    def test_album_with_tracks_without_songs(self) -> None:
        self.assertEqual(translate.to_album_with_tracks(ALBUM).tracks, ())

    def test_translation_is_repeatable(self) -> None:
        self.assertEqual(translate.to_album(ALBUM), translate.to_album(ALBUM))


class TestOtherEntities(unittest.TestCase):
    def test_artist_with_albums(self) -> None:
        artist = translate.to_artist_with_albums(
            {
                "id": "ar-1",
                "name": "Someone",
                "albumCount": 2,
                "starred": "2022-02-02T02:02:02Z",
                "album": [ALBUM, dict(ALBUM, id="al-2", releaseTypes=["EP"])],
            }
        )
        self.assertTrue(artist.favorite)
        self.assertEqual(artist.album_count, 2)
        self.assertEqual([album.id for album in artist.albums], ["al-1", "al-2"])
        self.assertEqual(artist.albums[1].release_types, ReleaseTypes.EP)

    def test_artist_info(self) -> None:
        info = translate.to_artist_info(
            {
                "biography": "bio",
                "lastFmUrl": "https://last.fm/x",
                "largeImageUrl": "https://img/x.jpg",
                "similarArtist": [{"id": "ar-3", "name": "Other"}],
            }
        )
        self.assertEqual(info.image_url, "https://img/x.jpg")
        self.assertEqual([artist.name for artist in info.similar_artists], ["Other"])

    def test_playlist_with_entries(self) -> None:
        playlist = translate.to_playlist_with_tracks(
            {
                "id": "pl-1",
                "name": "Mix",
                "comment": "for the road",
                "owner": "alice",
                "public": True,
                "songCount": 1,
                "duration": 215,
                "entry": [SONG],
            }
        )
        self.assertEqual(playlist.description, "for the road")
        self.assertTrue(playlist.public)
        self.assertEqual(len(playlist.tracks), 1)

    def test_genre_uses_value_field(self) -> None:
        genre = translate.to_genre({"value": "Rock", "albumCount": 3, "songCount": 30})
        self.assertEqual((genre.name, genre.album_count, genre.track_count), ("Rock", 3, 30))

    def test_favorites(self) -> None:
        favorites = translate.to_favorites({"album": [ALBUM], "song": [SONG]})
        self.assertEqual(len(favorites.albums), 1)
        self.assertEqual(favorites.artists, ())
        self.assertEqual(len(favorites.tracks), 1)
        self.assertEqual(translate.to_favorites(None).tracks, ())

    def test_search_results_are_capped(self) -> None:
        results = translate.to_search_results(
            {
                "artist": [{"id": "ar-1", "name": "A", "albumCount": 2}],
                "album": [ALBUM],
                "song": [SONG],
            },
            2,
        )
        self.assertEqual([result.type for result in results], [ContentType.ARTIST, ContentType.ALBUM])
        self.assertEqual(results[1].artist_name, "Legacy Artist")


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .commands import doctor as cmd_doctor
from .commands.output import album_line, track_line
from .config import Settings, find_config
from .errors import EmptyResponseError, TransportError
from .filters import AlbumFilter
from .models import RatingFavoriteParameters
from .providers.subsonic import SubsonicMediaProvider, SubsonicServer

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def configure_logging(level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    return warn_buffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse a Subsonic-compatible music server")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    doctor_parser = subparsers.add_parser("doctor", help="Check configuration and server capabilities")
    doctor_parser.add_argument(
        "--offline", action="store_true", help="Only validate the configuration file"
    )
    subparsers.add_parser("genres", help="List genres")
    subparsers.add_parser("playlists", help="List playlists")
    subparsers.add_parser("favorites", help="List starred albums, artists and tracks")
    album_parser = subparsers.add_parser("album", help="Show an album and its tracks")
    album_parser.add_argument("album_id")
    artist_parser = subparsers.add_parser("artist", help="Show an artist and their albums")
    artist_parser.add_argument("artist_id")
    artist_parser.add_argument("--info", action="store_true", help="Include biography")
    albums_parser = subparsers.add_parser("albums", help="List albums in a sort order")
    albums_parser.add_argument("--sort", default="Recently Added")
    albums_parser.add_argument("--limit", type=int, default=25)
    albums_parser.add_argument("--min-year", type=int, default=0)
    albums_parser.add_argument("--max-year", type=int, default=0)
    albums_parser.add_argument("--genre", action="append", default=[])
    favorite_group = albums_parser.add_mutually_exclusive_group()
    favorite_group.add_argument("--only-favorites", action="store_true")
    favorite_group.add_argument("--no-favorites", action="store_true")
    search_parser = subparsers.add_parser("search", help="Search artists, albums and tracks")
    search_parser.add_argument("query")
    search_parser.add_argument("--limit", type=int, default=20)
    rate_parser = subparsers.add_parser("rate", help="Set the rating of one or more tracks")
    rate_parser.add_argument("rating", type=int, choices=range(0, 6))
    rate_parser.add_argument("track_ids", nargs="+")
    subparsers.add_parser("rescan", help="Ask the server to rescan its library")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    warn_buffer = configure_logging(args.log_level)
    settings = Settings.load(find_config(args.config))

    if args.command == "doctor":
        report = cmd_doctor.run(settings, check_server=not args.offline)
        for line in report.checks:
            print(line)
        if not report.ok:
            raise SystemExit(1)
        return

    server = SubsonicServer.from_settings(settings)
    login = server.login(settings.server.username, settings.server.password)
    if not login.ok:
        reason = "credentials rejected" if login.is_auth_error else str(login.error)
        raise SystemExit(f"Could not log in to {settings.server.url}: {reason}")
    try:
        run_command(args, server.media_provider())
    except (TransportError, EmptyResponseError) as exc:
        raise SystemExit(f"{args.command} failed: {exc}") from exc
    finally:
        server.close()
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")


def run_command(args: argparse.Namespace, provider: SubsonicMediaProvider) -> None:
    match args.command:
        case "genres":
            for genre in provider.get_genres():
                print(f"{genre.name}  ({genre.album_count} albums, {genre.track_count} tracks)")
        case "playlists":
            for playlist in provider.get_playlists():
                visibility = "public" if playlist.public else "private"
                print(
                    f"{playlist.id}  {playlist.name}  ({playlist.track_count} tracks, "
                    f"{visibility}, owner {playlist.owner})"
                )
        case "favorites":
            favorites = provider.get_favorites()
            for artist in favorites.artists:
                print(f"{artist.id}  {artist.name}")
            for album in favorites.albums:
                print(album_line(album))
            for track in favorites.tracks:
                print(track_line(track))
        case "album":
            album = provider.get_album(args.album_id)
            if album is None:
                raise SystemExit(f"Album {args.album_id} not found")
            print(album_line(album))
            print(f"Genres: {', '.join(g for g in album.genres if g) or '-'}")
            print(f"Release types: {album.release_types!r}")
            for track in album.tracks:
                print(track_line(track))
        case "artist":
            artist = provider.get_artist(args.artist_id)
            if artist is None:
                raise SystemExit(f"Artist {args.artist_id} not found")
            print(f"{artist.id}  {artist.name}  ({artist.album_count} albums)")
            if args.info:
                info = provider.get_artist_info(args.artist_id)
                if info.biography:
                    print(info.biography)
            for album in artist.albums:
                print(album_line(album))
        case "albums":
            album_filter = AlbumFilter(
                min_year=args.min_year,
                max_year=args.max_year,
                genres=tuple(args.genre),
                exclude_favorited=args.no_favorites,
                exclude_unfavorited=args.only_favorites,
            )
            if args.sort not in provider.album_sort_orders():
                raise SystemExit(
                    f"Unknown sort order {args.sort!r}; choose from: "
                    + ", ".join(provider.album_sort_orders())
                )
            for count, album in enumerate(provider.iterate_albums(args.sort, album_filter)):
                if count >= args.limit:
                    break
                print(album_line(album))
        case "search":
            for result in provider.search_all(args.query, args.limit):
                suffix = f" - {result.artist_name}" if result.artist_name else ""
                print(f"[{result.type.value}] {result.id}  {result.name}{suffix}")
        case "rate":
            provider.set_rating(RatingFavoriteParameters(track_ids=tuple(args.track_ids)), args.rating)
            print(f"Rated {len(args.track_ids)} track(s) {args.rating}")
        case "rescan":
            provider.rescan_library()
            print("Library scan started.")
        case _:
            raise SystemExit(f"Unknown command {args.command}")


if __name__ == "__main__":  # pragma: no cover
    main()

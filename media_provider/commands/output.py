from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..models import Album, Track


@dataclass(frozen=True, slots=True)
class CheckLine:
    label: str
    status: str
    detail: Optional[str] = None

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status} ({self.detail})"
        return f"{self.label}: {self.status}"


def ok(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "OK", detail).render()


def error(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "ERROR", detail).render()


def skipped(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "SKIPPED", detail).render()


def enabled(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "ENABLED", detail).render()


def disabled(label: str, detail: Optional[str] = None) -> str:
    return CheckLine(label, "DISABLED", detail).render()


def format_duration(seconds: int) -> str:
    minutes, secs = divmod(max(seconds, 0), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def album_line(album: Album) -> str:
    artists = ", ".join(name for name in album.artist_names if name) or "Unknown artist"
    star = " *" if album.favorite else ""
    year = f" ({album.year})" if album.year else ""
    return f"{album.id}  {artists} - {album.name}{year}{star}"


def track_line(track: Track) -> str:
    artists = ", ".join(name for name in track.artist_names if name) or "Unknown artist"
    number = f"{track.track_number:02d}. " if track.track_number else ""
    star = " *" if track.favorite else ""
    return f"{track.id}  {number}{artists} - {track.name} [{format_duration(track.duration)}]{star}"

from __future__ import annotations

from typing import Iterable, Optional

from .models import ReleaseTypes

_LABELS: dict[str, ReleaseTypes] = {
    "album": ReleaseTypes.ALBUM,
    "audiobook": ReleaseTypes.AUDIOBOOK,
    "audiodrama": ReleaseTypes.AUDIO_DRAMA,
    "broadcast": ReleaseTypes.BROADCAST,
    "compilation": ReleaseTypes.COMPILATION,
    "demo": ReleaseTypes.DEMO,
    "djmix": ReleaseTypes.DJ_MIX,
    "ep": ReleaseTypes.EP,
    "fieldrecording": ReleaseTypes.FIELD_RECORDING,
    "interview": ReleaseTypes.INTERVIEW,
    "live": ReleaseTypes.LIVE,
    "mixtape": ReleaseTypes.MIXTAPE,
    "remix": ReleaseTypes.REMIX,
    "single": ReleaseTypes.SINGLE,
    "soundtrack": ReleaseTypes.SOUNDTRACK,
    "spokenword": ReleaseTypes.SPOKEN_WORD,
}


def normalize_label(label: str) -> str:
    return label.replace(" ", "").lower()


def classify_release_types(
    labels: Optional[Iterable[str]], is_compilation: bool = False
) -> ReleaseTypes:
    """Fold free-text release type labels into a ``ReleaseTypes`` mask.

    Unknown labels are ignored. A release nothing could be said about is
    an album, so the result is never empty.
    """
    mask = ReleaseTypes(0)
    for label in labels or ():
        if not isinstance(label, str):
            continue
        mask |= _LABELS.get(normalize_label(label), ReleaseTypes(0))
    if is_compilation:
        mask |= ReleaseTypes.COMPILATION
    if not mask:
        return ReleaseTypes.ALBUM
    return mask

from __future__ import annotations

from typing import Optional


class TransportError(Exception):
    """Raised when the server cannot be reached or answers with a failure."""


class SubsonicError(TransportError):
    """The server answered with ``status: failed``."""

    def __init__(self, code: Optional[int], message: str) -> None:
        super().__init__(f"Subsonic error {code}: {message}" if code is not None else message)
        self.code = code
        self.message = message


class EmptyResponseError(Exception):
    """The server reported success but the payload carried nothing usable."""


class PartialBatchError(TransportError):
    """First failure observed while applying an operation to a batch of ids.

    Later failures in the same run are not reported individually; ``failed``
    only counts them. The original failure is kept on ``error`` and as the
    cause, so callers catching ``TransportError`` around a batched mutation
    still see it.
    """

    def __init__(self, item_id: str, error: BaseException, failed: int, attempted: int) -> None:
        super().__init__(
            f"operation failed for {item_id} ({failed} of {attempted} failed): {error}"
        )
        self.item_id = item_id
        self.error = error
        self.failed = failed
        self.attempted = attempted

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Optional, Sequence

from .errors import PartialBatchError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5


def batches(ids: Sequence[str], batch_size: int) -> list[Sequence[str]]:
    if batch_size < 1:
        raise ValueError("batch_size must be positive")
    return [ids[offset : offset + batch_size] for offset in range(0, len(ids), batch_size)]


def run_batched(
    ids: Sequence[str],
    operation: Callable[[str], object],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> None:
    """Apply ``operation`` to every id, at most ``batch_size`` at a time.

    Each batch runs in parallel and must finish before the next one starts.
    A failure does not stop later batches; once everything has been
    attempted the first failure is raised as ``PartialBatchError``.
    """
    ids = list(ids)
    if not ids:
        return
    first: Optional[tuple[str, BaseException]] = None
    failed = 0

    with ThreadPoolExecutor(max_workers=batch_size, thread_name_prefix="batch") as pool:
        for number, batch in enumerate(batches(ids, batch_size), start=1):
            futures = [(item_id, pool.submit(operation, item_id)) for item_id in batch]
            wait([future for _, future in futures])
            for item_id, future in futures:
                exc = future.exception()
                if exc is None:
                    continue
                logger.debug("Batched operation failed for %s: %s", item_id, exc)
                failed += 1
                if first is None:
                    first = (item_id, exc)
            logger.debug("Finished batch %d (%d item(s))", number, len(batch))

    if first is not None:
        item_id, exc = first
        logger.warning("%d of %d batched operation(s) failed", failed, len(ids))
        raise PartialBatchError(item_id, exc, failed, len(ids)) from exc

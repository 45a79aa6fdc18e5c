"""Visitation order for pending candidates."""

from __future__ import annotations

import logging
import os
import random
from collections.abc import Callable, Iterable
from pathlib import Path

from refactorer.config import OrderMode

logger = logging.getLogger(__name__)

SizeProbe = Callable[[str], int]


def pending_paths(candidates: Iterable[str], done: Iterable[str]) -> list[str]:
    """Return candidates not yet done, deduplicated, in ascending path order."""
    done_paths = set(done)
    return sorted(set(candidates) - done_paths)


def file_size_probe(root: Path) -> SizeProbe:
    """Build a probe returning byte length, or 0 when the file cannot be opened."""

    def probe(relative_path: str) -> int:
        try:
            with (root / relative_path).open("rb") as handle:
                return os.fstat(handle.fileno()).st_size
        except OSError as exc:
            logger.debug("Size probe failed for %s: %s", relative_path, exc)
            return 0

    return probe


def order_pending(
    candidates: Iterable[str],
    done: Iterable[str],
    mode: OrderMode,
    rng: random.Random | None = None,
    size_of: SizeProbe | None = None,
) -> tuple[str, ...]:
    """Compute the pending queue for one session.

    Size ties keep ascending path order in both directions.
    """
    pending = pending_paths(candidates, done)
    if mode is OrderMode.RANDOM:
        shuffler = rng if rng is not None else random.Random()
        shuffler.shuffle(pending)
        return tuple(pending)
    if size_of is None:
        raise ValueError(f"Order mode '{mode.value}' requires a size probe.")
    sizes = {path: size_of(path) for path in pending}
    if mode is OrderMode.SMALLEST:
        pending.sort(key=lambda path: sizes[path])
    else:
        pending.sort(key=lambda path: -sizes[path])
    return tuple(pending)

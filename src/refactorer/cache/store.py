"""Persistent cache of completed paths."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from refactorer.cache.models import DoneSet, PersistResult
from refactorer.config import ConfigError

logger = logging.getLogger(__name__)


class CacheStore:
    """Newline-separated cache file, fully rewritten on every confirmation."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Return on-disk cache path."""
        return self._path

    def load(self) -> DoneSet:
        """Read completed paths; a missing cache file is an empty set."""
        if not self._path.exists():
            logger.debug("No cache file at %s; starting fresh", self._path)
            return DoneSet()
        logger.info("Reading from cache file...")
        try:
            text = self._path.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError as exc:
            raise ConfigError(f"Cannot read cache file {self._path}: {exc}") from exc
        return DoneSet(parse_cache_text(text))

    def persist(self, done: DoneSet) -> PersistResult:
        """Atomically rewrite the cache file with the full done set."""
        logger.info("Writing to cache file...")
        payload = render_cache_text(done)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open(
                "w", encoding="utf-8", errors="surrogateescape", newline="\n"
            ) as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            tmp.replace(self._path)
        except (OSError, UnicodeError) as exc:
            logger.debug("Cache write to %s failed: %s", self._path, exc)
            _discard(tmp)
            return PersistResult(
                ok=False,
                path=str(self._path),
                entries=len(done),
                error=str(exc),
            )
        return PersistResult(ok=True, path=str(self._path), entries=len(done))


def parse_cache_text(text: str) -> list[str]:
    """Split cache content into paths, ignoring empty segments.

    Entries written relative to "." ("./src/main.rs") map to root-relative paths.
    """
    paths: list[str] = []
    for line in text.split("\n"):
        stripped = line.rstrip("\r")
        while stripped.startswith("./"):
            stripped = stripped[2:]
        if not stripped:
            continue
        paths.append(stripped)
    return paths


def render_cache_text(done: DoneSet) -> str:
    """Serialize done paths one per line in sorted order."""
    ordered = sorted(done)
    if not ordered:
        return ""
    return "\n".join(ordered) + "\n"


def _discard(tmp: Path) -> None:
    try:
        tmp.unlink(missing_ok=True)
    except OSError as exc:
        logger.debug("Could not remove %s: %s", tmp, exc)

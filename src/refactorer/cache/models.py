"""Typed models for completion tracking."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


class DoneSet:
    """Grow-only set of paths the user has confirmed complete."""

    __slots__ = ("_paths",)

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._paths: set[str] = set(paths)

    def add(self, path: str) -> bool:
        """Add a path; return False when it was already present."""
        if path in self._paths:
            return False
        self._paths.add(path)
        return True

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DoneSet):
            return self._paths == other._paths
        if isinstance(other, (set, frozenset)):
            return self._paths == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DoneSet({sorted(self._paths)!r})"

    def snapshot(self) -> frozenset[str]:
        """Return an immutable copy of the current membership."""
        return frozenset(self._paths)


@dataclass(slots=True, frozen=True)
class PersistResult:
    """Outcome of rewriting the cache file."""

    ok: bool
    path: str
    entries: int
    error: str | None = None

"""Structured JSONL journal of review decisions."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class DecisionEvent:
    """One user decision for one presented file."""

    timestamp: str
    path: str
    decision: str
    position: int
    total: int
    persisted: bool | None


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonlJournal:
    """Append-only JSONL decision journal."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def append(self, event: DecisionEvent) -> bool:
        """Append an event as one JSON object per line; return False on write failure."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(asdict(event), sort_keys=True))
                handle.write("\n")
        except OSError as exc:
            logger.warning("Could not write journal %s: %s", self._path, exc)
            return False
        return True

"""Interactive review loop over the pending queue."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from refactorer.cache import CacheStore, DoneSet
from refactorer.editor import Launcher
from refactorer.logging import DecisionEvent, JsonlJournal, utc_timestamp

logger = logging.getLogger(__name__)

PROMPT = "Sufficiently refactored? (y/n/r/q): "


class Decision(str, Enum):
    """Interpretation of one line of user input."""

    DONE = "y"
    NOT_DONE = "n"
    RETRY = "r"
    QUIT = "q"


class StopReason(str, Enum):
    """Why the session reached its terminal state."""

    EXHAUSTED = "exhausted"
    QUIT = "quit"
    END_OF_INPUT = "end_of_input"


def printable(text: str) -> str:
    """Return text safe to print; undecodable filename bytes become U+FFFD."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def parse_decision(line: str) -> Decision:
    """Map a raw input line to a decision using its first character.

    Anything unrecognized, including an empty line, quits.
    """
    if not line:
        return Decision.QUIT
    first = line[0]
    for decision in (Decision.DONE, Decision.NOT_DONE, Decision.RETRY):
        if first == decision.value:
            return decision
    return Decision.QUIT


@dataclass(slots=True)
class SessionState:
    """Mutable cursor plus the done set for one run."""

    cursor: int
    done: DoneSet


@dataclass(slots=True)
class SessionSummary:
    """Counters describing how a session ended."""

    total: int
    presented: int = 0
    confirmed: int = 0
    skipped: int = 0
    persist_failures: int = 0
    launch_failures: int = 0
    reason: StopReason = StopReason.EXHAUSTED
    pending_remaining: int = 0


class ReviewSession:
    """Presents each pending file, records the user's decision, persists confirmations."""

    def __init__(
        self,
        queue: tuple[str, ...],
        done: DoneSet,
        cache: CacheStore,
        launcher: Launcher,
        in_stream: TextIO,
        out_stream: TextIO,
        journal: JsonlJournal | None = None,
    ) -> None:
        self._queue = queue
        self._cache = cache
        self._launcher = launcher
        self._in = in_stream
        self._out = out_stream
        self._journal = journal
        self._state = SessionState(cursor=0, done=done)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def queue(self) -> tuple[str, ...]:
        return self._queue

    def run(self) -> SessionSummary:
        """Drive the loop until the queue is exhausted or the user stops."""
        total = len(self._queue)
        summary = SessionSummary(total=total)
        if total == 0:
            logger.info("Nothing to review.")
            return summary

        while self._state.cursor < total:
            index = self._state.cursor
            path = self._queue[index]
            self._present(index, path, summary)
            line = self._read_line()
            if line is None:
                self._record(path, index, "eof", persisted=None)
                summary.reason = StopReason.END_OF_INPUT
                break
            decision = parse_decision(line)
            if decision is Decision.RETRY:
                self._record(path, index, decision.value, persisted=None)
                continue
            if decision is Decision.QUIT:
                self._record(path, index, decision.value, persisted=None)
                summary.reason = StopReason.QUIT
                break
            if decision is Decision.DONE:
                persisted = self._confirm(path, summary)
                self._record(path, index, decision.value, persisted=persisted)
            else:
                summary.skipped += 1
                self._record(path, index, decision.value, persisted=None)
            self._state.cursor += 1

        summary.pending_remaining = total - self._state.cursor
        logger.debug(
            "Session ended (%s): %d confirmed, %d skipped, %d remaining",
            summary.reason.value,
            summary.confirmed,
            summary.skipped,
            summary.pending_remaining,
        )
        return summary

    def _present(self, index: int, path: str, summary: SessionSummary) -> None:
        self._write(f"\n\nEditing file ({index + 1}/{len(self._queue)}): {path}\n")
        summary.presented += 1
        result = self._launcher.launch(path)
        if not result.ok:
            summary.launch_failures += 1
            self._write(
                f"Could not open editor ({result.error}). "
                "Answer 'r' to retry, 'n' to skip or 'q' to quit.\n"
            )
        self._write(PROMPT)

    def _confirm(self, path: str, summary: SessionSummary) -> bool:
        self._state.done.add(path)
        summary.confirmed += 1
        result = self._cache.persist(self._state.done)
        if result.ok:
            return True
        summary.persist_failures += 1
        logger.warning("Could not write cache file %s: %s", result.path, result.error)
        self._write(
            f"Warning: progress was not saved to {result.path} ({result.error}). "
            "It will be retried on the next confirmation.\n"
        )
        return False

    def _read_line(self) -> str | None:
        line = self._in.readline()
        if line == "":
            return None
        return line.rstrip("\r\n")

    def _record(self, path: str, index: int, decision: str, persisted: bool | None) -> None:
        if self._journal is None:
            return
        self._journal.append(
            DecisionEvent(
                timestamp=utc_timestamp(),
                path=path,
                decision=decision,
                position=index + 1,
                total=len(self._queue),
                persisted=persisted,
            )
        )

    def _write(self, text: str) -> None:
        self._out.write(printable(text))
        self._out.flush()

"""Fire-and-forget editor process launcher."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LaunchResult:
    """Outcome of spawning the editor for one path."""

    ok: bool
    command: tuple[str, ...]
    pid: int | None = None
    error: str | None = None


class Launcher(Protocol):
    def launch(self, path: str) -> LaunchResult: ...


class EditorLauncher:
    """Spawns the configured editor and never waits for it.

    The review loop does not track the child process. The user's answer at
    the prompt is what marks the edit as finished.
    """

    def __init__(self, program: str, args: tuple[str, ...], root: Path) -> None:
        self._program = program
        self._args = args
        self._root = root

    def command_for(self, path: str) -> tuple[str, ...]:
        """Return the argv used to open a root-relative path."""
        return (self._program, *self._args, str(self._root / path))

    def launch(self, path: str) -> LaunchResult:
        """Spawn the editor; failures are returned, not raised."""
        command = self.command_for(path)
        logger.debug("Launching editor: %s", " ".join(command))
        try:
            process = subprocess.Popen(command)
        except OSError as exc:
            return LaunchResult(ok=False, command=command, error=str(exc))
        return LaunchResult(ok=True, command=command, pid=process.pid)

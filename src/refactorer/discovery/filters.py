"""Candidate acceptance rules for discovered paths."""

from __future__ import annotations

import re
from dataclasses import dataclass

from refactorer.config import ReviewConfig


def is_hidden(name: str) -> bool:
    """Return True for dotfiles and dotdirs, but never for the current directory."""
    return name.startswith(".") and len(name) > 1


@dataclass(slots=True, frozen=True)
class PathFilter:
    """Decides which walked entries are review candidates."""

    extensions: tuple[str, ...]
    pattern: re.Pattern[str] | None = None

    @classmethod
    def from_config(cls, config: ReviewConfig) -> PathFilter:
        return cls(extensions=config.extensions, pattern=config.filter_pattern)

    def should_descend(self, dir_name: str) -> bool:
        """Return False when a directory subtree must be pruned."""
        return not is_hidden(dir_name)

    def accepts(self, relative_path: str) -> bool:
        """Return True when a file path is a candidate."""
        if any(is_hidden(part) for part in relative_path.split("/")):
            return False
        if not any(relative_path.endswith(ext) for ext in self.extensions):
            return False
        if self.pattern is not None and self.pattern.search(relative_path) is None:
            return False
        return True

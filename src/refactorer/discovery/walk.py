"""Recursive candidate discovery with hidden-subtree pruning."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from refactorer.discovery.filters import PathFilter

logger = logging.getLogger(__name__)


def discover_candidates(root: Path, path_filter: PathFilter) -> frozenset[str]:
    """Walk root and return every accepted file as a root-relative POSIX path."""
    resolved_root = root.resolve()
    candidates: set[str] = set()
    stack: list[Path] = [resolved_root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                listed = list(entries)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", current, exc)
            continue
        for entry in listed:
            full_path = Path(entry.path)
            relative = full_path.relative_to(resolved_root).as_posix()
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError as exc:
                logger.debug("Skipping unclassifiable entry %s: %s", relative, exc)
                continue
            if is_dir:
                if path_filter.should_descend(entry.name):
                    stack.append(full_path)
                continue
            if is_file and path_filter.accepts(relative):
                candidates.add(relative)
    logger.debug("Discovered %d candidate(s) under %s", len(candidates), resolved_root)
    return frozenset(candidates)

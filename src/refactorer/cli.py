"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import TextIO

from refactorer.cache import CacheStore
from refactorer.config import (
    CliOverrides,
    ConfigError,
    OrderMode,
    ReviewConfig,
    load_effective_config,
)
from refactorer.discovery import PathFilter, discover_candidates
from refactorer.editor import EditorLauncher, Launcher
from refactorer.logging import JsonlJournal, configure_logging
from refactorer.ordering import file_size_probe, order_pending
from refactorer.session import ReviewSession, SessionSummary

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for review startup configuration."""
    parser = argparse.ArgumentParser(
        prog="refactorer",
        description="Open matching files one at a time and track which ones are done.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Increase verbosity")
    parser.add_argument("-c", "--cache-filename", default=None, help="Custom cache filename")
    parser.add_argument(
        "-e", "--extensions", default=None, help="Comma-separated extensions to search for"
    )
    parser.add_argument("-f", "--filter", default=None, help="Regex filter for file paths")
    parser.add_argument("--smallest", action="store_true", help="Go smallest to largest")
    parser.add_argument("--largest", action="store_true", help="Go largest to smallest")
    parser.add_argument("--program", default=None, help="Program to use to edit files")
    parser.add_argument(
        "--args",
        action="append",
        default=None,
        help="Extra editor argument placed before the path (repeatable; use --args=-x for dashes)",
    )
    parser.add_argument("--root", default=".", help="Directory to scan")
    parser.add_argument("--seed", type=int, default=None, help="Seed for random ordering")
    parser.add_argument("--journal", default=None, help="Append decisions to this JSONL file")
    return parser


def overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    """Translate parsed CLI arguments into config overrides."""
    return CliOverrides(
        cache_filename=args.cache_filename,
        extensions=args.extensions,
        filter=args.filter,
        smallest=args.smallest,
        largest=args.largest,
        program=args.program,
        args=tuple(args.args) if args.args is not None else None,
        seed=args.seed,
        journal=args.journal,
    )


def create_session(
    config: ReviewConfig,
    in_stream: TextIO,
    out_stream: TextIO,
    launcher: Launcher | None = None,
) -> ReviewSession:
    """Discover candidates, subtract the cache, order them and build the session."""
    cache = CacheStore(config.cache_path)
    done = cache.load()
    path_filter = PathFilter.from_config(config)
    candidates = discover_candidates(config.root, path_filter)
    candidates = candidates - _internal_paths(config)
    rng = random.Random(config.seed) if config.seed is not None else None
    size_of = file_size_probe(config.root) if config.order is not OrderMode.RANDOM else None
    queue = order_pending(candidates, done, config.order, rng=rng, size_of=size_of)
    logger.info(
        "%d candidate(s), %d already done, %d pending", len(candidates), len(done), len(queue)
    )
    journal = JsonlJournal(config.journal_path) if config.journal_path is not None else None
    return ReviewSession(
        queue=queue,
        done=done,
        cache=cache,
        launcher=launcher or EditorLauncher(config.program, config.program_args, config.root),
        in_stream=in_stream,
        out_stream=out_stream,
        journal=journal,
    )


def _internal_paths(config: ReviewConfig) -> set[str]:
    """Root-relative paths of files this tool writes itself."""
    internal: set[str] = set()
    for path in (config.cache_path, config.journal_path):
        if path is not None and config.root in path.parents:
            internal.add(path.relative_to(config.root).as_posix())
    return internal


def run(
    config: ReviewConfig,
    in_stream: TextIO,
    out_stream: TextIO,
    launcher: Launcher | None = None,
) -> SessionSummary:
    """Build and run one review session."""
    logger.debug("Effective config: %s", config.to_public_dict())
    session = create_session(config, in_stream, out_stream, launcher=launcher)
    return session.run()


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the refactorer process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)
    try:
        config = load_effective_config(Path(args.root), overrides_from_args(args))
        run(config, in_stream=sys.stdin, out_stream=sys.stdout)
    except ConfigError as exc:
        parser.exit(2, f"error: {exc}\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

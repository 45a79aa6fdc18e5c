"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

DEFAULT_CACHE_FILENAME = ".refactorer.cache"
DEFAULT_EXTENSIONS = (".rs",)
DEFAULT_PROGRAM = "code"
CONFIG_FILENAME = "refactorer.toml"


class ConfigError(ValueError):
    """Raised when startup configuration is invalid."""


class OrderMode(str, Enum):
    """Visitation order for pending files."""

    RANDOM = "random"
    SMALLEST = "smallest"
    LARGEST = "largest"


@dataclass(slots=True, frozen=True)
class ReviewConfig:
    """Fully merged review configuration."""

    root: Path
    cache_path: Path
    extensions: tuple[str, ...]
    filter_pattern: re.Pattern[str] | None
    order: OrderMode
    program: str
    program_args: tuple[str, ...]
    seed: int | None = None
    journal_path: Path | None = None

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for debug logging."""
        return {
            "root": str(self.root),
            "cache_path": str(self.cache_path),
            "extensions": list(self.extensions),
            "filter": self.filter_pattern.pattern if self.filter_pattern else None,
            "order": self.order.value,
            "program": self.program,
            "args": list(self.program_args),
            "seed": self.seed,
            "journal": str(self.journal_path) if self.journal_path else None,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    cache_filename: str | None = None
    extensions: str | None = None
    filter: str | None = None
    smallest: bool = False
    largest: bool = False
    program: str | None = None
    args: tuple[str, ...] | None = None
    seed: int | None = None
    journal: str | None = None


def default_config(root: Path) -> ReviewConfig:
    """Build default config for a given scan root."""
    resolved_root = root.resolve()
    return ReviewConfig(
        root=resolved_root,
        cache_path=resolved_root / DEFAULT_CACHE_FILENAME,
        extensions=DEFAULT_EXTENSIONS,
        filter_pattern=None,
        order=OrderMode.RANDOM,
        program=DEFAULT_PROGRAM,
        program_args=(),
    )


def load_config_file(root: Path) -> dict[str, object]:
    """Load optional refactorer.toml from the scan root."""
    config_path = root / CONFIG_FILENAME
    if not config_path.exists():
        return {}
    try:
        with config_path.open("rb") as handle:
            payload = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{CONFIG_FILENAME} is not valid TOML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read {config_path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"Config field 'review.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"Config field 'review.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_string(value: object, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Config field 'review.{field}' must be a non-empty string.")
    return value


def merge_config(
    base: ReviewConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> ReviewConfig:
    """Merge defaults, config file, then CLI overrides."""
    review = _get_table(file_payload, "review")

    cache_path = base.cache_path
    cache_filename = _optional_string(review.get("cache_filename"), "cache_filename")
    if cache_filename is not None:
        cache_path = _resolve_against(base.root, cache_filename)

    extensions = base.extensions
    if "extensions" in review:
        extensions = _tuple_of_strings(review["extensions"], "extensions")

    filter_pattern = base.filter_pattern
    raw_filter = _optional_string(review.get("filter"), "filter")
    if raw_filter is not None:
        filter_pattern = compile_filter(raw_filter)

    order = base.order
    if "order" in review:
        raw_order = review["order"]
        try:
            order = OrderMode(raw_order)
        except ValueError as exc:
            choices = ", ".join(mode.value for mode in OrderMode)
            raise ConfigError(f"Config field 'review.order' must be one of: {choices}.") from exc

    program = _optional_string(review.get("program"), "program") or base.program

    program_args = base.program_args
    if "args" in review:
        program_args = _tuple_of_strings(review["args"], "args")

    seed = base.seed
    if "seed" in review:
        raw_seed = review["seed"]
        if not isinstance(raw_seed, int) or isinstance(raw_seed, bool):
            raise ConfigError("Config field 'review.seed' must be an integer.")
        seed = raw_seed

    journal_path = base.journal_path
    raw_journal = _optional_string(review.get("journal"), "journal")
    if raw_journal is not None:
        journal_path = _resolve_against(base.root, raw_journal)

    merged = ReviewConfig(
        root=base.root,
        cache_path=cache_path,
        extensions=extensions,
        filter_pattern=filter_pattern,
        order=order,
        program=program,
        program_args=program_args,
        seed=seed,
        journal_path=journal_path,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ReviewConfig, overrides: CliOverrides) -> ReviewConfig:
    """Apply startup overrides at highest precedence."""
    if overrides.smallest and overrides.largest:
        raise ConfigError("--smallest and --largest cannot be combined.")
    order = config.order
    if overrides.smallest:
        order = OrderMode.SMALLEST
    if overrides.largest:
        order = OrderMode.LARGEST

    extensions = config.extensions
    if overrides.extensions is not None:
        extensions = parse_extensions(overrides.extensions)

    filter_pattern = config.filter_pattern
    if overrides.filter is not None:
        filter_pattern = compile_filter(overrides.filter)

    cache_path = config.cache_path
    if overrides.cache_filename:
        cache_path = _resolve_against(config.root, overrides.cache_filename)

    journal_path = config.journal_path
    if overrides.journal:
        journal_path = _resolve_against(config.root, overrides.journal)

    if not extensions:
        raise ConfigError("At least one extension is required.")

    return ReviewConfig(
        root=config.root,
        cache_path=cache_path,
        extensions=extensions,
        filter_pattern=filter_pattern,
        order=order,
        program=overrides.program or config.program,
        program_args=overrides.args if overrides.args is not None else config.program_args,
        seed=overrides.seed if overrides.seed is not None else config.seed,
        journal_path=journal_path,
    )


def load_effective_config(root: Path, overrides: CliOverrides | None = None) -> ReviewConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    resolved_root = root.resolve()
    if not resolved_root.is_dir():
        raise ConfigError(f"Scan root is not a directory: {resolved_root}")
    base = default_config(resolved_root)
    payload = load_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def parse_extensions(raw: str) -> tuple[str, ...]:
    """Split a comma-separated extension list, dropping empty items."""
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def compile_filter(pattern: str) -> re.Pattern[str]:
    """Compile a path filter, reporting bad patterns as configuration errors."""
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"Invalid filter pattern {pattern!r}: {exc}") from exc


def _resolve_against(root: Path, value: str) -> Path:
    candidate = Path(value).expanduser()
    if not candidate.is_absolute():
        candidate = root / candidate
    return candidate

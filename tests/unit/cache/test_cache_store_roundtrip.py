from __future__ import annotations

from pathlib import Path

import pytest

from refactorer.cache import CacheStore, DoneSet, parse_cache_text
from refactorer.config import ConfigError


def test_missing_cache_loads_empty_set(tmp_path: Path) -> None:
    store = CacheStore(tmp_path / ".refactorer.cache")

    assert len(store.load()) == 0
    assert not store.path.exists()


def test_persist_then_load_yields_same_paths(tmp_path: Path) -> None:
    store = CacheStore(tmp_path / ".refactorer.cache")
    done = DoneSet(["src/b.rs", "src/a.rs", "lib.rs"])

    result = store.persist(done)

    assert result.ok is True
    assert result.entries == 3
    assert store.load() == done
    assert store.path.read_text(encoding="utf-8") == "lib.rs\nsrc/a.rs\nsrc/b.rs\n"
    assert not (tmp_path / ".refactorer.cache.tmp").exists()


def test_trailing_newline_and_blank_lines_are_not_paths() -> None:
    assert parse_cache_text("a.rs\nb.rs\n") == ["a.rs", "b.rs"]
    assert parse_cache_text("a.rs\n\nb.rs") == ["a.rs", "b.rs"]
    assert parse_cache_text("a.rs\r\nb.rs\r\n") == ["a.rs", "b.rs"]
    assert parse_cache_text("") == []


def test_legacy_cache_without_trailing_newline_loads(tmp_path: Path) -> None:
    path = tmp_path / ".refactorer.cache"
    path.write_text("src/main.rs\nsrc/lib.rs", encoding="utf-8")

    assert CacheStore(path).load() == {"src/main.rs", "src/lib.rs"}


def test_persist_overwrites_in_full(tmp_path: Path) -> None:
    store = CacheStore(tmp_path / "cache.txt")
    store.persist(DoneSet(["old.rs", "keep.rs"]))

    store.persist(DoneSet(["keep.rs"]))

    assert store.load() == {"keep.rs"}


def test_persist_failure_is_returned_not_raised(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = CacheStore(blocker / "cache.txt")

    result = store.persist(DoneSet(["a.rs"]))

    assert result.ok is False
    assert result.error
    assert result.path == str(blocker / "cache.txt")


def test_unreadable_cache_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / ".refactorer.cache"
    path.mkdir()

    with pytest.raises(ConfigError, match="Cannot read cache file"):
        CacheStore(path).load()


def test_undecodable_filename_bytes_round_trip(tmp_path: Path) -> None:
    store = CacheStore(tmp_path / ".refactorer.cache")
    done = DoneSet(["caf\udce9.rs", "ok.rs"])

    result = store.persist(done)

    assert result.ok is True
    assert store.path.read_bytes() == b"caf\xe9.rs\nok.rs\n"
    assert store.load() == done


def test_unencodable_path_fails_without_raising_or_leaving_tmp(tmp_path: Path) -> None:
    store = CacheStore(tmp_path / ".refactorer.cache")

    result = store.persist(DoneSet(["bad\ud800.rs"]))

    assert result.ok is False
    assert result.error
    assert not store.path.exists()
    assert not (tmp_path / ".refactorer.cache.tmp").exists()


def test_failed_replace_removes_tmp_file(tmp_path: Path) -> None:
    target = tmp_path / "cache"
    target.mkdir()
    (target / "occupied").write_text("", encoding="utf-8")
    store = CacheStore(target)

    result = store.persist(DoneSet(["a.rs"]))

    assert result.ok is False
    assert not (tmp_path / "cache.tmp").exists()
    assert (target / "occupied").exists()


def test_dot_slash_prefixed_entries_map_to_root_relative_paths(tmp_path: Path) -> None:
    path = tmp_path / ".refactorer.cache"
    path.write_text("./src/main.rs\n./lib.rs\nplain.rs", encoding="utf-8")

    assert CacheStore(path).load() == {"src/main.rs", "lib.rs", "plain.rs"}

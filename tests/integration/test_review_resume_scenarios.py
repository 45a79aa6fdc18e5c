from __future__ import annotations

import io
import os
import sys
from pathlib import Path

import pytest

from refactorer.cli import create_session, run
from refactorer.config import CliOverrides, load_effective_config
from refactorer.editor import LaunchResult


class RecordingLauncher:
    def __init__(self) -> None:
        self.launched: list[str] = []

    def launch(self, path: str) -> LaunchResult:
        self.launched.append(path)
        return LaunchResult(ok=True, command=("editor", path))


def _run(root: Path, answers: str, overrides: CliOverrides | None = None) -> RecordingLauncher:
    launcher = RecordingLauncher()
    config = load_effective_config(root, overrides)
    run(config, in_stream=io.StringIO(answers), out_stream=io.StringIO(), launcher=launcher)
    return launcher


def test_empty_root_terminates_with_zero_prompts(tmp_path: Path) -> None:
    out = io.StringIO()
    launcher = RecordingLauncher()
    config = load_effective_config(tmp_path)

    summary = run(config, in_stream=io.StringIO("y\n"), out_stream=out, launcher=launcher)

    assert summary.presented == 0
    assert launcher.launched == []
    assert out.getvalue() == ""


def test_confirmed_file_is_cached_and_not_presented_again(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.rs").write_text("fn main() {}\n", encoding="utf-8")

    first = _run(tmp_path, "y\n")
    cache_text = (tmp_path / ".refactorer.cache").read_text(encoding="utf-8")
    second = _run(tmp_path, "y\n")

    assert first.launched == ["src/main.rs"]
    assert cache_text.splitlines() == ["src/main.rs"]
    assert second.launched == []


def test_quit_leaves_cache_untouched_and_file_is_presented_again(tmp_path: Path) -> None:
    (tmp_path / "main.rs").write_text("fn main() {}\n", encoding="utf-8")

    first = _run(tmp_path, "q\n")
    assert not (tmp_path / ".refactorer.cache").exists()
    second = _run(tmp_path, "q\n")

    assert first.launched == ["main.rs"]
    assert second.launched == ["main.rs"]


def test_hidden_git_directory_is_never_presented(tmp_path: Path) -> None:
    (tmp_path / ".git" / "objects").mkdir(parents=True)
    (tmp_path / ".git" / "objects" / "pack.rs").write_text("x", encoding="utf-8")
    (tmp_path / "visible.rs").write_text("x", encoding="utf-8")

    launcher = _run(tmp_path, "n\nn\n", CliOverrides(extensions="s", filter="."))

    assert launcher.launched == ["visible.rs"]


def test_size_ordering_runs_end_to_end(tmp_path: Path) -> None:
    (tmp_path / "a.rs").write_text("x" * 10, encoding="utf-8")
    (tmp_path / "b.rs").write_text("x", encoding="utf-8")
    (tmp_path / "c.rs").write_text("x" * 5, encoding="utf-8")

    smallest = _run(tmp_path, "n\nn\nn\n", CliOverrides(smallest=True))
    largest = _run(tmp_path, "n\nn\nn\n", CliOverrides(largest=True))

    assert smallest.launched == ["b.rs", "c.rs", "a.rs"]
    assert largest.launched == ["a.rs", "c.rs", "b.rs"]


def test_partial_progress_resumes_with_remaining_files(tmp_path: Path) -> None:
    for name in ("a.rs", "b.rs", "c.rs"):
        (tmp_path / name).write_text(name, encoding="utf-8")
    overrides = CliOverrides(cache_filename="progress.cache", seed=11)

    first = _run(tmp_path, "y\nq\n", overrides)
    second = _run(tmp_path, "n\nn\nn\n", overrides)

    assert len(first.launched) == 2
    assert sorted(second.launched) == sorted({"a.rs", "b.rs", "c.rs"} - {first.launched[0]})


def test_cache_file_matching_extensions_is_not_a_candidate(tmp_path: Path) -> None:
    (tmp_path / "main.rs").write_text("x", encoding="utf-8")
    config = load_effective_config(tmp_path, CliOverrides(cache_filename="done.rs"))
    (tmp_path / "done.rs").write_text("", encoding="utf-8")

    session = create_session(
        config, in_stream=io.StringIO(), out_stream=io.StringIO(), launcher=RecordingLauncher()
    )

    assert session.queue == ("main.rs",)


def test_journal_file_matching_extensions_is_not_a_candidate(tmp_path: Path) -> None:
    (tmp_path / "main.rs").write_text("x", encoding="utf-8")
    (tmp_path / "notes.rs").write_text("", encoding="utf-8")
    config = load_effective_config(tmp_path, CliOverrides(journal="notes.rs"))

    session = create_session(
        config, in_stream=io.StringIO(), out_stream=io.StringIO(), launcher=RecordingLauncher()
    )

    assert session.queue == ("main.rs",)


@pytest.mark.skipif(sys.platform != "linux", reason="needs byte filenames that are not UTF-8")
def test_non_utf8_filename_is_confirmed_and_not_presented_again(tmp_path: Path) -> None:
    (tmp_path / "ok.rs").write_text("x" * 5, encoding="utf-8")
    with open(os.path.join(os.fsencode(tmp_path), b"caf\xe9.rs"), "wb") as handle:
        handle.write(b"x")

    first = _run(tmp_path, "y\ny\n", CliOverrides(smallest=True))
    second = _run(tmp_path, "y\n")

    assert first.launched == ["caf\udce9.rs", "ok.rs"]
    assert (tmp_path / ".refactorer.cache").read_bytes() == b"caf\xe9.rs\nok.rs\n"
    assert not (tmp_path / ".refactorer.cache.tmp").exists()
    assert second.launched == []

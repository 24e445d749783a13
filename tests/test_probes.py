"""Tests for the symlink and open file probes."""

import os
from pathlib import Path

import pytest
from conftest import symlinks_supported

from oldlogzipper import ConfigNamespace, Exclusions, Logger, LogLevel, ProcOpenFileProber, StaticOpenFileProber, probe_exclusions, symlink_targets


def _require_symlinks(tmp_path: Path) -> None:
    if not symlinks_supported(tmp_path):
        pytest.skip("symlinks not supported")


def _fake_proc(tmp_path: Path, table: dict[str, list[str]]) -> Path:
    """Build a /proc like tree: <root>/<pid>/fd/<n> -> target."""
    proc = tmp_path / "proc"
    for pid, targets in table.items():
        fd_dir = proc / pid / "fd"
        fd_dir.mkdir(parents=True)
        for number, target in enumerate(targets):
            (fd_dir / str(number)).symlink_to(target)
    return proc


def test_symlink_targets_absolute_and_relative(tmp_path: Path) -> None:
    """Absolute and relative link destinations are both reported as absolute paths."""
    _require_symlinks(tmp_path)
    logs = tmp_path / "logs"
    logs.mkdir()
    (logs / "app.log.1").write_text("1")
    (logs / "app.log.2").write_text("2")
    (logs / "current").symlink_to(logs / "app.log.1")
    (logs / "previous").symlink_to("app.log.2")
    (logs / "outside").symlink_to("../elsewhere/file")

    targets = symlink_targets(logs)
    assert targets == {logs / "app.log.1", logs / "app.log.2", tmp_path / "elsewhere" / "file"}


def test_symlink_targets_ignores_regular_files_and_missing_directory(tmp_path: Path) -> None:
    """Regular files are no link targets, an unreadable directory yields an empty set."""
    (tmp_path / "plain.log").write_text("x")
    assert symlink_targets(tmp_path) == set()
    assert symlink_targets(tmp_path / "does-not-exist") == set()


def test_proc_prober_collects_files_below_directory(tmp_path: Path) -> None:
    """Descriptors pointing below the directory are collected and deduplicated across processes."""
    _require_symlinks(tmp_path)
    logs = tmp_path / "logs"
    logs.mkdir()
    opened = logs / "app.log.1"
    opened.write_text("x")
    proc = _fake_proc(
        tmp_path,
        {
            "100": [str(opened), str(tmp_path / "other.txt")],
            "200": [str(opened), "socket:[12345]", "pipe:[99]"],
            "self": [str(logs / "app.log.2")],  # not a pid
        },
    )
    (proc / "300").mkdir()  # process without readable fd table

    assert ProcOpenFileProber(proc).open_files(logs) == {opened}


def test_proc_prober_textual_prefix_matches_sibling_directory(tmp_path: Path) -> None:
    """The prefix test is textual: '/x/logs2/...' is reported for '/x/logs'."""
    _require_symlinks(tmp_path)
    sibling_file = tmp_path / "logs2" / "app.log"
    proc = _fake_proc(tmp_path, {"1": [str(sibling_file)]})
    assert ProcOpenFileProber(proc).open_files(tmp_path / "logs") == {sibling_file}


def test_proc_prober_without_process_table(tmp_path: Path) -> None:
    """A missing process table degrades to an empty set."""
    assert ProcOpenFileProber(tmp_path / "no-proc").open_files(tmp_path) == set()


@pytest.mark.skipif(not os.path.isdir("/proc/self/fd"), reason="no /proc file descriptor table")
def test_proc_prober_sees_own_open_file(tmp_path: Path) -> None:
    """The real process table reports a file held open by this test process."""
    held = tmp_path / "held.log.1"
    with held.open("w") as handle:
        handle.write("x")
        handle.flush()
        assert held in ProcOpenFileProber().open_files(tmp_path)


def test_static_prober_filters_by_directory(tmp_path: Path) -> None:
    """The in-memory prober applies the same prefix test as the real one."""
    inside = tmp_path / "logs" / "a.log"
    outside = tmp_path / "other" / "b.log"
    prober = StaticOpenFileProber([inside, outside])
    assert prober.open_files(tmp_path / "logs") == {inside}


def test_probe_exclusions_combines_both_probes(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """probe_exclusions returns both sets and reports them with debug log level."""
    _require_symlinks(tmp_path)
    (tmp_path / "app.log.1").write_text("1")
    (tmp_path / "link").symlink_to("app.log.1")
    opened = tmp_path / "app.log.2"
    logger = Logger(ConfigNamespace(verbose=LogLevel.DEBUG))

    exclusions = probe_exclusions(tmp_path, StaticOpenFileProber([opened]), logger)

    assert exclusions == Exclusions(frozenset({tmp_path / "app.log.1"}), frozenset({opened}))
    err = capsys.readouterr().err
    assert f"Linked: {tmp_path / 'app.log.1'}" in err
    assert f"Opened: {opened}" in err

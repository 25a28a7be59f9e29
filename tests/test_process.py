"""Tests for the external process runner."""

import sys

import pytest

from bundle_bench.bench.errors import CommandFailedError
from bundle_bench.bench.process import run_command


def test_successful_command_returns_none(tmp_path):
    assert run_command([sys.executable, "-c", "print('noise')"], cwd=tmp_path) is None


def test_nonzero_exit_is_fatal(tmp_path):
    with pytest.raises(CommandFailedError) as excinfo:
        run_command([sys.executable, "-c", "import sys; sys.exit(3)"], cwd=tmp_path)
    assert excinfo.value.returncode == 3
    assert "exited with status 3" in str(excinfo.value)
    assert excinfo.value.cwd == tmp_path


def test_launch_failure_is_fatal(tmp_path):
    with pytest.raises(CommandFailedError) as excinfo:
        run_command([str(tmp_path / "does-not-exist")], cwd=tmp_path)
    assert excinfo.value.returncode is None
    assert "could not be launched" in str(excinfo.value)


def test_env_overrides_merge_over_ambient_env(tmp_path, monkeypatch):
    monkeypatch.setenv("BENCH_AMBIENT", "kept")
    out_file = tmp_path / "env.txt"
    script = (
        "import os, pathlib; "
        f"pathlib.Path({str(out_file)!r}).write_text("
        "os.environ['BENCH_AMBIENT'] + ',' + os.environ['BENCH_OVERRIDE'])"
    )
    run_command([sys.executable, "-c", script], cwd=tmp_path, env_overrides={"BENCH_OVERRIDE": "1"})
    assert out_file.read_text() == "kept,1"


def test_runs_in_working_directory(tmp_path):
    work = tmp_path / "work"
    work.mkdir()
    run_command([sys.executable, "-c", "open('marker', 'w').close()"], cwd=work)
    assert (work / "marker").exists()

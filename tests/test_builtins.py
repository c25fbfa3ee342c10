import os

import pytest

from myshell.builtins import ExitShell, change_directory, is_builtin, resolve_job
from myshell.jobs import JobTable


def test_change_directory_to_argument(tmp_path, monkeypatch):
    monkeypatch.chdir(os.getcwd())
    result = change_directory([str(tmp_path)])
    assert os.path.realpath(result) == os.path.realpath(str(tmp_path))
    assert os.path.realpath(os.getcwd()) == os.path.realpath(str(tmp_path))


def test_change_directory_home(tmp_path, monkeypatch):
    monkeypatch.chdir(os.getcwd())
    result = change_directory([], {"HOME": str(tmp_path)})
    assert os.path.realpath(result) == os.path.realpath(str(tmp_path))


def test_change_directory_without_home(monkeypatch):
    monkeypatch.chdir(os.getcwd())
    with pytest.raises(ValueError, match="HOME not set"):
        change_directory([], {})


def test_change_directory_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(os.getcwd())
    before = os.getcwd()
    with pytest.raises(FileNotFoundError):
        change_directory([str(tmp_path / "missing")])
    assert os.getcwd() == before


@pytest.mark.parametrize("name", ["exit", "quit", "cd", "jobs", "fg", "bg", "kill", "&"])
def test_is_builtin_true(name):
    assert is_builtin(name) is True


@pytest.mark.parametrize("name", ["ls", "echo", "", None])
def test_is_builtin_false(name):
    assert is_builtin(name) is False


def test_exit_shell_status():
    assert ExitShell().status == 0
    assert ExitShell(3).status == 3


def _table(*pids):
    table = JobTable()
    for pid in pids:
        table.add(pid, f"job {pid}")
    return table


def test_resolve_job_by_spec():
    table = _table(10, 20)
    assert resolve_job(table, ["%2"]).pid == 20
    assert resolve_job(table, ["%1"]).pid == 10


def test_resolve_job_out_of_range():
    table = _table(10, 20)
    assert resolve_job(table, ["%5"]) is None
    assert resolve_job(table, ["%0"]) is None


def test_resolve_job_without_argument():
    assert resolve_job(_table(10), []).pid == 10
    assert resolve_job(_table(10, 20), []) is None
    assert resolve_job(_table(), []) is None


def test_resolve_job_plain_word():
    assert resolve_job(_table(10), ["10"]) is None
import pytest

from homestate.abspath import AbsPath
from homestate.dryrunsystem import DryRunSystem
from homestate.interpreter import Interpreter


class RecordingSystem:
    def __init__(self):
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, args))
        return (name, args)

    def glob(self, pattern):
        return self._record("glob", pattern)

    def idempotent_cmd_output(self, cmd):
        return self._record("idempotent_cmd_output", cmd)

    def idempotent_cmd_combined_output(self, cmd):
        return self._record("idempotent_cmd_combined_output", cmd)

    def lstat(self, name):
        return self._record("lstat", name)

    def raw_path(self, path):
        return self._record("raw_path", path)

    def read_dir(self, name):
        return self._record("read_dir", name)

    def read_file(self, name):
        return self._record("read_file", name)

    def readlink(self, name):
        return self._record("readlink", name)

    def run_idempotent_cmd(self, cmd):
        return self._record("run_idempotent_cmd", cmd)

    def stat(self, name):
        return self._record("stat", name)


@pytest.fixture
def wrapped():
    return RecordingSystem()


@pytest.fixture
def system(wrapped):
    return DryRunSystem(wrapped)


PATH = AbsPath("/home/user/file")


@pytest.mark.parametrize(
    "method, arg",
    [
        ("glob", "*.txt"),
        ("idempotent_cmd_output", ["true"]),
        ("idempotent_cmd_combined_output", ["true"]),
        ("lstat", PATH),
        ("raw_path", PATH),
        ("read_dir", PATH),
        ("read_file", PATH),
        ("readlink", PATH),
        ("run_idempotent_cmd", ["true"]),
        ("stat", PATH),
    ],
)
def test_reads_are_delegated(system, wrapped, method, arg):
    result = getattr(system, method)(arg)
    assert result == (method, (arg,))
    assert wrapped.calls == [(method, (arg,))]
    assert system.modified is False


def test_starts_unmodified(system):
    assert system.modified is False


@pytest.mark.parametrize(
    "method, args",
    [
        ("chmod", (PATH, 0o644)),
        ("link", (PATH, AbsPath("/home/user/other"))),
        ("mkdir", (PATH, 0o755)),
        ("remove_all", (PATH,)),
        ("rename", (PATH, AbsPath("/home/user/other"))),
        ("run_cmd", (["rm", "-rf", "/"],)),
        ("run_script", ("script", PATH, b"#!/bin/sh\n", Interpreter())),
        ("write_file", (PATH, b"contents", 0o644)),
        ("write_symlink", ("target", PATH)),
    ],
)
def test_writes_only_mark_modified(system, wrapped, method, args):
    assert getattr(system, method)(*args) is None
    assert system.modified is True
    assert wrapped.calls == []
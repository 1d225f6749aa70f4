"""A system that reads from, but never writes to, a wrapped system."""

from __future__ import annotations

from typing import Any

from homestate.abspath import AbsPath
from homestate.interpreter import Interpreter


class DryRunSystem:
    """Passes reads to a wrapped system and records that writes were asked for."""

    def __init__(self, system: Any) -> None:
        self._system = system
        self._modified = False

    @property
    def modified(self) -> bool:
        """Whether a method that would change the wrapped system was called."""
        return self._modified

    def _set_modified(self) -> None:
        self._modified = True

    def chmod(self, name: AbsPath, mode: int) -> None:
        self._set_modified()

    def glob(self, pattern: str) -> list[str]:
        return self._system.glob(pattern)

    def idempotent_cmd_output(self, cmd: Any) -> bytes:
        return self._system.idempotent_cmd_output(cmd)

    def idempotent_cmd_combined_output(self, cmd: Any) -> bytes:
        return self._system.idempotent_cmd_combined_output(cmd)

    def link(self, oldname: AbsPath, newname: AbsPath) -> None:
        self._set_modified()

    def lstat(self, name: AbsPath) -> Any:
        return self._system.lstat(name)

    def mkdir(self, name: AbsPath, perm: int) -> None:
        self._set_modified()

    def raw_path(self, path: AbsPath) -> AbsPath:
        return self._system.raw_path(path)

    def read_dir(self, name: AbsPath) -> Any:
        return self._system.read_dir(name)

    def read_file(self, name: AbsPath) -> bytes:
        return self._system.read_file(name)

    def readlink(self, name: AbsPath) -> str:
        return self._system.readlink(name)

    def remove_all(self, name: AbsPath) -> None:
        self._set_modified()

    def rename(self, oldpath: AbsPath, newpath: AbsPath) -> None:
        self._set_modified()

    def run_cmd(self, cmd: Any) -> None:
        self._set_modified()

    def run_idempotent_cmd(self, cmd: Any) -> None:
        return self._system.run_idempotent_cmd(cmd)

    def run_script(
        self,
        scriptname: str,
        dir: AbsPath,
        data: bytes,
        interpreter: Interpreter | None = None,
    ) -> None:
        self._set_modified()

    def stat(self, name: AbsPath) -> Any:
        return self._system.stat(name)

    def write_file(self, name: AbsPath, data: bytes, perm: int) -> None:
        self._set_modified()

    def write_symlink(self, oldname: str, newname: AbsPath) -> None:
        self._set_modified()
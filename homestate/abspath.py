"""Absolute, slash-separated paths."""

from __future__ import annotations

import os
from dataclasses import dataclass

from homestate.core import NotInAbsDirError


def _clean(path: str) -> str:
    """Return the shortest lexically equivalent slash path."""
    if not path:
        return "."
    rooted = path.startswith("/")
    parts: list[str] = []
    for element in path.split("/"):
        if element in ("", "."):
            continue
        if element == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not rooted:
                parts.append("..")
            continue
        parts.append(element)
    result = "/".join(parts)
    if rooted:
        return "/" + result
    return result or "."


def _join(*elements: str) -> str:
    non_empty = [element for element in elements if element]
    if not non_empty:
        return ""
    return _clean("/".join(non_empty))


def _split(path: str) -> tuple[str, str]:
    index = path.rfind("/")
    return path[: index + 1], path[index + 1 :]


@dataclass(frozen=True, order=True)
class AbsPath:
    """An absolute path using forward slashes."""

    path: str = ""

    def __str__(self) -> str:
        return self.path

    def __fspath__(self) -> str:
        return self.path

    def base(self) -> str:
        """Return the last element of the path."""
        if not self.path:
            return "."
        stripped = self.path.rstrip("/")
        if not stripped:
            return "/"
        return stripped.rsplit("/", 1)[-1]

    def dir(self) -> AbsPath:
        """Return the path's directory."""
        return AbsPath(_clean(_split(self.path)[0]))

    def empty(self) -> bool:
        """Return whether the path is empty."""
        return self.path == ""

    def ext(self) -> str:
        """Return the extension of the last element, including the dot."""
        for index in range(len(self.path) - 1, -1, -1):
            char = self.path[index]
            if char == "/":
                break
            if char == ".":
                return self.path[index:]
        return ""

    def join(self, *args: object) -> AbsPath:
        """Return a new path with args appended."""
        return AbsPath(_join(self.path, *(str(arg) for arg in args)))

    def split(self) -> tuple[AbsPath, str]:
        """Return the directory, with trailing slash, and the file name."""
        dir_part, file_part = _split(self.path)
        return AbsPath(dir_part), file_part

    def to_slash(self) -> AbsPath:
        """Return the path with the OS separator replaced by slashes."""
        if os.sep == "/":
            return self
        return AbsPath(self.path.replace(os.sep, "/"))

    def trim_dir_prefix(self, dir_prefix: AbsPath) -> str:
        """Return the path relative to dir_prefix.

        Raises NotInAbsDirError if the path is not inside dir_prefix.
        """
        if self == dir_prefix:
            return ""
        prefix = dir_prefix.path
        if prefix != "/":
            prefix += "/"
        if not self.path.startswith(prefix):
            raise NotInAbsDirError(self, dir_prefix)
        return self.path[len(prefix) :]


DOT_ABS_PATH = AbsPath(".")
EMPTY_ABS_PATH = AbsPath("")
ROOT_ABS_PATH = AbsPath("/")


def normalize_path(path: str | os.PathLike[str]) -> AbsPath:
    """Return path made absolute and cleaned."""
    return AbsPath(os.path.abspath(path))


def home_dir_abs_path() -> AbsPath:
    """Return the user's home directory."""
    home = os.path.expanduser("~")
    if home == "~" or not home:
        raise OSError("cannot determine home directory")
    return normalize_path(home)


def expand_tilde(path: str, home_dir_abs_path: AbsPath) -> str:
    """Expand a leading tilde in path using the given home directory."""
    if path == "~":
        return str(home_dir_abs_path)
    if path.startswith("~/"):
        return str(home_dir_abs_path.join(path[2:]))
    return path


def new_abs_path_from_ext_path(ext_path: str, home_dir_abs_path: AbsPath) -> AbsPath:
    """Return an absolute path from a user-supplied path, expanding a tilde."""
    slash_path = ext_path if os.sep == "/" else ext_path.replace(os.sep, "/")
    tilde_slash_path = expand_tilde(slash_path, home_dir_abs_path)
    if os.path.isabs(tilde_slash_path):
        return AbsPath(tilde_slash_path)
    return AbsPath(os.path.abspath(tilde_slash_path))


def parse_abs_path(s: str) -> AbsPath:
    """Parse an AbsPath from a user-supplied string; the empty string stays empty."""
    if s == "":
        return EMPTY_ABS_PATH
    return new_abs_path_from_ext_path(s, home_dir_abs_path())
"""The actual state of entries found in a filesystem."""

from __future__ import annotations

import stat
from dataclasses import dataclass, field
from typing import Any, Protocol

from homestate.abspath import AbsPath
from homestate.core import UnsupportedFileTypeError
from homestate.entrystate import EntryState, EntryStateType
from homestate.hexbytes import HexBytes
from homestate.lazy import LazyContents, LazyLinkname


class _ReadSystem(Protocol):
    def lstat(self, name: AbsPath) -> Any: ...

    def read_file(self, name: AbsPath) -> bytes: ...

    def readlink(self, name: AbsPath) -> str: ...


class _RemoveSystem(Protocol):
    def remove_all(self, name: AbsPath) -> None: ...


@dataclass
class ActualStateAbsent:
    """The absence of an entry."""

    path: AbsPath

    def entry_state(self) -> EntryState:
        """Return the entry state of an absent entry."""
        return EntryState(type=EntryStateType.REMOVE)

    def remove(self, system: _RemoveSystem) -> bool:
        """Return False: there is nothing to remove."""
        return self.path is None


@dataclass
class ActualStateDir:
    """A directory."""

    path: AbsPath
    perm: int

    def entry_state(self) -> EntryState:
        """Return the directory's entry state."""
        return EntryState(type=EntryStateType.DIR, mode=stat.S_IFDIR | self.perm)

    def remove(self, system: _RemoveSystem) -> bool:
        """Remove the directory and everything below it; return True."""
        system.remove_all(self.path)
        return True


@dataclass
class ActualStateFile:
    """A regular file whose contents are read on demand."""

    path: AbsPath
    perm: int
    lazy: LazyContents = field(default_factory=LazyContents, repr=False, compare=False)

    def contents(self) -> bytes:
        """Return the file's contents."""
        return self.lazy.contents()

    def contents_sha256(self) -> bytes:
        """Return the SHA256 sum of the file's contents."""
        return self.lazy.contents_sha256()

    def entry_state(self) -> EntryState:
        """Return the file's entry state, reading its contents."""
        contents = self.contents()
        return EntryState(
            type=EntryStateType.FILE,
            mode=self.perm,
            contents_sha256=HexBytes(self.contents_sha256()),
            contents=contents,
        )

    def remove(self, system: _RemoveSystem) -> bool:
        """Remove the file; return True."""
        system.remove_all(self.path)
        return True


@dataclass
class ActualStateSymlink:
    """A symlink whose target is read on demand."""

    path: AbsPath
    lazy: LazyLinkname = field(default_factory=LazyLinkname, repr=False, compare=False)

    def linkname(self) -> str:
        """Return the symlink's target."""
        return self.lazy.linkname()

    def linkname_sha256(self) -> bytes:
        """Return the SHA256 sum of the symlink's target."""
        return self.lazy.linkname_sha256()

    def entry_state(self) -> EntryState:
        """Return the symlink's entry state, reading its target."""
        linkname = self.linkname()
        return EntryState(
            type=EntryStateType.SYMLINK,
            contents_sha256=HexBytes(self.linkname_sha256()),
            contents=linkname.encode("utf-8", errors="surrogateescape"),
        )

    def remove(self, system: _RemoveSystem) -> bool:
        """Remove the symlink; return True."""
        system.remove_all(self.path)
        return True


ActualStateEntry = ActualStateAbsent | ActualStateDir | ActualStateFile | ActualStateSymlink


def new_actual_state_entry(
    system: _ReadSystem, abs_path: AbsPath, info: Any = None
) -> ActualStateEntry:
    """Return the actual state of abs_path in system.

    info is a stat result (or an st_mode integer); when it is None the entry
    is looked up with system.lstat. Raises UnsupportedFileTypeError for
    entries that are neither files, directories nor symlinks.
    """
    if info is None:
        try:
            info = system.lstat(abs_path)
        except FileNotFoundError:
            return ActualStateAbsent(abs_path)
    mode = info if isinstance(info, int) else info.st_mode
    file_type = stat.S_IFMT(mode)
    perm = mode & 0o777

    if file_type in (0, stat.S_IFREG):
        return ActualStateFile(
            abs_path, perm, LazyContents(func=lambda: system.read_file(abs_path))
        )
    if file_type == stat.S_IFDIR:
        return ActualStateDir(abs_path, perm)
    if file_type == stat.S_IFLNK:
        return ActualStateSymlink(
            abs_path,
            LazyLinkname(func=lambda: system.readlink(abs_path)),
        )
    raise UnsupportedFileTypeError(abs_path, mode)
"""Recorded states of target entries."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from homestate.hexbytes import HexBytes


class EntryStateType(StrEnum):
    """The kind of an entry state."""

    DIR = "dir"
    FILE = "file"
    SYMLINK = "symlink"
    REMOVE = "remove"
    SCRIPT = "script"


@dataclass
class EntryState:
    """The state of an entry. None stands for an absent entry."""

    type: EntryStateType
    mode: int = 0
    contents_sha256: HexBytes = field(default_factory=HexBytes)
    contents: bytes | None = field(default=None, compare=False, repr=False)
    overwrite: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        self.type = EntryStateType(self.type)
        self.contents_sha256 = HexBytes(self.contents_sha256 or b"")

    def equal(self, other: EntryState) -> bool:
        """Return whether type, permissions and contents hash match."""
        if self.type != other.type:
            return False
        if os.name != "nt" and self.mode & 0o777 != other.mode & 0o777:
            return False
        return bytes(self.contents_sha256) == bytes(other.contents_sha256)

    def as_dict(self) -> dict[str, Any]:
        """Return the serialisable fields, leaving out empty ones."""
        result: dict[str, Any] = {"type": str(self.type)}
        if self.mode:
            result["mode"] = self.mode
        if self.contents_sha256:
            result["contentsSHA256"] = str(self.contents_sha256)
        return result


def entry_states_equivalent(a: EntryState | None, b: EntryState | None) -> bool:
    """Return whether a and b describe the same state; None means absent."""
    if a is None:
        return b is None or b.type == EntryStateType.REMOVE
    if b is None:
        return a.type == EntryStateType.REMOVE
    return a.equal(b)
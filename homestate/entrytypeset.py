"""Sets of entry types, parsed from and printed as comma-separated lists."""

from __future__ import annotations

import stat
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntFlag


class EntryTypeBits(IntFlag):
    """A bitmask of entry types."""

    NONE = 0
    DIRS = 1 << 0
    FILES = 1 << 1
    REMOVE = 1 << 2
    SCRIPTS = 1 << 3
    SYMLINKS = 1 << 4
    ENCRYPTED = 1 << 5
    ALL = DIRS | FILES | REMOVE | SCRIPTS | SYMLINKS | ENCRYPTED


_BITS_BY_NAME = {
    "all": EntryTypeBits.ALL,
    "dirs": EntryTypeBits.DIRS,
    "files": EntryTypeBits.FILES,
    "remove": EntryTypeBits.REMOVE,
    "scripts": EntryTypeBits.SCRIPTS,
    "symlinks": EntryTypeBits.SYMLINKS,
    "encrypted": EntryTypeBits.ENCRYPTED,
}

# Names printed by str(), in bit order. Encrypted is deliberately not printed.
_PRINTED_NAMES = (
    (EntryTypeBits.DIRS, "dirs"),
    (EntryTypeBits.FILES, "files"),
    (EntryTypeBits.REMOVE, "remove"),
    (EntryTypeBits.SCRIPTS, "scripts"),
    (EntryTypeBits.SYMLINKS, "symlinks"),
)

_ALL = int(EntryTypeBits.ALL)


@dataclass(frozen=True)
class EntryTypeSet:
    """A set of entry types held as a bitmask."""

    bits: EntryTypeBits = EntryTypeBits.NONE

    def __post_init__(self) -> None:
        object.__setattr__(self, "bits", EntryTypeBits(int(self.bits)))

    @classmethod
    def parse(cls, s: str) -> EntryTypeSet:
        """Parse a comma-separated list such as "all,noscripts" or "none"."""
        if s == "none":
            return cls(EntryTypeBits.NONE)
        return cls.from_slice(s.split(","))

    @classmethod
    def from_slice(cls, elements: Iterable[str]) -> EntryTypeSet:
        """Build a set from element names.

        An element prefixed with "no" is excluded; if the first element is an
        exclusion, the set starts from all types. Raises ValueError on an
        unknown name.
        """
        bits = 0
        for index, element in enumerate(elements):
            if element == "":
                continue
            exclude = element.startswith("no")
            if exclude:
                element = element[2:]
            try:
                bit = int(_BITS_BY_NAME[element])
            except KeyError:
                raise ValueError(f"{element}: unknown entry type") from None
            if index == 0 and exclude:
                bits = _ALL
            if exclude:
                bits &= ~bit
            else:
                bits |= bit
        return cls(EntryTypeBits(bits & _ALL))

    def __str__(self) -> str:
        if self.bits == EntryTypeBits.ALL:
            return "all"
        if self.bits == EntryTypeBits.NONE:
            return "none"
        return ",".join(name for bit, name in _PRINTED_NAMES if self.bits & bit)

    def include_encrypted(self) -> bool:
        """Return whether encrypted files are included."""
        return bool(self.bits & EntryTypeBits.ENCRYPTED)

    def include_file_mode(self, mode: int) -> bool:
        """Return whether the file type encoded in mode is included."""
        file_type = stat.S_IFMT(mode)
        if file_type == stat.S_IFDIR:
            return bool(self.bits & EntryTypeBits.DIRS)
        if file_type in (0, stat.S_IFREG):
            return bool(self.bits & EntryTypeBits.FILES)
        if file_type == stat.S_IFLNK:
            return bool(self.bits & EntryTypeBits.SYMLINKS)
        return False

    def sub(self, other: EntryTypeSet | None) -> EntryTypeSet:
        """Return a copy of this set with the members of other removed."""
        if other is None:
            return self
        return EntryTypeSet(EntryTypeBits(int(self.bits) & ~int(other.bits) & _ALL))
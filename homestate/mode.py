"""Modes of operation for managed targets."""

from __future__ import annotations

from enum import StrEnum


class Mode(StrEnum):
    """How targets are written: as files or as symlinks."""

    FILE = "file"
    SYMLINK = "symlink"


class InvalidModeError(ValueError):
    """Raised when a string does not name a mode."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"invalid mode: {value}")


def parse_mode(s: str) -> Mode:
    """Return the Mode named by s."""
    try:
        return Mode(s)
    except ValueError:
        raise InvalidModeError(s) from None
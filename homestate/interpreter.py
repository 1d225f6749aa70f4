"""Interpreters that run scripts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Interpreter:
    """A command, with arguments, that interprets a script."""

    command: str = ""
    args: list[str] = field(default_factory=list)

    def none(self) -> bool:
        """Return whether this represents no interpreter."""
        return self.command == ""

    def exec_command(self, name: str) -> list[str]:
        """Return the argument vector that runs the script name."""
        if self.none():
            return [name]
        return [self.command, *self.args, name]

    def as_dict(self) -> dict[str, Any]:
        """Return the serialisable fields."""
        return {"Command": self.command, "Args": list(self.args)}
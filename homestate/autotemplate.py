"""Turn file contents into templates by substituting known values."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TemplateVariable:
    """A dotted template variable name and its string value."""

    name: str
    value: str


def extract_variables(data: Mapping[str, Any]) -> list[TemplateVariable]:
    """Return every string value in data, nested mappings included."""
    return list(_walk_variables((), data))


def _walk_variables(parent: tuple[str, ...], data: Mapping[str, Any]):
    for name, value in data.items():
        if isinstance(value, str):
            yield TemplateVariable(".".join((*parent, name)), value)
        elif isinstance(value, Mapping):
            yield from _walk_variables((*parent, name), value)


def _is_word(char: str | bytes) -> bool:
    return char.isascii() and char.isalnum()


def in_word(s: str | bytes, i: int) -> bool:
    """Return whether splitting s at position i would split a word."""
    return 0 < i < len(s) and _is_word(s[i - 1 : i]) and _is_word(s[i : i + 1])


def auto_template(contents: bytes, data: Mapping[str, Any]) -> tuple[bytes, bool]:
    """Replace values from data found in contents by template references.

    Returns the new contents and whether any replacement was made. Longer
    values are replaced first; values are only replaced on word boundaries.
    """
    variables = sorted(
        extract_variables(data),
        key=lambda variable: (-len(variable.value.encode()), variable.name),
    )
    text = bytes(contents)
    replaced = False
    for variable in variables:
        if not variable.value:
            continue
        value = variable.value.encode()
        index = text.find(value)
        while index != -1 and index != len(text):
            if not in_word(text, index) and not in_word(text, index + len(value)):
                replacement = ("{{ ." + variable.name + " }}").encode()
                text = text[:index] + replacement + text[index + len(value) :]
                index += len(replacement)
                replaced = True
            else:
                index += 1
            index = text.find(value, index)
    return text, replaced
"""System information gathered from the filesystem."""

from __future__ import annotations

import os
from pathlib import Path

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
}
_HEX_ESCAPE_LENGTHS = {"x": 2, "u": 4, "U": 8}
_HEX_DIGITS = set("0123456789abcdefABCDEF")
_OCTAL_DIGITS = set("01234567")


def _read_text(path: Path) -> str:
    return path.read_bytes().decode("utf-8", errors="surrogateescape")


def kernel(root: str | os.PathLike[str] = "/") -> dict[str, str] | None:
    """Return kernel information from proc/sys/kernel under root, if present."""
    proc_sys_kernel = Path(root) / "proc" / "sys" / "kernel"
    try:
        if not proc_sys_kernel.is_dir():
            return None
    except PermissionError:
        return None

    result: dict[str, str] = {}
    for filename in ("osrelease", "ostype", "version"):
        try:
            result[filename] = _read_text(proc_sys_kernel / filename).strip()
        except (FileNotFoundError, PermissionError):
            continue
    return result


def os_release(root: str | os.PathLike[str] = "/") -> dict[str, str]:
    """Return the operating system identification data under root.

    Raises FileNotFoundError if no os-release file exists.
    """
    root_path = Path(root)
    for candidate in (
        root_path / "etc" / "os-release",
        root_path / "usr" / "lib" / "os-release",
    ):
        try:
            text = _read_text(candidate)
        except FileNotFoundError:
            continue
        return parse_os_release(text)
    raise FileNotFoundError("os-release")


def _unquote(s: str) -> str:
    if len(s) < 2 or s[0] != s[-1]:
        raise ValueError(s)
    quote, body = s[0], s[1:-1]
    if quote == "`":
        if "`" in body:
            raise ValueError(s)
        return body.replace("\r", "")
    if quote not in "\"'" or "\n" in body:
        raise ValueError(s)

    chars: list[str] = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == quote:
            raise ValueError(s)
        if char != "\\":
            chars.append(char)
            i += 1
            continue
        i += 1
        if i >= len(body):
            raise ValueError(s)
        escape = body[i]
        if escape in _SIMPLE_ESCAPES:
            chars.append(_SIMPLE_ESCAPES[escape])
            i += 1
        elif escape == quote:
            chars.append(quote)
            i += 1
        elif escape in _HEX_ESCAPE_LENGTHS:
            length = _HEX_ESCAPE_LENGTHS[escape]
            digits = body[i + 1 : i + 1 + length]
            if len(digits) != length or not set(digits) <= _HEX_DIGITS:
                raise ValueError(s)
            chars.append(chr(int(digits, 16)))
            i += 1 + length
        elif escape in _OCTAL_DIGITS:
            digits = body[i : i + 3]
            if len(digits) != 3 or not set(digits) <= _OCTAL_DIGITS:
                raise ValueError(s)
            value = int(digits, 8)
            if value > 0xFF:
                raise ValueError(s)
            chars.append(chr(value))
            i += 3
        else:
            raise ValueError(s)
    result = "".join(chars)
    if quote == "'" and len(result) != 1:
        raise ValueError(s)
    return result


def _maybe_unquote(s: str) -> str:
    try:
        return _unquote(s)
    except ValueError:
        return s


def parse_os_release(text: str | bytes) -> dict[str, str]:
    """Parse os-release data. Raises ValueError on a line without '='."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="surrogateescape")
    result: dict[str, str] = {}
    for line in text.split("\n"):
        entry = line.removesuffix("\r").lstrip()
        if not entry or entry.startswith("#"):
            continue
        field_name, sep, value = entry.partition("=")
        if not sep:
            raise ValueError(f"{entry}: parse error")
        result[field_name] = _maybe_unquote(value)
    return result
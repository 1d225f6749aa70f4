"""Core constants, errors and helpers shared by the rest of the package."""

from __future__ import annotations

import hashlib
import os
import re
import stat
from collections.abc import Iterable
from pathlib import Path

DEFAULT_TEMPLATE_OPTIONS = ("missingkey=error",)

# Prefixes and suffixes.
IGNORE_PREFIX = "."
AFTER_PREFIX = "after_"
BEFORE_PREFIX = "before_"
CREATE_PREFIX = "create_"
DOT_PREFIX = "dot_"
EMPTY_PREFIX = "empty_"
ENCRYPTED_PREFIX = "encrypted_"
EXACT_PREFIX = "exact_"
EXECUTABLE_PREFIX = "executable_"
LITERAL_PREFIX = "literal_"
MODIFY_PREFIX = "modify_"
ONCE_PREFIX = "once_"
ON_CHANGE_PREFIX = "onchange_"
PRIVATE_PREFIX = "private_"
READ_ONLY_PREFIX = "readonly_"
REMOVE_PREFIX = "remove_"
RUN_PREFIX = "run_"
SYMLINK_PREFIX = "symlink_"
LITERAL_SUFFIX = ".literal"
TEMPLATE_SUFFIX = ".tmpl"

# Special file names.
PREFIX = ".chezmoi"
ROOT_NAME = PREFIX + "root"
DATA_NAME = PREFIX + "data"
EXTERNAL_NAME = PREFIX + "external"
IGNORE_NAME = PREFIX + "ignore"
REMOVE_NAME = PREFIX + "remove"
TEMPLATES_DIR_NAME = PREFIX + "templates"
VERSION_NAME = PREFIX + "version"

DIR_PREFIX_RE = re.compile(r"\A(dot|exact|literal|readonly|private)_")
FILE_PREFIX_RE = re.compile(
    r"\A(after|before|create|dot|empty|encrypted|executable|literal|modify|once"
    r"|private|readonly|remove|run|symlink)_"
)
FILE_SUFFIX_RE = re.compile(r"\.(literal|tmpl)\Z")

KNOWN_PREFIXED_FILES = frozenset(
    {
        PREFIX + ".json" + TEMPLATE_SUFFIX,
        PREFIX + ".toml" + TEMPLATE_SUFFIX,
        PREFIX + ".yaml" + TEMPLATE_SUFFIX,
        ROOT_NAME,
        DATA_NAME,
        EXTERNAL_NAME + ".json",
        EXTERNAL_NAME + ".toml",
        EXTERNAL_NAME + ".yaml",
        IGNORE_NAME,
        REMOVE_NAME,
        VERSION_NAME,
    }
)

_MODE_TYPE_NAMES = {
    0: "file",
    stat.S_IFREG: "file",
    stat.S_IFDIR: "dir",
    stat.S_IFLNK: "symlink",
    stat.S_IFIFO: "named pipe",
    stat.S_IFSOCK: "socket",
    stat.S_IFBLK: "device",
    stat.S_IFCHR: "char device",
}

_WHITESPACE_RE = re.compile(r"\s+")


class InconsistentStateError(Exception):
    """Raised when a target is described inconsistently by several origins."""

    def __init__(self, target_rel_path: object, origins: Iterable[str]) -> None:
        self.target_rel_path = target_rel_path
        self.origins = list(origins)
        super().__init__(
            f"{target_rel_path}: inconsistent state ({', '.join(self.origins)})"
        )


class NotInAbsDirError(ValueError):
    """Raised when an absolute path is not inside an expected directory."""

    def __init__(self, path: object, dir_path: object) -> None:
        self.path = path
        self.dir_path = dir_path
        super().__init__(f"{path}: not in {dir_path}")


class NotInRelDirError(ValueError):
    """Raised when a relative path is not inside an expected directory."""

    def __init__(self, path: object, dir_path: object) -> None:
        self.path = path
        self.dir_path = dir_path
        super().__init__(f"{path}: not in {dir_path}")


class UnsupportedFileTypeError(Exception):
    """Raised when a filesystem entry has a type that cannot be managed."""

    def __init__(self, abs_path: object, mode: int) -> None:
        self.abs_path = abs_path
        self.mode = mode
        super().__init__(f"{abs_path}: unsupported file type {mode_type_name(mode)}")


def sha256_sum(data: bytes) -> bytes:
    """Return the SHA256 digest of data."""
    return hashlib.sha256(data or b"").digest()


def _mode_type(mode: int) -> int:
    file_type = stat.S_IFMT(mode)
    return stat.S_IFREG if file_type == 0 else file_type


def suspicious_source_dir_entry(base: str, mode: int) -> bool:
    """Return whether an entry named base with the given mode looks suspicious."""
    file_type = _mode_type(mode)
    if file_type == stat.S_IFREG:
        return base.startswith(PREFIX) and base not in KNOWN_PREFIXED_FILES
    if file_type == stat.S_IFDIR:
        return base.startswith(PREFIX) and base != TEMPLATES_DIR_NAME
    if file_type == stat.S_IFLNK:
        return base.startswith(PREFIX)
    return True


def mode_type_name(mode: int) -> str:
    """Return a human readable name for the file type in mode."""
    file_type = stat.S_IFMT(mode)
    name = _MODE_TYPE_NAMES.get(file_type)
    if name is not None:
        return name
    return f"0o{file_type:o}: unknown type"


def is_empty(data: bytes) -> bool:
    """Return whether data is empty once surrounding whitespace is removed."""
    return not data.strip()


def is_executable(mode: int) -> bool:
    """Return whether mode has any execute bit set."""
    if os.name == "nt":
        return False
    return mode & 0o111 != 0


def is_private(mode: int) -> bool:
    """Return whether mode grants no permissions to group or others."""
    if os.name == "nt":
        return False
    return mode & 0o077 == 0


def is_read_only(mode: int) -> bool:
    """Return whether mode has no write bits set."""
    if os.name == "nt":
        return False
    return mode & 0o222 == 0


def _read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8", errors="surrogateescape").splitlines()


def _etc_hosts_fqdn_hostname(root: Path) -> str:
    for line in _read_lines(root / "etc" / "hosts"):
        text = line.strip().partition("#")[0]
        fields = _WHITESPACE_RE.split(text)
        if len(fields) >= 2 and fields[0] == "127.0.1.1":
            return fields[1]
    return ""


def _etc_hostname_fqdn_hostname(root: Path) -> str:
    for line in _read_lines(root / "etc" / "hostname"):
        hostname = line.partition("#")[0].strip()
        if hostname:
            return hostname
    return ""


def fqdn_hostname(root: str | os.PathLike[str] = "/") -> str:
    """Return the fully qualified hostname found under root, or an empty string."""
    root_path = Path(root)
    for lookup in (_etc_hosts_fqdn_hostname, _etc_hostname_fqdn_hostname):
        try:
            hostname = lookup(root_path)
        except OSError:
            continue
        if hostname:
            return hostname
    return ""
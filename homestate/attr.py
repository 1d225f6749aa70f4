"""Attributes encoded in the names of source files and directories."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum

from homestate.core import (
    AFTER_PREFIX,
    BEFORE_PREFIX,
    CREATE_PREFIX,
    DIR_PREFIX_RE,
    DOT_PREFIX,
    EMPTY_PREFIX,
    ENCRYPTED_PREFIX,
    EXACT_PREFIX,
    EXECUTABLE_PREFIX,
    FILE_PREFIX_RE,
    FILE_SUFFIX_RE,
    LITERAL_PREFIX,
    LITERAL_SUFFIX,
    MODIFY_PREFIX,
    ON_CHANGE_PREFIX,
    ONCE_PREFIX,
    PRIVATE_PREFIX,
    READ_ONLY_PREFIX,
    REMOVE_PREFIX,
    RUN_PREFIX,
    SYMLINK_PREFIX,
    TEMPLATE_SUFFIX,
)


class SourceFileTargetType(IntEnum):
    """What a file in the source state becomes in the target state."""

    CREATE = 0
    FILE = 1
    MODIFY = 2
    REMOVE = 3
    SCRIPT = 4
    SYMLINK = 5

    def __str__(self) -> str:
        return self.name.lower()


class ScriptOrder(IntEnum):
    """When a script runs relative to other changes."""

    BEFORE = -1
    DURING = 0
    AFTER = 1


class ScriptCondition(StrEnum):
    """Under what conditions a script runs."""

    ALWAYS = ""
    ONCE = "once"
    ON_CHANGE = "onchange"


def _take_prefix(name: str, prefix: str) -> tuple[str, bool]:
    if name.startswith(prefix):
        return name[len(prefix) :], True
    return name, False


def _strip_dot_or_literal(name: str) -> str:
    if name.startswith(DOT_PREFIX):
        return "." + name[len(DOT_PREFIX) :]
    if name.startswith(LITERAL_PREFIX):
        return name[len(LITERAL_PREFIX) :]
    return name


@dataclass(frozen=True)
class DirAttr:
    """Attributes parsed from a source directory name."""

    target_name: str = ""
    exact: bool = False
    private: bool = False
    read_only: bool = False

    def source_name(self) -> str:
        """Return the source directory name that encodes these attributes."""
        parts = []
        if self.exact:
            parts.append(EXACT_PREFIX)
        if self.private:
            parts.append(PRIVATE_PREFIX)
        if self.read_only:
            parts.append(READ_ONLY_PREFIX)
        if self.target_name.startswith("."):
            parts.append(DOT_PREFIX + self.target_name[1:])
        elif DIR_PREFIX_RE.match(self.target_name):
            parts.append(LITERAL_PREFIX + self.target_name)
        else:
            parts.append(self.target_name)
        return "".join(parts)

    def perm(self) -> int:
        """Return the permission bits of the directory."""
        perm = 0o777
        if self.private:
            perm &= ~0o077
        if self.read_only:
            perm &= ~0o222
        return perm


@dataclass(frozen=True)
class FileAttr:
    """Attributes parsed from a source file name."""

    target_name: str = ""
    type: SourceFileTargetType = SourceFileTargetType.FILE
    condition: ScriptCondition = ScriptCondition.ALWAYS
    empty: bool = False
    encrypted: bool = False
    executable: bool = False
    order: ScriptOrder = ScriptOrder.DURING
    private: bool = False
    read_only: bool = False
    template: bool = False

    def source_name(self, encrypted_suffix: str = "") -> str:
        """Return the source file name that encodes these attributes."""
        parts: list[str] = []
        kind = self.type
        if kind is SourceFileTargetType.CREATE:
            parts.append(CREATE_PREFIX)
            if self.encrypted:
                parts.append(ENCRYPTED_PREFIX)
            if self.private:
                parts.append(PRIVATE_PREFIX)
            if self.read_only:
                parts.append(READ_ONLY_PREFIX)
            if self.executable:
                parts.append(EXECUTABLE_PREFIX)
        elif kind is SourceFileTargetType.FILE:
            if self.encrypted:
                parts.append(ENCRYPTED_PREFIX)
            if self.private:
                parts.append(PRIVATE_PREFIX)
            if self.read_only:
                parts.append(READ_ONLY_PREFIX)
            if self.empty:
                parts.append(EMPTY_PREFIX)
            if self.executable:
                parts.append(EXECUTABLE_PREFIX)
        elif kind is SourceFileTargetType.MODIFY:
            parts.append(MODIFY_PREFIX)
            if self.private:
                parts.append(PRIVATE_PREFIX)
            if self.read_only:
                parts.append(READ_ONLY_PREFIX)
            if self.executable:
                parts.append(EXECUTABLE_PREFIX)
        elif kind is SourceFileTargetType.REMOVE:
            parts.append(REMOVE_PREFIX)
        elif kind is SourceFileTargetType.SCRIPT:
            parts.append(RUN_PREFIX)
            if self.condition is ScriptCondition.ONCE:
                parts.append(ONCE_PREFIX)
            elif self.condition is ScriptCondition.ON_CHANGE:
                parts.append(ON_CHANGE_PREFIX)
            if self.order is ScriptOrder.BEFORE:
                parts.append(BEFORE_PREFIX)
            elif self.order is ScriptOrder.AFTER:
                parts.append(AFTER_PREFIX)
        elif kind is SourceFileTargetType.SYMLINK:
            parts.append(SYMLINK_PREFIX)

        if self.target_name.startswith("."):
            parts.append(DOT_PREFIX + self.target_name[1:])
        elif FILE_PREFIX_RE.match(self.target_name):
            parts.append(LITERAL_PREFIX + self.target_name)
        else:
            parts.append(self.target_name)
        if FILE_SUFFIX_RE.search(self.target_name):
            parts.append(LITERAL_SUFFIX)
        if self.template:
            parts.append(TEMPLATE_SUFFIX)
        if self.encrypted:
            parts.append(encrypted_suffix)
        return "".join(parts)

    def perm(self) -> int:
        """Return the permission bits of the file."""
        perm = 0o666
        if self.executable:
            perm |= 0o111
        if self.private:
            perm &= ~0o077
        if self.read_only:
            perm &= ~0o222
        return perm


def parse_dir_attr(source_name: str) -> DirAttr:
    """Parse a single source directory name."""
    name, exact = _take_prefix(source_name, EXACT_PREFIX)
    name, private = _take_prefix(name, PRIVATE_PREFIX)
    name, read_only = _take_prefix(name, READ_ONLY_PREFIX)
    return DirAttr(
        target_name=_strip_dot_or_literal(name),
        exact=exact,
        private=private,
        read_only=read_only,
    )


def parse_file_attr(source_name: str, encrypted_suffix: str = "") -> FileAttr:
    """Parse a source file name."""
    kind = SourceFileTargetType.FILE
    name = source_name
    condition = ScriptCondition.ALWAYS
    order = ScriptOrder.DURING
    empty = encrypted = executable = private = read_only = template = False

    if name.startswith(CREATE_PREFIX) or name.startswith(MODIFY_PREFIX):
        if name.startswith(CREATE_PREFIX):
            kind = SourceFileTargetType.CREATE
            name = name[len(CREATE_PREFIX) :]
        else:
            kind = SourceFileTargetType.MODIFY
            name = name[len(MODIFY_PREFIX) :]
        name, encrypted = _take_prefix(name, ENCRYPTED_PREFIX)
        name, private = _take_prefix(name, PRIVATE_PREFIX)
        name, read_only = _take_prefix(name, READ_ONLY_PREFIX)
        name, executable = _take_prefix(name, EXECUTABLE_PREFIX)
    elif name.startswith(REMOVE_PREFIX):
        kind = SourceFileTargetType.REMOVE
        name = name[len(REMOVE_PREFIX) :]
    elif name.startswith(RUN_PREFIX):
        kind = SourceFileTargetType.SCRIPT
        name = name[len(RUN_PREFIX) :]
        if name.startswith(ONCE_PREFIX):
            name = name[len(ONCE_PREFIX) :]
            condition = ScriptCondition.ONCE
        elif name.startswith(ON_CHANGE_PREFIX):
            name = name[len(ON_CHANGE_PREFIX) :]
            condition = ScriptCondition.ON_CHANGE
        if name.startswith(BEFORE_PREFIX):
            name = name[len(BEFORE_PREFIX) :]
            order = ScriptOrder.BEFORE
        elif name.startswith(AFTER_PREFIX):
            name = name[len(AFTER_PREFIX) :]
            order = ScriptOrder.AFTER
    elif name.startswith(SYMLINK_PREFIX):
        kind = SourceFileTargetType.SYMLINK
        name = name[len(SYMLINK_PREFIX) :]
    else:
        name, encrypted = _take_prefix(name, ENCRYPTED_PREFIX)
        name, private = _take_prefix(name, PRIVATE_PREFIX)
        name, read_only = _take_prefix(name, READ_ONLY_PREFIX)
        name, empty = _take_prefix(name, EMPTY_PREFIX)
        name, executable = _take_prefix(name, EXECUTABLE_PREFIX)

    name = _strip_dot_or_literal(name)
    if encrypted:
        name = name.removesuffix(encrypted_suffix)
    if name.endswith(LITERAL_SUFFIX):
        name = name[: -len(LITERAL_SUFFIX)]
    elif name.endswith(TEMPLATE_SUFFIX):
        name = name[: -len(TEMPLATE_SUFFIX)]
        template = True
        name = name.removesuffix(LITERAL_SUFFIX)

    return FileAttr(
        target_name=name,
        type=kind,
        condition=condition,
        empty=empty,
        encrypted=encrypted,
        executable=executable,
        order=order,
        private=private,
        read_only=read_only,
        template=template,
    )
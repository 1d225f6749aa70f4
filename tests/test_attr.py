from itertools import product

import pytest

from homestate.attr import (
    DirAttr,
    FileAttr,
    ScriptCondition,
    ScriptOrder,
    SourceFileTargetType,
    parse_dir_attr,
    parse_file_attr,
)

BOOLS = (False, True)

DIR_TARGET_NAMES = [
    ".dir",
    "dir.tmpl",
    "dir",
    "exact_dir",
    "empty_dir",
    "encrypted_dir",
    "executable_dir",
    "once_dir",
    "run_dir",
    "run_once_dir",
    "symlink_dir",
]

FILE_TARGET_NAMES = [
    ".name",
    "create_name",
    "dot_name",
    "exact_name",
    "literal_name",
    "literal_name",
    "modify_name",
    "name.literal",
    "name",
    "run_name",
    "symlink_name",
    "template.tmpl",
]


def _dir_attrs():
    return [
        DirAttr(target_name=name, exact=exact, private=private, read_only=read_only)
        for name, exact, private, read_only in product(
            DIR_TARGET_NAMES, BOOLS, BOOLS, BOOLS
        )
    ]


def _file_attrs():
    attrs = []
    for name, empty, encrypted, executable, private, read_only, template in product(
        FILE_TARGET_NAMES, BOOLS, BOOLS, BOOLS, BOOLS, BOOLS, BOOLS
    ):
        attrs.append(
            FileAttr(
                target_name=name,
                type=SourceFileTargetType.FILE,
                empty=empty,
                encrypted=encrypted,
                executable=executable,
                private=private,
                read_only=read_only,
                template=template,
            )
        )
    for name, executable, private, read_only, template in product(
        FILE_TARGET_NAMES, BOOLS, BOOLS, BOOLS, BOOLS
    ):
        attrs.append(
            FileAttr(
                target_name=name,
                type=SourceFileTargetType.MODIFY,
                executable=executable,
                private=private,
                read_only=read_only,
                template=template,
            )
        )
    for name in FILE_TARGET_NAMES:
        attrs.append(FileAttr(target_name=name, type=SourceFileTargetType.REMOVE))
    for condition, name, order in product(
        [ScriptCondition.ALWAYS, ScriptCondition.ONCE, ScriptCondition.ON_CHANGE],
        FILE_TARGET_NAMES,
        [ScriptOrder.BEFORE, ScriptOrder.DURING, ScriptOrder.AFTER],
    ):
        attrs.append(
            FileAttr(
                target_name=name,
                type=SourceFileTargetType.SCRIPT,
                condition=condition,
                order=order,
            )
        )
    for name in FILE_TARGET_NAMES:
        attrs.append(FileAttr(target_name=name, type=SourceFileTargetType.SYMLINK))
    return attrs


@pytest.mark.parametrize("dir_attr", _dir_attrs())
def test_dir_attr_round_trip(dir_attr):
    source_name = dir_attr.source_name()
    parsed = parse_dir_attr(source_name)
    assert parsed == dir_attr
    assert parsed.source_name() == source_name


@pytest.mark.parametrize(
    "source_name, dir_attr",
    [
        ("exact_dir", DirAttr(target_name="dir", exact=True)),
        ("literal_exact_dir", DirAttr(target_name="exact_dir")),
        ("literal_literal_dir", DirAttr(target_name="literal_dir")),
    ],
)
def test_dir_attr_literal(source_name, dir_attr):
    assert dir_attr.source_name() == source_name
    assert parse_dir_attr(source_name) == dir_attr


@pytest.mark.parametrize(
    "dir_attr, expected",
    [
        (DirAttr(), 0o777),
        (DirAttr(private=True), 0o700),
        (DirAttr(read_only=True), 0o555),
        (DirAttr(private=True, read_only=True), 0o500),
    ],
)
def test_dir_attr_perm(dir_attr, expected):
    assert dir_attr.perm() == expected


@pytest.mark.parametrize("file_attr", _file_attrs())
def test_file_attr_round_trip(file_attr):
    source_name = file_attr.source_name("")
    parsed = parse_file_attr(source_name, "")
    assert parsed == file_attr
    assert parsed.source_name("") == source_name


@pytest.mark.parametrize(
    "source_name, expected_target_name",
    [
        ("encrypted_file", "file"),
        ("encrypted_file.asc", "file"),
        ("file.asc", "file.asc"),
    ],
)
def test_file_attr_encrypted_suffix(source_name, expected_target_name):
    assert parse_file_attr(source_name, ".asc").target_name == expected_target_name


FILE = SourceFileTargetType.FILE


@pytest.mark.parametrize(
    "source_name, file_attr, non_canonical",
    [
        ("dot_file", FileAttr(target_name=".file", type=FILE), False),
        ("literal_dot_file", FileAttr(target_name="dot_file", type=FILE), False),
        (
            "literal_literal_file",
            FileAttr(target_name="literal_file", type=FILE),
            False,
        ),
        (
            "run_once_script",
            FileAttr(
                target_name="script",
                type=SourceFileTargetType.SCRIPT,
                condition=ScriptCondition.ONCE,
            ),
            False,
        ),
        (
            "run_literal_once_script",
            FileAttr(target_name="once_script", type=SourceFileTargetType.SCRIPT),
            False,
        ),
        ("file.literal", FileAttr(target_name="file", type=FILE), True),
        (
            "file.literal.literal",
            FileAttr(target_name="file.literal", type=FILE),
            False,
        ),
        ("file.tmpl", FileAttr(target_name="file", type=FILE, template=True), False),
        ("file.tmpl.literal", FileAttr(target_name="file.tmpl", type=FILE), False),
        (
            "file.tmpl.literal.tmpl",
            FileAttr(target_name="file.tmpl", type=FILE, template=True),
            False,
        ),
    ],
)
def test_file_attr_literal(source_name, file_attr, non_canonical):
    assert parse_file_attr(source_name, "") == file_attr
    if not non_canonical:
        assert file_attr.source_name("") == source_name


@pytest.mark.parametrize(
    "file_attr, expected",
    [
        (FileAttr(), 0o666),
        (FileAttr(executable=True), 0o777),
        (FileAttr(private=True), 0o600),
        (FileAttr(executable=True, private=True), 0o700),
        (FileAttr(read_only=True), 0o444),
        (FileAttr(executable=True, read_only=True), 0o555),
        (FileAttr(private=True, read_only=True), 0o400),
        (FileAttr(executable=True, private=True, read_only=True), 0o500),
    ],
)
def test_file_attr_perm(file_attr, expected):
    assert file_attr.perm() == expected


def test_parse_file_attr_create_prefixes():
    attr = parse_file_attr("create_encrypted_private_executable_dot_x.age", ".age")
    assert attr == FileAttr(
        target_name=".x",
        type=SourceFileTargetType.CREATE,
        encrypted=True,
        private=True,
        executable=True,
    )


def test_parse_file_attr_script_order():
    attr = parse_file_attr("run_onchange_after_setup.sh", "")
    assert attr.type is SourceFileTargetType.SCRIPT
    assert attr.condition is ScriptCondition.ON_CHANGE
    assert attr.order is ScriptOrder.AFTER
    assert attr.target_name == "setup.sh"
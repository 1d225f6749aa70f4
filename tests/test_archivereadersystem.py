import bz2
import errno
import gzip
import io
import stat
import tarfile
import zipfile

import pytest

from homestate.abspath import AbsPath
from homestate.archivereadersystem import (
    ArchiveFormat,
    ArchiveReaderSystem,
    InvalidArchiveFormatError,
    guess_archive_format,
    walk_archive,
)

FILE_DATA = b"# contents of dir/file\n"


def _add(tar, name, kind, data=b"", mode=0o666, linkname=""):
    info = tarfile.TarInfo(name)
    info.type = kind
    info.mode = mode
    info.linkname = linkname
    info.size = len(data)
    tar.addfile(info, io.BytesIO(data) if data else None)


def _make_tar():
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w", format=tarfile.PAX_FORMAT) as tar:
        _add(tar, "dir/", tarfile.DIRTYPE, mode=0o777)
        _add(tar, "dir/file", tarfile.REGTYPE, FILE_DATA, mode=0o666)
        _add(tar, "dir/symlink", tarfile.SYMTYPE, linkname="file")
    return buffer.getvalue()


def _make_zip(names_and_data):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in names_and_data:
            archive.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def system():
    return ArchiveReaderSystem(
        "archive.tar",
        _make_tar(),
        ArchiveFormat.TAR,
        root_abs_path=AbsPath("/home/user"),
        strip_components=1,
    )


def test_file_entry(system):
    path = AbsPath("/home/user/file")
    assert stat.S_ISREG(system.lstat(path).st_mode)
    with pytest.raises(OSError) as excinfo:
        system.readlink(path)
    assert excinfo.value.errno == errno.EINVAL
    assert system.read_file(path) == FILE_DATA


def test_missing_entry(system):
    path = AbsPath("/home/user/notexist")
    with pytest.raises(FileNotFoundError):
        system.lstat(path)
    with pytest.raises(FileNotFoundError):
        system.readlink(path)
    with pytest.raises(FileNotFoundError):
        system.read_file(path)


def test_symlink_entry(system):
    path = AbsPath("/home/user/symlink")
    assert stat.S_ISLNK(system.lstat(path).st_mode)
    assert system.readlink(path) == "file"
    with pytest.raises(OSError) as excinfo:
        system.read_file(path)
    assert excinfo.value.errno == errno.EINVAL


def test_stripped_directory_is_skipped(system):
    assert set(system.file_infos()) == {
        AbsPath("/home/user/file"),
        AbsPath("/home/user/symlink"),
    }


def test_without_strip_keeps_directory():
    reader = ArchiveReaderSystem("archive.tar", _make_tar())
    assert stat.S_ISDIR(reader.lstat(AbsPath("dir")).st_mode)
    assert reader.read_file(AbsPath("dir/file")) == FILE_DATA


def test_gzipped_tar_guessed_from_suffix():
    reader = ArchiveReaderSystem(
        "archive.tgz", gzip.compress(_make_tar()), root_abs_path=AbsPath("/r")
    )
    assert reader.read_file(AbsPath("/r/dir/file")) == FILE_DATA


def test_bzipped_tar():
    reader = ArchiveReaderSystem(
        "x", bz2.compress(_make_tar()), ArchiveFormat.TAR_BZ2
    )
    assert reader.readlink(AbsPath("dir/symlink")) == "file"


def test_zip_archive():
    data = _make_zip([("dir/file", FILE_DATA)])
    reader = ArchiveReaderSystem(
        "archive.zip", data, root_abs_path=AbsPath("/home/user"), strip_components=1
    )
    assert reader.read_file(AbsPath("/home/user/file")) == FILE_DATA


def test_zip_parent_path_rejected():
    data = _make_zip([("../evil", b"x")])
    with pytest.raises(ValueError, match="invalid filename"):
        list(walk_archive(data, ArchiveFormat.ZIP))


@pytest.mark.parametrize(
    "path, expected",
    [
        ("a.tar", ArchiveFormat.TAR),
        ("a.TAR.BZ2", ArchiveFormat.TAR_BZ2),
        ("a.tbz2", ArchiveFormat.TAR_BZ2),
        ("a.tar.gz", ArchiveFormat.TAR_GZ),
        ("a.tgz", ArchiveFormat.TAR_GZ),
        ("a.zip", ArchiveFormat.ZIP),
    ],
)
def test_guess_from_suffix(path, expected):
    assert guess_archive_format(path, b"") == expected


def test_guess_from_data():
    tar_data = _make_tar()
    assert guess_archive_format("archive", tar_data) == ArchiveFormat.TAR
    assert guess_archive_format("archive", gzip.compress(tar_data)) == ArchiveFormat.TAR_GZ
    assert guess_archive_format("archive", bz2.compress(tar_data)) == ArchiveFormat.TAR_BZ2
    assert guess_archive_format("archive", _make_zip([("f", b"x")])) == ArchiveFormat.ZIP
    assert guess_archive_format("archive", b"not an archive") == ArchiveFormat.UNKNOWN


def test_unknown_format_raises():
    with pytest.raises(InvalidArchiveFormatError, match="^invalid archive format$"):
        ArchiveReaderSystem("archive", b"not an archive")


def test_invalid_format_name_in_message():
    with pytest.raises(InvalidArchiveFormatError, match="^rar: invalid archive format$"):
        list(walk_archive(b"", "rar"))


def test_hard_link_unsupported():
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w") as tar:
        _add(tar, "file", tarfile.REGTYPE, b"x")
        _add(tar, "link", tarfile.LNKTYPE, linkname="file")
    with pytest.raises(ValueError, match="unsupported typeflag '1'"):
        ArchiveReaderSystem("archive.tar", buffer.getvalue())
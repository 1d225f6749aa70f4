"""A read-only system built from the contents of an archive."""

from __future__ import annotations

import bz2
import errno
import io
import os
import posixpath
import stat
import tarfile
import zipfile
from collections.abc import Iterator
from enum import StrEnum

from homestate.abspath import EMPTY_ABS_PATH, AbsPath


class ArchiveFormat(StrEnum):
    """An archive format."""

    UNKNOWN = ""
    TAR = "tar"
    TAR_BZ2 = "tar.bz2"
    TAR_GZ = "tar.gz"
    TBZ2 = "tbz2"
    TGZ = "tgz"
    ZIP = "zip"


class InvalidArchiveFormatError(ValueError):
    """Raised for an archive format that cannot be read."""

    def __init__(self, archive_format: str = "") -> None:
        self.archive_format = str(archive_format)
        if self.archive_format:
            message = f"{self.archive_format}: invalid archive format"
        else:
            message = "invalid archive format"
        super().__init__(message)


ArchiveMember = tuple[str, os.stat_result, "bytes | None", str]


def _stat(mode: int, size: int = 0) -> os.stat_result:
    return os.stat_result((mode, 0, 0, 1, 0, 0, size, 0, 0, 0))


def _is_tar(data: bytes) -> bool:
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as tar:
            return tar.next() is not None
    except (tarfile.TarError, OSError, EOFError, ValueError):
        return False


def guess_archive_format(path: str, data: bytes) -> ArchiveFormat:
    """Guess the archive format from the file name, then from the data."""
    lower = path.lower()
    if lower.endswith(".tar"):
        return ArchiveFormat.TAR
    if lower.endswith((".tar.bz2", ".tbz2")):
        return ArchiveFormat.TAR_BZ2
    if lower.endswith((".tar.gz", ".tgz")):
        return ArchiveFormat.TAR_GZ
    if lower.endswith(".zip"):
        return ArchiveFormat.ZIP

    if data[:3] == b"\x1f\x8b\x08":
        return ArchiveFormat.TAR_GZ
    if data[:4] == b"PK\x03\x04":
        return ArchiveFormat.ZIP
    if _is_tar(data):
        return ArchiveFormat.TAR
    try:
        decompressed = bz2.decompress(data)
    except (OSError, ValueError, EOFError):
        pass
    else:
        if _is_tar(decompressed):
            return ArchiveFormat.TAR_BZ2
    return ArchiveFormat.UNKNOWN


def _walk_tar(data: bytes, mode: str) -> Iterator[ArchiveMember]:
    with tarfile.open(fileobj=io.BytesIO(data), mode=mode) as tar:
        for member in tar:
            name = member.name.removesuffix("/")
            perm = member.mode & 0o7777
            if member.isdir():
                yield name, _stat(stat.S_IFDIR | perm), None, ""
            elif member.type in (tarfile.REGTYPE, tarfile.AREGTYPE):
                extracted = tar.extractfile(member)
                contents = extracted.read() if extracted is not None else b""
                yield name, _stat(stat.S_IFREG | perm, member.size), contents, ""
            elif member.issym():
                yield name, _stat(stat.S_IFLNK | perm), None, member.linkname
            else:
                typeflag = member.type.decode("latin-1")
                raise ValueError(f"{member.name}: unsupported typeflag '{typeflag}'")


def _zip_mode(info: zipfile.ZipInfo) -> int:
    unix_mode = info.external_attr >> 16
    if info.create_system == 3 and unix_mode:
        file_type = stat.S_IFMT(unix_mode)
        perm = unix_mode & 0o7777
        if info.is_dir():
            file_type = stat.S_IFDIR
        elif file_type == 0:
            file_type = stat.S_IFREG
        return file_type | perm
    if info.is_dir():
        return stat.S_IFDIR | 0o777
    if info.external_attr & 0x01:
        return stat.S_IFREG | 0o444
    return stat.S_IFREG | 0o666


def _walk_zip(data: bytes) -> Iterator[ArchiveMember]:
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for info in archive.infolist():
            name = posixpath.normpath(info.filename)
            if name.startswith("../"):
                raise ValueError(f"{info.filename}: invalid filename")
            mode = _zip_mode(info)
            contents = None if info.is_dir() else archive.read(info)
            yield name, _stat(mode, info.file_size), contents, ""


def walk_archive(data: bytes, archive_format: str) -> Iterator[ArchiveMember]:
    """Yield (name, info, contents, linkname) for each entry in an archive.

    Raises InvalidArchiveFormatError for an unknown format and ValueError for
    entries that cannot be represented.
    """
    try:
        fmt = ArchiveFormat(archive_format)
    except ValueError:
        raise InvalidArchiveFormatError(archive_format) from None
    if fmt is ArchiveFormat.ZIP:
        return _walk_zip(data)
    if fmt is ArchiveFormat.TAR:
        return _walk_tar(data, "r:")
    if fmt in (ArchiveFormat.TAR_BZ2, ArchiveFormat.TBZ2):
        return _walk_tar(data, "r:bz2")
    if fmt in (ArchiveFormat.TAR_GZ, ArchiveFormat.TGZ):
        return _walk_tar(data, "r:gz")
    raise InvalidArchiveFormatError(fmt)


def _invalid(name: AbsPath) -> OSError:
    return OSError(errno.EINVAL, os.strerror(errno.EINVAL), str(name))


def _not_found(name: AbsPath) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(name))


class ArchiveReaderSystem:
    """A read-only system holding the entries of an archive."""

    def __init__(
        self,
        archive_path: str,
        data: bytes,
        archive_format: str = ArchiveFormat.UNKNOWN,
        *,
        root_abs_path: AbsPath = EMPTY_ABS_PATH,
        strip_components: int = 0,
    ) -> None:
        self._file_infos: dict[AbsPath, os.stat_result] = {}
        self._contents: dict[AbsPath, bytes] = {}
        self._linknames: dict[AbsPath, str] = {}

        if archive_format == ArchiveFormat.UNKNOWN:
            archive_format = guess_archive_format(archive_path, data)

        for name, info, contents, linkname in walk_archive(data, archive_format):
            if strip_components > 0:
                components = name.split("/")
                if len(components) <= strip_components:
                    continue
                name = AbsPath("").join(*components[strip_components:]).path
            if name == "":
                continue
            name_abs_path = root_abs_path.join(name)

            self._file_infos[name_abs_path] = info
            file_type = stat.S_IFMT(info.st_mode)
            if file_type == stat.S_IFDIR:
                continue
            if file_type in (0, stat.S_IFREG):
                self._contents[name_abs_path] = contents or b""
            elif file_type == stat.S_IFLNK:
                self._linknames[name_abs_path] = linkname
            else:
                raise ValueError(f"{name}: unsupported mode {file_type:o}")

    def file_infos(self) -> dict[AbsPath, os.stat_result]:
        """Return the stat results of all entries by path."""
        return self._file_infos

    def lstat(self, name: AbsPath) -> os.stat_result:
        """Return the stat result of name; raises FileNotFoundError if absent."""
        try:
            return self._file_infos[name]
        except KeyError:
            raise _not_found(name) from None

    def read_file(self, name: AbsPath) -> bytes:
        """Return the contents of the file name.

        Raises OSError with EINVAL if name is not a file.
        """
        if name in self._contents:
            return self._contents[name]
        if name in self._file_infos:
            raise _invalid(name)
        raise _not_found(name)

    def readlink(self, name: AbsPath) -> str:
        """Return the target of the symlink name.

        Raises OSError with EINVAL if name is not a symlink.
        """
        if name in self._linknames:
            return self._linknames[name]
        if name in self._file_infos:
            raise _invalid(name)
        raise _not_found(name)
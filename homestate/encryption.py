"""The encryption interface, a disabled encryption and a logging wrapper."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from homestate.abspath import AbsPath

_LOGGED_BYTES = 64


class Encryption(ABC):
    """Encrypts and decrypts data and files."""

    @abstractmethod
    def decrypt(self, ciphertext: bytes) -> bytes:
        """Return the plaintext of ciphertext."""

    @abstractmethod
    def decrypt_to_file(self, plaintext_path: AbsPath, ciphertext: bytes) -> None:
        """Decrypt ciphertext and write the plaintext to plaintext_path."""

    @abstractmethod
    def encrypt(self, plaintext: bytes) -> bytes:
        """Return the ciphertext of plaintext."""

    @abstractmethod
    def encrypt_file(self, plaintext_path: AbsPath) -> bytes:
        """Return the ciphertext of the file at plaintext_path."""

    @abstractmethod
    def encrypted_suffix(self) -> str:
        """Return the suffix of encrypted file names."""


class NoEncryptionError(Exception):
    """Raised when encryption is used but none is configured."""

    def __init__(self) -> None:
        super().__init__("no encryption")


class NoEncryption(Encryption):
    """An encryption that refuses every operation."""

    def decrypt(self, ciphertext: bytes) -> bytes:
        raise NoEncryptionError()

    def decrypt_to_file(self, plaintext_path: AbsPath, ciphertext: bytes) -> None:
        raise NoEncryptionError()

    def encrypt(self, plaintext: bytes) -> bytes:
        raise NoEncryptionError()

    def encrypt_file(self, plaintext_path: AbsPath) -> bytes:
        raise NoEncryptionError()

    def encrypted_suffix(self) -> str:
        return ""


def _output(data: bytes | None) -> bytes | None:
    if data is None:
        return None
    return bytes(data[:_LOGGED_BYTES])


class DebugEncryption(Encryption):
    """An encryption that logs every call to a wrapped encryption."""

    def __init__(
        self, encryption: Encryption, logger: logging.Logger | None = None
    ) -> None:
        self._encryption = encryption
        self._logger = logger or logging.getLogger(__name__)

    @contextmanager
    def _logged(self, msg: str, **fields: Any) -> Iterator[dict[str, Any]]:
        try:
            yield fields
        except Exception as exc:
            self._log(msg, exc, fields)
            raise
        self._log(msg, None, fields)

    def _log(self, msg: str, error: BaseException | None, fields: dict) -> None:
        detail = " ".join(f"{name}={value!r}" for name, value in fields.items())
        if error is not None:
            self._logger.error("%s %s error=%r", msg, detail, error)
        else:
            self._logger.info("%s %s", msg, detail)

    def decrypt(self, ciphertext: bytes) -> bytes:
        with self._logged("Decrypt", ciphertext=_output(ciphertext)) as fields:
            plaintext = self._encryption.decrypt(ciphertext)
            fields["plaintext"] = _output(plaintext)
        return plaintext

    def decrypt_to_file(self, plaintext_path: AbsPath, ciphertext: bytes) -> None:
        with self._logged(
            "DecryptToFile",
            plaintext_path=str(plaintext_path),
            ciphertext=_output(ciphertext),
        ):
            self._encryption.decrypt_to_file(plaintext_path, ciphertext)

    def encrypt(self, plaintext: bytes) -> bytes:
        with self._logged("Encrypt", plaintext=_output(plaintext)) as fields:
            ciphertext = self._encryption.encrypt(plaintext)
            fields["ciphertext"] = _output(ciphertext)
        return ciphertext

    def encrypt_file(self, plaintext_path: AbsPath) -> bytes:
        with self._logged("EncryptFile", plaintext_path=str(plaintext_path)) as fields:
            ciphertext = self._encryption.encrypt_file(plaintext_path)
            fields["ciphertext"] = _output(ciphertext)
        return ciphertext

    def encrypted_suffix(self) -> str:
        return self._encryption.encrypted_suffix()
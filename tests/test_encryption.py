import logging
import os

import pytest

from homestate.abspath import AbsPath
from homestate.encryption import (
    DebugEncryption,
    Encryption,
    NoEncryption,
    NoEncryptionError,
)


class XorEncryption(Encryption):
    def __init__(self, key: int) -> None:
        self.key = key

    def _xor(self, data: bytes) -> bytes:
        return bytes(b ^ self.key for b in data)

    def decrypt(self, ciphertext):
        return self._xor(ciphertext)

    def decrypt_to_file(self, plaintext_path, ciphertext):
        with open(os.fspath(plaintext_path), "wb") as f:
            f.write(self._xor(ciphertext))

    def encrypt(self, plaintext):
        return self._xor(plaintext)

    def encrypt_file(self, plaintext_path):
        with open(os.fspath(plaintext_path), "rb") as f:
            return self._xor(f.read())

    def encrypted_suffix(self):
        return ".xor"


PLAINTEXT = b"plaintext\n"


@pytest.fixture
def debug_xor():
    return DebugEncryption(XorEncryption(0x2A), logging.getLogger("test.encryption"))


def test_encryption_is_abstract():
    with pytest.raises(TypeError):
        Encryption()


def test_no_encryption_raises(tmp_path):
    enc = NoEncryption()
    path = AbsPath(str(tmp_path / "plain"))
    with pytest.raises(NoEncryptionError):
        enc.decrypt(b"x")
    with pytest.raises(NoEncryptionError):
        enc.decrypt_to_file(path, b"x")
    with pytest.raises(NoEncryptionError):
        enc.encrypt(b"x")
    with pytest.raises(NoEncryptionError, match="no encryption"):
        enc.encrypt_file(path)
    assert enc.encrypted_suffix() == ""


def test_debug_encrypt_decrypt(debug_xor):
    ciphertext = debug_xor.encrypt(PLAINTEXT)
    assert ciphertext
    assert ciphertext != PLAINTEXT
    assert debug_xor.decrypt(ciphertext) == PLAINTEXT


def test_debug_decrypt_to_file(debug_xor, tmp_path):
    ciphertext = debug_xor.encrypt(PLAINTEXT)
    path = AbsPath(str(tmp_path / "plaintext"))
    debug_xor.decrypt_to_file(path, ciphertext)
    assert (tmp_path / "plaintext").read_bytes() == PLAINTEXT


def test_debug_encrypt_file(debug_xor, tmp_path):
    (tmp_path / "plaintext").write_bytes(PLAINTEXT)
    ciphertext = debug_xor.encrypt_file(AbsPath(str(tmp_path / "plaintext")))
    assert ciphertext != PLAINTEXT
    assert debug_xor.decrypt(ciphertext) == PLAINTEXT


def test_debug_suffix_delegates(debug_xor):
    assert debug_xor.encrypted_suffix() == ".xor"


def test_debug_logs_calls(debug_xor, caplog):
    with caplog.at_level(logging.INFO, logger="test.encryption"):
        debug_xor.encrypt(PLAINTEXT)
    assert any(r.getMessage().startswith("Encrypt") for r in caplog.records)


def test_debug_logs_and_reraises_errors(caplog):
    enc = DebugEncryption(NoEncryption(), logging.getLogger("test.encryption"))
    with caplog.at_level(logging.INFO, logger="test.encryption"):
        with pytest.raises(NoEncryptionError):
            enc.decrypt(b"data")
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "Decrypt" in errors[0].getMessage()
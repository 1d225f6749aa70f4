"""Encryption with an external age command."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field

from homestate.abspath import EMPTY_ABS_PATH, AbsPath
from homestate.encryption import Encryption


def _abs_path(value: AbsPath | str | os.PathLike[str]) -> AbsPath:
    if isinstance(value, AbsPath):
        return value
    return AbsPath(os.fspath(value))


@dataclass
class AgeEncryption(Encryption):
    """Encrypts and decrypts by running age."""

    command: str = "age"
    args: list[str] = field(default_factory=list)
    identity: AbsPath = EMPTY_ABS_PATH
    identities: list[AbsPath] = field(default_factory=list)
    passphrase: bool = False
    recipient: str = ""
    recipients: list[str] = field(default_factory=list)
    recipients_file: AbsPath = EMPTY_ABS_PATH
    recipients_files: list[AbsPath] = field(default_factory=list)
    suffix: str = ".age"
    symmetric: bool = False

    def __post_init__(self) -> None:
        self.identity = _abs_path(self.identity)
        self.identities = [_abs_path(p) for p in self.identities]
        self.recipients_file = _abs_path(self.recipients_file)
        self.recipients_files = [_abs_path(p) for p in self.recipients_files]

    def _output(self, args: list[str], stdin: bytes | None) -> bytes:
        result = subprocess.run(
            [self.command, *args],
            input=stdin,
            stdin=subprocess.DEVNULL if stdin is None else None,
            stdout=subprocess.PIPE,
            check=True,
        )
        return result.stdout

    def decrypt(self, ciphertext: bytes) -> bytes:
        return self._output([*self.decrypt_args(), *self.args], ciphertext)

    def decrypt_to_file(self, plaintext_path: AbsPath, ciphertext: bytes) -> None:
        subprocess.run(
            [
                self.command,
                *self.decrypt_args(),
                "--output",
                str(plaintext_path),
                *self.args,
            ],
            input=ciphertext,
            check=True,
        )

    def encrypt(self, plaintext: bytes) -> bytes:
        return self._output([*self.encrypt_args(), *self.args], plaintext)

    def encrypt_file(self, plaintext_path: AbsPath) -> bytes:
        return self._output(
            [*self.encrypt_args(), *self.args, str(plaintext_path)], None
        )

    def encrypted_suffix(self) -> str:
        return self.suffix

    def decrypt_args(self) -> list[str]:
        """Return the age arguments for decryption."""
        args = ["--decrypt"]
        if not self.passphrase:
            args += self.identity_args()
        return args

    def encrypt_args(self) -> list[str]:
        """Return the age arguments for encryption."""
        args = ["--armor", "--encrypt"]
        if self.passphrase:
            args.append("--passphrase")
        elif self.symmetric:
            args += self.identity_args()
        else:
            if self.recipient:
                args += ["--recipient", self.recipient]
            for recipient in self.recipients:
                args += ["--recipient", recipient]
            if not self.recipients_file.empty():
                args += ["--recipients-file", str(self.recipients_file)]
            for recipients_file in self.recipients_files:
                args += ["--recipients-file", str(recipients_file)]
        return args

    def identity_args(self) -> list[str]:
        """Return the age arguments naming the identity files."""
        args: list[str] = []
        if not self.identity.empty():
            args += ["--identity", str(self.identity)]
        for identity in self.identities:
            args += ["--identity", str(identity)]
        return args
"""Bytes that serialise as a hexadecimal string."""

from __future__ import annotations

import binascii


class HexBytes(bytes):
    """Bytes whose text form is lower-case hexadecimal."""

    def __str__(self) -> str:
        return self.hex()

    def marshal_text(self) -> bytes:
        """Return the hexadecimal encoding as bytes."""
        return self.hex().encode("ascii")

    @classmethod
    def from_text(cls, text: bytes | str) -> HexBytes:
        """Decode hexadecimal text; raise ValueError if it is malformed."""
        if isinstance(text, str):
            text = text.encode("ascii")
        if not text:
            return cls(b"")
        return cls(binascii.unhexlify(text))
"""In-memory, null and logging persistent states."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, ClassVar, Protocol


def _as_bytes(value: bytes | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8", errors="surrogateescape")
    return bytes(value)


def _as_str(value: bytes) -> str:
    return value.decode("utf-8", errors="surrogateescape")


class PersistentState(Protocol):
    """A store of values grouped by bucket and key."""

    def close(self) -> None: ...

    def copy_to(self, other: PersistentState) -> None: ...

    def data(self) -> Any: ...

    def delete(self, bucket: bytes, key: bytes) -> None: ...

    def items(self, bucket: bytes) -> Iterator[tuple[bytes, bytes]]: ...

    def get(self, bucket: bytes, key: bytes) -> bytes | None: ...

    def set(self, bucket: bytes, key: bytes, value: bytes) -> None: ...


class MockPersistentState:
    """A persistent state held in memory."""

    def __init__(self) -> None:
        self._buckets: dict[bytes, dict[bytes, bytes]] = {}
        self.closed = False

    def close(self) -> None:
        """Mark the state as closed; it stays usable."""
        self.closed = True

    def copy_to(self, other: PersistentState) -> None:
        """Copy every key and value into other."""
        for bucket, entries in list(self._buckets.items()):
            for key, value in list(entries.items()):
                other.set(bucket, key, value)

    def data(self) -> dict[str, dict[str, bytes]]:
        """Return all buckets with their keys and values."""
        return {
            _as_str(bucket): {_as_str(key): value for key, value in entries.items()}
            for bucket, entries in self._buckets.items()
        }

    def delete(self, bucket: bytes | str, key: bytes | str) -> None:
        """Remove key from bucket; missing buckets and keys are ignored."""
        entries = self._buckets.get(_as_bytes(bucket))
        if entries is not None:
            entries.pop(_as_bytes(key), None)

    def items(self, bucket: bytes | str) -> Iterator[tuple[bytes, bytes]]:
        """Iterate over the key and value pairs in bucket."""
        return iter(list(self._buckets.get(_as_bytes(bucket), {}).items()))

    def get(self, bucket: bytes | str, key: bytes | str) -> bytes | None:
        """Return the value of key in bucket, or None."""
        return self._buckets.get(_as_bytes(bucket), {}).get(_as_bytes(key))

    def set(self, bucket: bytes | str, key: bytes | str, value: bytes | str) -> None:
        """Set key in bucket to value, creating the bucket if needed."""
        self._buckets.setdefault(_as_bytes(bucket), {})[_as_bytes(key)] = _as_bytes(
            value
        )


class NullPersistentState:
    """A persistent state that reads as empty and discards all writes."""

    _NO_DATA: ClassVar[None] = None

    def __init__(self) -> None:
        self.closed = False

    @staticmethod
    def _discard(*parts: Any) -> None:
        for part in parts:
            if not isinstance(part, (bytes, bytearray, str)):
                raise TypeError(f"expected bytes or str, got {type(part).__name__}")

    def close(self) -> None:
        """Mark the state as closed."""
        self.closed = True

    def copy_to(self, other: PersistentState) -> None:
        """Copy nothing into other, which must be a persistent state."""
        if not callable(getattr(other, "set", None)):
            raise TypeError("copy_to needs a persistent state")

    def data(self) -> None:
        """Return None: there is no data."""
        return self._NO_DATA

    def delete(self, bucket: bytes | str, key: bytes | str) -> None:
        """Discard the request."""
        self._discard(bucket, key)

    def items(self, bucket: bytes | str) -> Iterator[tuple[bytes, bytes]]:
        """Return an empty iterator."""
        self._discard(bucket)
        return iter(())

    def get(self, bucket: bytes | str, key: bytes | str) -> None:
        """Return None: no value is ever stored."""
        self._discard(bucket, key)
        return self._NO_DATA

    def set(self, bucket: bytes | str, key: bytes | str, value: bytes | str) -> None:
        """Discard the value."""
        self._discard(bucket, key, value)


class DebugPersistentState:
    """A persistent state that logs every call to a wrapped state."""

    def __init__(
        self, persistent_state: PersistentState, logger: logging.Logger | None = None
    ) -> None:
        self._state = persistent_state
        self._logger = logger or logging.getLogger(__name__)

    def _log(self, msg: str, error: BaseException | None, fields: dict) -> None:
        detail = " ".join(f"{name}={value!r}" for name, value in fields.items())
        if error is not None:
            detail = f"{detail} error={error!r}".strip()
            self._logger.error("%s %s", msg, detail)
        else:
            self._logger.info("%s %s", msg, detail)

    @contextmanager
    def _logged(self, msg: str, **fields: Any) -> Iterator[dict]:
        try:
            yield fields
        except Exception as exc:
            self._log(msg, exc, fields)
            raise
        self._log(msg, None, fields)

    def close(self) -> None:
        """Close the wrapped state."""
        with self._logged("Close"):
            self._state.close()

    def copy_to(self, other: PersistentState) -> None:
        """Copy the wrapped state into other."""
        with self._logged("CopyTo"):
            self._state.copy_to(other)

    def data(self) -> Any:
        """Return the wrapped state's data."""
        with self._logged("Data") as fields:
            data = self._state.data()
            fields["data"] = data
        return data

    def delete(self, bucket: bytes, key: bytes) -> None:
        """Delete key from bucket in the wrapped state."""
        with self._logged("Delete", bucket=bucket, key=key):
            self._state.delete(bucket, key)

    def items(self, bucket: bytes) -> Iterator[tuple[bytes, bytes]]:
        """Iterate over bucket in the wrapped state, logging each pair."""
        with self._logged("ForEach", bucket=bucket):
            for key, value in self._state.items(bucket):
                self._log("ForEach", None, {"bucket": bucket, "key": key, "value": value})
                yield key, value

    def get(self, bucket: bytes, key: bytes) -> bytes | None:
        """Return the value of key in bucket from the wrapped state."""
        with self._logged("Get", bucket=bucket, key=key) as fields:
            value = self._state.get(bucket, key)
            fields["value"] = value
        return value

    def set(self, bucket: bytes, key: bytes, value: bytes) -> None:
        """Set key in bucket in the wrapped state."""
        with self._logged("Set", bucket=bucket, key=key, value=value):
            self._state.set(bucket, key, value)
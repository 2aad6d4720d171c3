"""Streaming XXH3-128 hashing for file integrity checks."""

from __future__ import annotations

import os

import xxhash

from treehash.errors import FileOpenError, FileReadError
from treehash.util.events import HashObserver, NullObserver

CHUNK_SIZE = 8 * 1024 * 1024
DIGEST_BITS = 128
DIGEST_HEX_LENGTH = DIGEST_BITS // 4


class Hasher:
    """Reusable 128-bit digest accumulator.

    ``reset()`` must be called between streams when one instance is shared
    across files; ``digest()`` does not reset on its own.
    """

    def __init__(self) -> None:
        self._state = xxhash.xxh3_128()

    def reset(self) -> None:
        self._state.reset()

    def update(self, chunk: bytes | bytearray | memoryview) -> None:
        self._state.update(chunk)

    def digest(self) -> int:
        return self._state.intdigest()

    def hexdigest(self) -> str:
        return render_digest(self.digest())


def render_digest(value: int) -> str:
    """Return ``value`` as 32 uppercase, zero-padded hexadecimal characters."""
    if value < 0 or value >> DIGEST_BITS:
        raise ValueError(f"digest out of range for {DIGEST_BITS} bits: {value}")
    return f"{value:0{DIGEST_HEX_LENGTH}X}"


def hash_file(
    path: str,
    *,
    hasher: Hasher,
    buffer: bytearray,
    observer: HashObserver | None = None,
) -> str:
    """Stream ``path`` through ``buffer`` into ``hasher`` and return the rendered digest.

    Raises ``FileOpenError`` when the file cannot be opened and ``FileReadError``
    when a read fails part way through.
    """
    observer = observer or NullObserver()
    try:
        handle = open(path, "rb", buffering=0)
    except OSError as exc:
        raise FileOpenError(path, exc) from exc

    view = memoryview(buffer)
    with handle:
        try:
            size = os.fstat(handle.fileno()).st_size
        except OSError as exc:
            raise FileReadError(path, exc) from exc
        observer.file_started(path, size)
        hasher.reset()
        try:
            while True:
                try:
                    count = handle.readinto(buffer)
                except OSError as exc:
                    raise FileReadError(path, exc) from exc
                if not count:
                    break
                hasher.update(view[:count])
                observer.chunk_hashed(path, count)
        finally:
            observer.file_finished(path)

    return hasher.hexdigest()


__all__ = [
    "CHUNK_SIZE",
    "DIGEST_HEX_LENGTH",
    "Hasher",
    "hash_file",
    "render_digest",
]

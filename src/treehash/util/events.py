"""Engine event hooks consumed by the presentation layer."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class HashObserver(Protocol):
    """Receives per-file progress from the hashing loop."""

    def file_started(self, path: str, size: int) -> None:
        """Called once a file is open, before the first chunk is read."""
        ...

    def chunk_hashed(self, path: str, nbytes: int) -> None:
        ...

    def file_finished(self, path: str) -> None:
        """Called after the last chunk, or when reading stops on an error."""
        ...


class NullObserver:
    """Observer that ignores every event."""

    def file_started(self, path: str, size: int) -> None:
        pass

    def chunk_hashed(self, path: str, nbytes: int) -> None:
        pass

    def file_finished(self, path: str) -> None:
        pass


__all__ = ["HashObserver", "NullObserver"]

"""Exception hierarchy for the hash/verify engine."""

from __future__ import annotations


class TreeHashError(RuntimeError):
    """Base class for engine failures."""


class TraversalError(TreeHashError):
    """Raised when a metadata lookup fails while walking the tree."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"Unable to stat {path}: {cause}")
        self.path = path


class FileHashError(TreeHashError):
    """A single file could not be hashed. Never aborts a batch."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


class FileOpenError(FileHashError):
    """Raised when a file cannot be opened for reading."""


class FileReadError(FileHashError):
    """Raised when reading fails after the file was opened."""


class ManifestParseError(TreeHashError):
    """Raised for a manifest line that does not hold a path and a digest."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"Malformed manifest line {line!r}: {reason}")
        self.line = line
        self.reason = reason


class ManifestReadError(TreeHashError):
    """Raised when the manifest file cannot be read."""


class ManifestWriteError(TreeHashError):
    """Raised when the manifest file cannot be written."""


__all__ = [
    "FileHashError",
    "FileOpenError",
    "FileReadError",
    "ManifestParseError",
    "ManifestReadError",
    "ManifestWriteError",
    "TraversalError",
    "TreeHashError",
]

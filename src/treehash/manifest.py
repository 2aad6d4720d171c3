"""Line-oriented manifest codec: ``<path> <32 hex digest>`` per line."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from treehash.errors import ManifestParseError, ManifestReadError, ManifestWriteError
from treehash.util.hashing import DIGEST_HEX_LENGTH

DEFAULT_MANIFEST_NAME = "hashes.txt"
SEPARATOR = " "

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
# Undecodable file names come back from os.walk as lone surrogates.
_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class ManifestEntry:
    """A persisted (path, digest) pair."""

    path: str
    digest: str

    def to_line(self) -> str:
        return format_line(self.path, self.digest)


def format_line(path: str, digest: str) -> str:
    """Render one manifest line, rejecting paths the line format cannot hold."""
    if not path:
        raise ValueError("manifest path must not be empty")
    if "\n" in path or "\r" in path:
        raise ValueError(f"manifest path contains a line break: {path!r}")
    if len(digest) != DIGEST_HEX_LENGTH:
        raise ValueError(f"digest must be {DIGEST_HEX_LENGTH} characters: {digest!r}")
    return f"{path}{SEPARATOR}{digest}"


def parse_line(line: str) -> ManifestEntry:
    """Split a manifest line on its last separator into path and digest.

    Only the line terminator is removed, so paths with inner or trailing
    spaces come back unchanged.
    """
    text = line.rstrip("\r\n")
    path, sep, digest = text.rpartition(SEPARATOR)
    if not sep:
        raise ManifestParseError(line, "no separator before digest")
    if len(digest) != DIGEST_HEX_LENGTH or not _HEX_DIGITS.issuperset(digest):
        raise ManifestParseError(line, f"expected {DIGEST_HEX_LENGTH} hexadecimal digits")
    if not path:
        raise ManifestParseError(line, "empty path")
    return ManifestEntry(path=path, digest=digest)


def render_manifest(entries: Iterable[ManifestEntry]) -> str:
    """Join entries with newlines, without a trailing newline."""
    return "\n".join(entry.to_line() for entry in entries)


def write_manifest(entries: Iterable[ManifestEntry], dest: Path, *, encoding: str = "utf-8") -> Path:
    """Overwrite ``dest`` with the rendered manifest in a single write."""
    text = render_manifest(entries)
    try:
        dest.write_text(text, encoding=encoding, errors=_ERRORS, newline="\n")
    except OSError as exc:
        raise ManifestWriteError(f"Unable to write {dest}: {exc}") from exc
    return dest


def read_manifest_lines(src: Path, *, encoding: str = "utf-8") -> list[str]:
    """Return the manifest's lines in file order (empty list for an empty file)."""
    try:
        text = src.read_text(encoding=encoding, errors=_ERRORS)
    except OSError as exc:
        raise ManifestReadError(f"Unable to read {src}: {exc}") from exc
    if not text:
        return []
    return text.split("\n")


__all__ = [
    "DEFAULT_MANIFEST_NAME",
    "ManifestEntry",
    "format_line",
    "parse_line",
    "read_manifest_lines",
    "render_manifest",
    "write_manifest",
]

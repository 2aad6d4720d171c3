"""Verify pipeline: re-hash manifest entries and classify each one."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from treehash.errors import FileHashError, ManifestParseError
from treehash.manifest import ManifestEntry, parse_line, read_manifest_lines
from treehash.util.events import HashObserver
from treehash.util.hashing import CHUNK_SIZE, Hasher, hash_file

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    VERIFIED = "verified"
    FAILED = "failed"
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"


@dataclass
class VerifyReport:
    """Aggregated outcomes; path lists keep manifest order."""

    verified: int = 0
    failed: int = 0
    not_found: int = 0
    malformed: int = 0
    failed_paths: list[str] = field(default_factory=list)
    missing_paths: list[str] = field(default_factory=list)
    malformed_lines: list[str] = field(default_factory=list)

    def record(self, outcome: Outcome, subject: str) -> None:
        """Count ``outcome`` for ``subject`` (a path, or the raw line when malformed)."""
        if outcome is Outcome.VERIFIED:
            self.verified += 1
        elif outcome is Outcome.FAILED:
            self.failed += 1
            self.failed_paths.append(subject)
        elif outcome is Outcome.NOT_FOUND:
            self.not_found += 1
            self.missing_paths.append(subject)
        else:
            self.malformed += 1
            self.malformed_lines.append(subject)

    @property
    def total(self) -> int:
        return self.verified + self.failed + self.not_found + self.malformed

    @property
    def error(self) -> bool:
        return bool(self.failed or self.not_found or self.malformed)


def verify_entry(
    entry: ManifestEntry,
    *,
    hasher: Hasher,
    buffer: bytearray,
    observer: HashObserver | None = None,
) -> Outcome:
    """Re-hash one entry's file and compare against the recorded digest."""

    logger.debug("verifying: %s", entry.path)
    try:
        actual = hash_file(entry.path, hasher=hasher, buffer=buffer, observer=observer)
    except FileHashError as exc:
        logger.warning("Unable to read %s: %s", exc.path, exc.cause)
        return Outcome.NOT_FOUND

    if actual == entry.digest:
        return Outcome.VERIFIED
    logger.warning("Failed to verify %s: %s != %s", entry.path, actual, entry.digest)
    return Outcome.FAILED


def verify_manifest(
    manifest_path: Path,
    *,
    chunk_size: int = CHUNK_SIZE,
    encoding: str = "utf-8",
    observer: HashObserver | None = None,
) -> VerifyReport:
    """Check every entry in ``manifest_path`` against the current filesystem."""

    report = VerifyReport()
    hasher = Hasher()
    buffer = bytearray(chunk_size)

    for line in read_manifest_lines(manifest_path, encoding=encoding):
        if not line.strip("\r"):
            continue
        try:
            entry = parse_line(line)
        except ManifestParseError as exc:
            logger.warning("%s", exc)
            report.record(Outcome.MALFORMED, exc.line)
            continue
        outcome = verify_entry(entry, hasher=hasher, buffer=buffer, observer=observer)
        report.record(outcome, entry.path)

    return report


__all__ = ["Outcome", "VerifyReport", "verify_entry", "verify_manifest"]

"""Generate pipeline: traverse, hash, and persist a fresh manifest."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from treehash.errors import FileHashError
from treehash.manifest import ManifestEntry, write_manifest
from treehash.traversal import iter_files
from treehash.util.events import HashObserver
from treehash.util.hashing import CHUNK_SIZE, Hasher, hash_file

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Counts and entries produced by one generate run."""

    manifest_path: Path
    good_files: int = 0
    bad_files: int = 0
    entries: list[ManifestEntry] = field(default_factory=list)
    bad_paths: list[str] = field(default_factory=list)

    @property
    def error(self) -> bool:
        return self.bad_files > 0


def generate_manifest(
    manifest_path: Path,
    *,
    root: str = ".",
    exclude: Iterable[str] = (),
    chunk_size: int = CHUNK_SIZE,
    encoding: str = "utf-8",
    observer: HashObserver | None = None,
) -> GenerateResult:
    """Hash every regular file under ``root`` and overwrite ``manifest_path``.

    Files that cannot be opened or read are counted as bad and skipped. The
    manifest is written once, after the walk completes.
    """

    result = GenerateResult(manifest_path=manifest_path)
    hasher = Hasher()
    buffer = bytearray(chunk_size)

    for entry in iter_files(root, exclude=exclude):
        if "\n" in entry.path or "\r" in entry.path:
            logger.warning("Skipping %r: line breaks cannot be stored in the manifest", entry.path)
            result.bad_files += 1
            result.bad_paths.append(entry.path)
            continue

        logger.debug("hashing: %s", entry.path)
        try:
            digest = hash_file(entry.path, hasher=hasher, buffer=buffer, observer=observer)
        except FileHashError as exc:
            logger.warning("Unable to read %s: %s", exc.path, exc.cause)
            result.bad_files += 1
            result.bad_paths.append(entry.path)
            continue

        result.good_files += 1
        result.entries.append(ManifestEntry(path=entry.path, digest=digest))

    write_manifest(result.entries, manifest_path, encoding=encoding)
    logger.info("%s saved with %s entries.", manifest_path, len(result.entries))
    return result


__all__ = ["GenerateResult", "generate_manifest"]

"""Mode selection and run orchestration."""

from __future__ import annotations

import contextlib
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from treehash.config import TreeHashConfig
from treehash.pipeline.generate import GenerateResult, generate_manifest
from treehash.pipeline.verify import VerifyReport, verify_manifest
from treehash.util.events import HashObserver
from treehash.util.paths import self_path

logger = logging.getLogger(__name__)

WALK_ROOT = "."


class Mode(str, Enum):
    GENERATE = "generate"
    VERIFY = "verify"


@dataclass(frozen=True)
class RunOutcome:
    mode: Mode
    result: GenerateResult | VerifyReport

    @property
    def error(self) -> bool:
        return self.result.error


def select_mode(manifest_path: Path) -> Mode:
    """Verify when a manifest already exists, otherwise generate one."""
    return Mode.VERIFY if manifest_path.exists() else Mode.GENERATE


def excluded_paths(config: TreeHashConfig) -> list[str]:
    """Traversal paths never hashed: the running program, configured extras and the log file.

    Must be called before entering ``runtime.root``; a relative ``log_path`` is
    taken relative to the caller's working directory, as the log handler opens it.
    """

    excluded: list[str] = []
    if config.runtime.exclude_self:
        own = self_path(WALK_ROOT)
        if own:
            excluded.append(own)
    for item in config.runtime.exclude:
        excluded.append(os.path.join(WALK_ROOT, os.path.normpath(item)))
    log_entry = _path_under_root(config.runtime.log_path, config.runtime.root)
    if log_entry:
        excluded.append(log_entry)
    return excluded


def _path_under_root(path: Path | None, root: Path) -> str | None:
    """Return ``path`` as a traversal path (``./...``) when it lies inside ``root``."""

    if path is None:
        return None
    rel = os.path.relpath(os.path.realpath(path), os.path.realpath(root))
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        return None
    return os.path.join(WALK_ROOT, rel)


def run(config: TreeHashConfig, *, observer: HashObserver | None = None) -> RunOutcome:
    """Run generate or verify inside ``config.runtime.root``.

    Manifest paths stay relative to that directory, e.g. ``./sub/file.bin``.
    """

    exclude = excluded_paths(config)
    with contextlib.chdir(config.runtime.root):
        manifest_path = Path(config.manifest.filename)
        mode = select_mode(manifest_path)

        if mode is Mode.GENERATE:
            logger.info("%s not found, hashing files...", manifest_path)
            result: GenerateResult | VerifyReport = generate_manifest(
                manifest_path,
                root=WALK_ROOT,
                exclude=exclude,
                chunk_size=config.hashing.chunk_size,
                encoding=config.manifest.encoding,
                observer=observer,
            )
        else:
            logger.info("Found %s, verifying hashes...", manifest_path)
            result = verify_manifest(
                manifest_path,
                chunk_size=config.hashing.chunk_size,
                encoding=config.manifest.encoding,
                observer=observer,
            )

    return RunOutcome(mode=mode, result=result)


def exit_code(outcome: RunOutcome) -> int:
    return 1 if outcome.error else 0


__all__ = ["Mode", "RunOutcome", "excluded_paths", "exit_code", "run", "select_mode"]

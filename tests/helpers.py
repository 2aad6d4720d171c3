from __future__ import annotations

from pathlib import Path
from typing import Mapping

from treehash.config import TreeHashConfig, load_config
from treehash.util.hashing import CHUNK_SIZE, Hasher, hash_file

SAMPLE_TREE: Mapping[str, bytes] = {
    "alpha.txt": b"alpha\n",
    "empty.bin": b"",
    "nested/beta.txt": b"beta beta beta",
    "nested/deeper/gamma.dat": bytes(range(256)) * 64,
    "with space/delta file.txt": b"delta",
}


def seed_tree(root: Path, files: Mapping[str, bytes] = SAMPLE_TREE) -> list[str]:
    """Write ``files`` under ``root`` and return their manifest-style paths."""

    paths: list[str] = []
    for rel, content in files.items():
        dest = root / rel
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(content)
        paths.append("./" + rel)
    return paths


def file_digest(path: str, *, chunk_size: int = CHUNK_SIZE) -> str:
    """Rendered digest of ``path`` from a fresh hasher and buffer."""

    return hash_file(path, hasher=Hasher(), buffer=bytearray(chunk_size))

def make_config(root: Path, **runtime: object) -> TreeHashConfig:
    """Config rooted at ``root`` with pausing and progress bars turned off."""

    overrides: dict[str, object] = {
        "runtime.root": str(root),
        "runtime.pause_on_exit": False,
        "runtime.progress": False,
    }
    for key, value in runtime.items():
        overrides[f"runtime.{key}"] = value
    return load_config(overrides=overrides)


class RecordingObserver:
    """Collects hashing events for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, int]] = []

    def file_started(self, path: str, size: int) -> None:
        self.events.append(("start", path, size))

    def chunk_hashed(self, path: str, nbytes: int) -> None:
        self.events.append(("chunk", path, nbytes))

    def file_finished(self, path: str) -> None:
        self.events.append(("finish", path, 0))

"""Lazy enumeration of regular files below a root directory."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from typing import Iterable, Iterator

from treehash.errors import TraversalError


@dataclass(frozen=True)
class FileEntry:
    path: str
    size: int


def iter_files(root: str = ".", *, exclude: Iterable[str] = ()) -> Iterator[FileEntry]:
    """Yield every regular file under ``root`` in walk order.

    Directories and special files are skipped. Paths listed in ``exclude`` are
    matched by exact string comparison. A failed metadata lookup raises
    ``TraversalError``.
    """
    skipped = {path for path in exclude if path}
    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            path = os.path.join(dirpath, name)
            if path in skipped:
                continue
            try:
                info = os.stat(path)
            except OSError as exc:
                raise TraversalError(path, exc) from exc
            if not stat.S_ISREG(info.st_mode):
                continue
            yield FileEntry(path=path, size=info.st_size)


__all__ = ["FileEntry", "iter_files"]

"""Path helpers for locating the running program inside the hashed tree."""

from __future__ import annotations

import os
import sys


def self_path(root: str = ".") -> str | None:
    """Return ``<root>/<own-filename>`` for the running program, if known.

    Compared by exact string match against traversal paths so the tool never
    hashes itself.
    """
    argv0 = sys.argv[0] if sys.argv else ""
    name = os.path.basename(argv0)
    if not name:
        return None
    return os.path.join(root, name)


__all__ = ["self_path"]

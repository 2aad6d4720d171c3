"""Pydantic models describing treehash configuration."""

from __future__ import annotations

from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from treehash.manifest import DEFAULT_MANIFEST_NAME
from treehash.util.hashing import CHUNK_SIZE


class HashingConfig(BaseModel):
    """Digest algorithm and read buffer sizing."""

    model_config = ConfigDict(extra="forbid")

    algorithm: Literal["xxh3_128"] = "xxh3_128"
    chunk_size: int = Field(default=CHUNK_SIZE, ge=1)


class ManifestConfig(BaseModel):
    """Location and encoding of the persisted manifest."""

    model_config = ConfigDict(extra="forbid")

    filename: str = DEFAULT_MANIFEST_NAME
    encoding: str = "utf-8"

    @field_validator("filename")
    @classmethod
    def _plain_filename(cls, value: str) -> str:
        """The manifest lives directly in the working directory."""

        if not value or Path(value).name != value:
            raise ValueError("manifest filename must be a bare file name.")
        return value


class RuntimeConfig(BaseModel):
    """Execution-time settings for a single run."""

    model_config = ConfigDict(extra="forbid")

    root: Path = Path(".")
    pause_on_exit: bool = True
    exclude_self: bool = True
    exclude: List[str] = Field(default_factory=list)
    log_path: Optional[Path] = None
    progress: bool = True

    @field_validator("exclude")
    @classmethod
    def _file_paths_only(cls, value: List[str]) -> List[str]:
        """Entries are matched as exact file paths relative to ``root``."""

        for item in value:
            if not item or item.endswith(("/", "\\")):
                raise ValueError(f"exclude entries must name files, not directories: {item!r}")
            if Path(item).is_absolute():
                raise ValueError(f"exclude entries must be relative to root: {item!r}")
        return value


class TreeHashConfig(BaseModel):
    """Root configuration object."""

    model_config = ConfigDict(extra="forbid")

    hashing: HashingConfig = Field(default_factory=HashingConfig)
    manifest: ManifestConfig = Field(default_factory=ManifestConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)


__all__ = [
    "HashingConfig",
    "ManifestConfig",
    "RuntimeConfig",
    "TreeHashConfig",
]

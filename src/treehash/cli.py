"""Command-line entry point for treehash."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from tqdm import tqdm

from treehash.config import ConfigError, dump_config, load_config
from treehash.errors import TreeHashError
from treehash.pipeline.generate import GenerateResult
from treehash.pipeline.verify import VerifyReport
from treehash.runner import RunOutcome, exit_code, run
from treehash.util.logging import configure_logging

FATAL_EXIT_CODE = 2
PAUSE_PROMPT = "Press any key to continue..."

app = typer.Typer(add_completion=False, help="Hash a directory tree, or verify it against hashes.txt")


class ProgressObserver:
    """Per-file byte progress bars for files larger than one read buffer."""

    def __init__(self, *, min_size: int, enabled: bool = True) -> None:
        self.min_size = min_size
        self.enabled = enabled
        self._bar: tqdm | None = None

    def file_started(self, path: str, size: int) -> None:
        self._bar = tqdm(
            total=size,
            desc=path,
            unit="B",
            unit_scale=True,
            leave=False,
            disable=not self.enabled or size <= self.min_size,
        )

    def chunk_hashed(self, path: str, nbytes: int) -> None:
        if self._bar is not None:
            self._bar.update(nbytes)

    def file_finished(self, path: str) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


def _echo_paths(header: str, paths: list[str]) -> None:
    if not paths:
        return
    typer.echo(header)
    for path in paths:
        typer.echo(path)


def render_summary(outcome: RunOutcome) -> None:
    """Print the final counts and diagnostic path lists."""

    result = outcome.result
    if isinstance(result, GenerateResult):
        typer.echo(f"{result.good_files} files hashed, unable to read {result.bad_files} files.")
    else:
        _render_verify_report(result)


def _render_verify_report(result: VerifyReport) -> None:
    _echo_paths("The following files were not found:", result.missing_paths)
    _echo_paths("The following files failed verification:", result.failed_paths)
    _echo_paths("The following manifest lines could not be parsed:", result.malformed_lines)
    typer.echo(
        f"{result.verified} files verified, {result.failed} files failed, "
        f"{result.not_found} files not found."
    )
    if result.malformed:
        typer.echo(f"{result.malformed} manifest lines were malformed.")


@app.command()
def check(
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Directory to hash or verify (default: cwd)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML/TOML/JSON config file"),
    manifest: Optional[str] = typer.Option(None, "--manifest", "-m", help="Manifest file name"),
    no_pause: bool = typer.Option(False, "--no-pause", help="Exit without waiting for a key press"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and hide progress bars"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every file as it is hashed"),
    write_config: Optional[Path] = typer.Option(
        None, "--write-config", help="Write the effective configuration (YAML/JSON) to this path and exit"
    ),
) -> None:
    """Generate hashes.txt when absent, otherwise verify the tree against it."""

    level = logging.WARNING if quiet else logging.DEBUG if verbose else logging.INFO
    overrides: dict[str, object] = {}
    if root is not None:
        overrides["runtime.root"] = str(root)
    if manifest is not None:
        overrides["manifest.filename"] = manifest
    if no_pause:
        overrides["runtime.pause_on_exit"] = False
    if log_file is not None:
        overrides["runtime.log_path"] = str(log_file.resolve())

    try:
        cfg = load_config(config_path, overrides=overrides)
    except ConfigError as exc:
        configure_logging(level=level).error("%s", exc)
        raise typer.Exit(code=FATAL_EXIT_CODE)

    if write_config is not None:
        try:
            dest = dump_config(cfg, write_config)
        except (ConfigError, OSError) as exc:
            configure_logging(level=level).error("%s", exc)
            raise typer.Exit(code=FATAL_EXIT_CODE)
        typer.echo(f"Wrote {dest}")
        raise typer.Exit(code=0)

    logger = configure_logging(log_path=cfg.runtime.log_path, level=level)
    observer = ProgressObserver(
        min_size=cfg.hashing.chunk_size,
        enabled=cfg.runtime.progress and not quiet,
    )

    try:
        outcome = run(cfg, observer=observer)
    except (TreeHashError, OSError) as exc:
        logger.error("Run aborted: %s", exc)
        raise typer.Exit(code=FATAL_EXIT_CODE)

    render_summary(outcome)
    if cfg.runtime.pause_on_exit:
        typer.pause(info=PAUSE_PROMPT)
    raise typer.Exit(code=exit_code(outcome))


def main() -> None:
    app()


__all__ = ["ProgressObserver", "app", "main", "render_summary"]

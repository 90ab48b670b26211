"""CLI commands for patching generated AppDelegate files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import DEFAULT_CONFIG_NAME, LifecyclePatchConfig, load_config
from .errors import LifecyclePatchError
from .pipeline import FileReport, inspect_file, patch_file, resolve_target
from .schema import PatchReason
from .template import INJECTION_BLOCK, TEMPLATE_VERSION

APP_HELP = "Inject worklet cleanup lifecycle callbacks into a generated AppDelegate."

EXIT_ERROR = 1
EXIT_NOT_APPLIED = 2

_STATUS_LABELS = {
    PatchReason.ALREADY_PRESENT: "installed",
    PatchReason.PARTIALLY_PRESENT: "partial (one callback missing)",
    PatchReason.UNSUPPORTED_DIALECT: "unsupported dialect",
    PatchReason.NO_ANCHOR_FOUND: "missing (no insertion point found)",
}

app = typer.Typer(help=APP_HELP)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every engine decision."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(config: Optional[str]) -> LifecyclePatchConfig:
    try:
        return load_config(Path(config) if config else None)
    except LifecyclePatchError as error:
        typer.echo(f"Error: {error}")
        raise typer.Exit(code=EXIT_ERROR) from error


def _run(
    target: Path,
    config_data: LifecyclePatchConfig,
    *,
    dry_run: bool = False,
    quiet: bool = False,
) -> FileReport:
    try:
        path = resolve_target(target, config_data.project)
        if quiet:
            return inspect_file(path, config_data.patcher)
        return patch_file(path, config_data.patcher, dry_run=dry_run)
    except LifecyclePatchError as error:
        typer.echo(f"Error: {error}")
        raise typer.Exit(code=EXIT_ERROR) from error


@app.command()
def apply(
    target: Path = typer.Argument(
        Path("."),
        help="AppDelegate file, or project root containing the ios/ directory.",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Path to the configuration file (default: {DEFAULT_CONFIG_NAME} when present).",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the diff without writing the file."),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with status 2 when the callbacks could not be added.",
    ),
) -> None:
    """Add the lifecycle callbacks to the AppDelegate."""
    config_data = _load(config)
    report = _run(target, config_data, dry_run=dry_run)
    result = report.result

    if result.applied:
        if dry_run:
            typer.echo(report.diff, nl=False)
            typer.echo(f"Would patch {report.path} (strategy {result.strategy}).")
        else:
            typer.echo(f"Patched {report.path} (strategy {result.strategy}).")
        return

    if result.reason is PatchReason.ALREADY_PRESENT:
        typer.echo(f"{report.path} already has the lifecycle callbacks.")
        return

    typer.echo(f"Left {report.path} unchanged ({result.reason.value}).")
    if strict:
        raise typer.Exit(code=EXIT_NOT_APPLIED)


@app.command()
def status(
    target: Path = typer.Argument(
        Path("."),
        help="AppDelegate file, or project root containing the ios/ directory.",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Path to the configuration file (default: {DEFAULT_CONFIG_NAME} when present).",
    ),
) -> None:
    """Report whether the AppDelegate already carries the callbacks."""
    config_data = _load(config)
    report = _run(target, config_data, quiet=True)
    result = report.result
    if result.applied:
        label = f"missing (patchable via strategy {result.strategy})"
    else:
        label = _STATUS_LABELS[result.reason]
    typer.echo(f"{report.path}: {label}")


@app.command()
def template() -> None:
    """Print the Swift block that gets injected."""
    typer.echo(f"// template v{TEMPLATE_VERSION}")
    typer.echo(INJECTION_BLOCK.lstrip("\n"), nl=False)


if __name__ == "__main__":
    app()

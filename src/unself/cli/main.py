import logging
from pathlib import Path
from typing import Optional

import typer

from unself.app import UnselfApp
from unself.common import bus, needle as nexus
from unself.config import (
    ConfigError,
    ConflictPolicy,
    ParseErrorPolicy,
    load_config_from_path,
)
from unself.needle import L
from .rendering import CliRenderer

app = typer.Typer(
    name="unself",
    help=nexus.get(L.cli.app.description),
    add_completion=False,
)


@app.command()
def normalize_command(
    path: Optional[Path] = typer.Argument(
        None,
        exists=True,
        file_okay=False,
        dir_okay=True,
        help=nexus.get(L.cli.argument.path.help),
    ),
    on_conflict: Optional[ConflictPolicy] = typer.Option(
        None,
        "--on-conflict",
        case_sensitive=False,
        help=nexus.get(L.cli.option.on_conflict.help),
    ),
    on_parse_error: Optional[ParseErrorPolicy] = typer.Option(
        None,
        "--on-parse-error",
        case_sensitive=False,
        help=nexus.get(L.cli.option.on_parse_error.help),
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help=nexus.get(L.cli.option.dry_run.help)
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help=nexus.get(L.cli.option.verbose.help)
    ),
):
    # The CLI is the composition root for output: it picks the renderer.
    bus.set_renderer(CliRenderer(verbose=verbose))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root_path = path or Path.cwd()

    try:
        config = load_config_from_path(root_path)
    except ConfigError as e:
        bus.error(L.error.config, error=str(e))
        raise typer.Exit(code=1)

    # Command-line choices win over [tool.unself].
    if on_conflict is not None:
        config.on_conflict = on_conflict
    if on_parse_error is not None:
        config.on_parse_error = on_parse_error

    report = UnselfApp(root_path, config=config, dry_run=dry_run).run()
    if report.is_fatal:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()

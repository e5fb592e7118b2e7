"""gocover-cobertura CLI: convert Go coverage profiles to Cobertura XML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO

import click
from click.utils import LazyFile
from rich.logging import RichHandler

from gocover_cobertura import __version__
from gocover_cobertura.config import load_config, validate_config
from gocover_cobertura.converter import convert
from gocover_cobertura.errors import CoberturaError
from gocover_cobertura.reporters.terminal import console, reporter

logger = logging.getLogger(__name__)

_EPILOG = """\b
Note: run this in the root folder of the Go module (the directory with the
go.mod file) that was used to produce the coverage profile.

\b
Usage:
  go test -coverprofile=coverage.out ./...
  cat coverage.out | gocover-cobertura > coverage.xml
"""


def _setup_logging(*, verbose: bool) -> None:
    """Route log records to stderr through rich."""
    root = logging.getLogger("gocover_cobertura")
    root.handlers.clear()
    root.addHandler(RichHandler(console=console, show_path=False, show_time=False))
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False


def _prepare_output(out_file: IO[str]) -> None:
    """Create the parent directories of a named output file."""
    if not isinstance(out_file, LazyFile):
        return
    try:
        Path(out_file.name).parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        reporter.print_error(f"Failed to create output directory for {out_file.name!r}: {e}")
        raise click.Abort from e


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=_EPILOG,
)
@click.option(
    "-f",
    "in_file",
    type=click.File("r", encoding="utf-8"),
    default="-",
    help="Path to coverage file (default: stdin).",
)
@click.option(
    "-o",
    "out_file",
    type=click.File("w", encoding="utf-8", lazy=True),
    default="-",
    help="Path to output file (default: stdout).",
)
@click.option("--by-files", is_flag=True, help="Code coverage by file, not class.")
@click.option("--ignore-gen-files", is_flag=True, help="Ignore generated files.")
@click.option("--ignore-dirs", default=None, help="Ignore dirs matching this regexp.")
@click.option("--ignore-files", default=None, help="Ignore files matching this regexp.")
@click.option("--tags", default=None, help="Build tags to use when loading packages.")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="YAML config file (default: .gocover-cobertura.yml if present).",
)
@click.option("--summary", is_flag=True, help="Print a coverage summary table to stderr.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="gocover-cobertura")
def cli(
    in_file: IO[str],
    out_file: IO[str],
    *,
    by_files: bool,
    ignore_gen_files: bool,
    ignore_dirs: str | None,
    ignore_files: str | None,
    tags: str | None,
    config_path: str | None,
    summary: bool,
    verbose: bool,
) -> None:
    """Convert Go code coverage profiles to Cobertura XML format.

    By default it reads from stdin and writes to stdout. The output can be
    consumed by tools that expect Cobertura format, such as SonarQube or
    Jenkins.
    """
    _setup_logging(verbose=verbose)

    try:
        config = load_config(config_path).with_overrides(
            by_files=by_files or None,
            tags=tags,
            ignore_dirs=ignore_dirs,
            ignore_files=ignore_files,
            ignore_generated_files=ignore_gen_files or None,
        )
    except CoberturaError as e:
        reporter.print_error(str(e))
        raise click.Abort from e

    errors = validate_config(config)
    if errors:
        for error in errors:
            reporter.print_error(error)
        raise click.Abort

    _prepare_output(out_file)
    try:
        coverage = convert(in_file, out_file, config)
    except CoberturaError as e:
        reporter.print_error(f"code coverage conversion failed: {e}")
        raise click.Abort from e

    if summary:
        reporter.print_coverage_summary(coverage)
    if isinstance(out_file, LazyFile):
        reporter.print_success(f"Cobertura report written to {out_file.name}")


def main() -> None:
    """Console-script entry point."""
    cli()

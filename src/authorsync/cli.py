"""Command-line interface for authorsync.

All commands read an already-exported identity list (a file path or ``-``
for stdin) and write to stdout only.
"""

import functools
import json
import logging
import os
import sys
import traceback
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional, TextIO

import click

from ._version import __version__
from .config import Config, ConfigLoader
from .errors import AuthorsyncError
from .pipeline import analyze as run_analysis
from .ui.display import RichDisplay
from .utils.identity_io import INPUT_FORMATS, load_identities
from .utils.mailmap_parser import parse_mailmap, read_mailmap

logger = logging.getLogger(__name__)

DEBUG_ENV = "AUTHORSYNC_DEBUG"
LOG_FORMAT = "[%(levelname)s] %(name)s:%(lineno)d - %(message)s"


def debug_enabled() -> bool:
    """Whether AUTHORSYNC_DEBUG asks for full tracebacks (1, true or yes)."""
    return os.getenv(DEBUG_ENV, "").lower() in ("1", "true", "yes")


def configure_logging(level_name: str) -> None:
    """Send authorsync logs to stderr at the --log level, or silence them for "none"."""
    package_logger = logging.getLogger("authorsync")
    if level_name.lower() == "none":
        package_logger.setLevel(logging.CRITICAL)
        return

    level = getattr(logging, level_name.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
    package_logger.setLevel(level)
    logger.debug(f"Logging enabled at {level_name.upper()} level")


def _fail(error: Exception) -> None:
    click.echo(f"❌ Error: {error}", err=True)
    if debug_enabled():
        logger.error(f"Full traceback:\n{traceback.format_exc()}")
        click.echo(traceback.format_exc(), err=True)
    sys.exit(1)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn authorsync errors into a one-line message and exit code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except AuthorsyncError as e:
            _fail(e)

    return wrapper


def common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that analyzes an identity list."""
    func = click.option(
        "--log",
        type=click.Choice(["none", "INFO", "DEBUG"], case_sensitive=False),
        default="none",
        help="Enable logging with specified level (default: none)",
    )(func)
    func = click.option(
        "--input-format",
        "input_format",
        type=click.Choice(INPUT_FORMATS),
        default="auto",
        help="Format of INPUT (default: auto-detect)",
    )(func)
    func = click.option(
        "--confidence",
        type=click.FloatRange(0.0, 1.0),
        default=None,
        help="Minimum confidence 0-1 for clustering (overrides config)",
    )(func)
    func = click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="Path to YAML configuration file",
    )(func)
    return func


def _build_config(config_path: Optional[Path], confidence: Optional[float]) -> Config:
    config = ConfigLoader.load(config_path) if config_path else ConfigLoader.default()
    if confidence is not None:
        config.identity.min_confidence = confidence
    return config


def _dump_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.version_option(version=__version__, prog_name="authorsync")
@click.help_option("-h", "--help")
def cli() -> None:
    """authorsync - Detect duplicate git authors and generate .mailmap files.

    \b
    INPUT is an exported identity list: `git shortlog -sne` output,
    `git log --format='%aN|%aE'` output, or a YAML/JSON list of
    {name, email, commits}. Use '-' to read from stdin.

    \b
    EXAMPLES:
      git shortlog -sne --all | authorsync analyze -
      git shortlog -sne --all | authorsync generate - > .mailmap
    """


@cli.command(name="analyze")
@click.argument("input_file", metavar="INPUT", type=click.File("r", encoding="utf-8"))
@common_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--existing",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Existing .mailmap whose mappings are applied before analysis",
)
@handle_errors
def analyze(
    input_file: TextIO,
    config_path: Optional[Path],
    confidence: Optional[float],
    input_format: str,
    log: str,
    as_json: bool,
    existing: Optional[Path],
) -> None:
    """Find duplicate identities and show the proposed mappings."""
    configure_logging(log)
    config = _build_config(config_path, confidence)

    identities = load_identities(input_file, fmt=input_format)
    existing_mailmap = read_mailmap(existing) if existing else None
    result = run_analysis(identities, config, existing_mailmap=existing_mailmap)

    if as_json or config.output.format == "json":
        _dump_json(result.to_dict())
        return

    display = RichDisplay()
    display.show_header()
    if not result.identities:
        display.show_warning("No identities found in input")
        return

    display.show_analysis_summary(result.stats, result.cluster_stats)
    display.show_clusters(result.clusters, result.summary)
    if result.clusters:
        click.echo("\n💡 Run `authorsync generate` to create a .mailmap file")


@cli.command(name="generate")
@click.argument("input_file", metavar="INPUT", type=click.File("r", encoding="utf-8"))
@common_options
@click.option("--no-comments", is_flag=True, help="Omit comments from mailmap")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--existing",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Existing .mailmap whose mappings are applied before analysis",
)
@click.option("--quiet", "-q", is_flag=True, help="Minimal output")
@handle_errors
def generate(
    input_file: TextIO,
    config_path: Optional[Path],
    confidence: Optional[float],
    input_format: str,
    log: str,
    no_comments: bool,
    as_json: bool,
    existing: Optional[Path],
    quiet: bool,
) -> None:
    """Print .mailmap content for the duplicate identities in INPUT.

    \b
    Redirect the output to write the file:
      git shortlog -sne --all | authorsync generate - > .mailmap
    """
    configure_logging(log)
    config = _build_config(config_path, confidence)
    if no_comments:
        config.output.comments = False

    identities = load_identities(input_file, fmt=input_format)
    existing_mailmap = read_mailmap(existing) if existing else None
    result = run_analysis(identities, config, existing_mailmap=existing_mailmap)

    if as_json or config.output.format == "json":
        _dump_json(
            {
                "mailmap": result.mailmap,
                "clusters": [cluster.to_dict() for cluster in result.clusters],
            }
        )
        return

    if not result.clusters:
        if not quiet:
            click.echo("No duplicate identities found", err=True)
        return

    click.echo(result.mailmap, nl=False)
    if not quiet:
        stats = result.cluster_stats
        click.echo(
            f"✅ Consolidated {stats.aliases_consolidated} aliases into "
            f"{stats.clusters_found} canonical identities",
            err=True,
        )


@cli.command(name="list")
@click.argument("input_file", metavar="INPUT", type=click.File("r", encoding="utf-8"))
@click.option(
    "--input-format",
    "input_format",
    type=click.Choice(INPUT_FORMATS),
    default="auto",
    help="Format of INPUT (default: auto-detect)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@handle_errors
def list_identities(input_file: TextIO, input_format: str, as_json: bool) -> None:
    """List all unique author identities in INPUT."""
    identities = load_identities(input_file, fmt=input_format)

    if as_json:
        _dump_json([identity.to_dict() for identity in identities])
        return

    if not identities:
        click.echo("No identities found in input")
        return

    RichDisplay().show_identity_table(identities)


@cli.command(name="check-mailmap")
@click.argument("mailmap_file", metavar="MAILMAP", type=click.File("r", encoding="utf-8"))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@handle_errors
def check_mailmap(mailmap_file: TextIO, as_json: bool) -> None:
    """Parse an existing .mailmap and print the mappings it defines."""
    mappings = parse_mailmap(mailmap_file.read())

    if as_json:
        _dump_json({key: entry._asdict() for key, entry in mappings.items()})
        return

    if not mappings:
        click.echo("No mappings found")
        return

    for key, entry in mappings.items():
        alias_name, _, alias_email = key.partition("|")
        alias = f"{alias_name} <{alias_email}>" if alias_name else f"<{alias_email}>"
        click.echo(f"{alias} → {entry.name} <{entry.email}>")
    click.echo(f"\nTotal: {len(mappings)} mappings")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()

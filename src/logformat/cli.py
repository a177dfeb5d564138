"""CLI for logformat.

Renders log records from the command line, which is handy for shell
scripts that want to log in the same format as a vault process.

Example:
    $ logformat emit --level warn --module core/seal "seal check" status=sealed
    $ LOGXI_FORMAT=vault_json logformat emit "hello" user=alice
    $ logformat config
"""

import logging
import sys
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from logformat.config import FORMAT_ENV, JSON_STYLE_ALIASES, LEVEL_ENV, LoggingConfig
from logformat.exceptions import InvalidLevelError
from logformat.formatter import create_formatter
from logformat.levels import Level, parse_level
from logformat.logger import VaultLogger

console = Console(stderr=True)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def parse_pairs(tokens: Tuple[str, ...]) -> List[str]:
    """Flatten key=value tokens into alternating keys and values.

    A token without "=" is appended on its own, so a trailing bare key
    ends up paired with the unknown-value marker.
    """
    args: List[str] = []
    for token in tokens:
        if "=" in token:
            key, _, value = token.partition("=")
            args.extend((key, value))
        else:
            args.append(token)
    return args


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Vault-style log formatting tools."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


@cli.command()
@click.option(
    "-l", "--level",
    default=None,
    help=f"Record level name (default: ${LEVEL_ENV} or info)",
)
@click.option(
    "-m", "--module",
    default="",
    help="Module name, e.g. core/policy",
)
@click.option(
    "-f", "--format", "format_value",
    default=None,
    help=f"Output format; vault_json for JSON (default: ${FORMAT_ENV})",
)
@click.argument("message")
@click.argument("pairs", nargs=-1)
def emit(
    level: Optional[str],
    module: str,
    format_value: Optional[str],
    message: str,
    pairs: Tuple[str, ...],
) -> None:
    """Write one log record to stdout.

    PAIRS are key=value tokens rendered after the message.
    """
    config = LoggingConfig.from_env()
    try:
        level_code = parse_level(level if level is not None else config.level)
    except InvalidLevelError as e:
        raise click.BadParameter(str(e), param_hint="--level")
    if level_code in (Level.OFF, Level.ALL):
        raise click.BadParameter(
            f"{level_code.name.lower()} is a logger threshold, not a record level",
            param_hint="--level",
        )

    formatter = create_formatter(format_value if format_value is not None else config.format)
    if module:
        formatter = formatter.derive(module)
    logger.debug("Emitting with %r", formatter)

    vault_logger = VaultLogger(sys.stdout, level=level_code, formatter=formatter)
    vault_logger.log(level_code, message, *parse_pairs(pairs))


@cli.command("config")
def show_config() -> None:
    """Show the logging configuration resolved from the environment."""
    config = LoggingConfig.from_env()

    table = Table(title="Logging Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Source")
    table.add_column("Value", style="green")

    table.add_row("format", FORMAT_ENV, config.format or "-")
    table.add_row("style", "", config.style.value)
    table.add_row("level", LEVEL_ENV, config.level)
    table.add_row("json aliases", "", ", ".join(sorted(JSON_STYLE_ALIASES)))

    Console().print(table)


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()

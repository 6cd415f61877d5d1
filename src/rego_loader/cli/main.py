"""Main CLI entry point for rego-loader.

Defines the CLI group and registers all subcommands.

Commands:
    policies    - List policy files (optionally by action)
    libraries   - List all Rego files
    inspect     - Show metadata of one Rego file
    config      - Configuration commands
        show - Display effective configuration
        path - Show config file path

Usage:
    rego-loader -h, --help                    Show help message
    rego-loader -v, --version                 Show version
    rego-loader policies policy/              List policies
    rego-loader policies -a deny policy/      List policies with deny rules
    rego-loader libraries lib/                List all files
    rego-loader inspect policy/main.rego      Show one file's metadata

Subcommand help:
    rego-loader COMMAND -h                    Show help for a specific command
"""

import sys
from pathlib import Path

import click

from rego_loader import __version__
from rego_loader.config import LoaderConfig, get_config_path
from rego_loader.utils.logging import setup_logger

from .common import CliContext
from .commands.config import config
from .commands.policy import inspect, libraries, policies


class ReorderedGroup(click.Group):
    """Custom group that shows commands before custom help text."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
Examples:
  rego-loader policies policy/                    All policies
  rego-loader policies --action warn policy/      Only policies with warn rules
  rego-loader policies --json policy/ lib/        Machine-readable output
  rego-loader libraries --url https://example.com/lib.rego

A policy is a Rego file with at least one rule named ACTION[msg],
e.g. deny[msg] or violation[msg].
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config file (default: OS config location)",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, config_path: Path | None) -> None:
    """rego-loader: load Rego policies and select them by action."""
    if version:
        click.echo(f"rego-loader {__version__}")
        sys.exit(0)

    resolved_path = config_path or get_config_path()
    try:
        loaded_config = LoaderConfig.load_from_files(resolved_path)
    except ValueError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    log_file = Path(loaded_config.logging.log_file) if loaded_config.logging.log_file else None
    setup_logger(loaded_config.logging.log_level, log_file)

    ctx.obj = CliContext(config=loaded_config, config_path=resolved_path)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(policies)
cli.add_command(libraries)
cli.add_command(inspect)
cli.add_command(config)


def main() -> None:
    """CLI entry point."""
    cli()

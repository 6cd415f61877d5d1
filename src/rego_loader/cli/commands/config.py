"""Config command group for rego-loader CLI.

Provides configuration inspection subcommands.
"""

import json

import click

from rego_loader.cli.common import CliContext


@click.group()
def config() -> None:
    """Configuration commands."""
    pass


@config.command("show")
@click.pass_obj
def config_show(obj: CliContext) -> None:
    """Display the effective configuration.

    Shows defaults when no config file exists.
    """
    click.echo(json.dumps(obj.config.model_dump(), indent=2))


@config.command("path")
@click.pass_obj
def config_path_cmd(obj: CliContext) -> None:
    """Show config file path."""
    click.echo(str(obj.config_path))

    if not obj.config_path.exists():
        click.echo("(file does not exist - defaults are in use)", err=True)

"""Policy commands for rego-loader CLI.

Provides commands that load Rego sources and list or inspect them:
    policies    - files whose rules declare an action (optionally one action)
    libraries   - every file, regardless of actions
    inspect     - metadata of a single file
"""

import json
import sys
from pathlib import Path

import click

from rego_loader.cli.common import CliContext, echo_files, gather_sources
from rego_loader.exceptions import RegoLoaderError
from rego_loader.loader import load_file, load_libraries, load_policies_with_action

_PATHS_ARGUMENT = click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True, path_type=Path),
)
_URL_OPTION = click.option(
    "--url",
    "urls",
    multiple=True,
    help="Fetch a Rego file over HTTP (repeatable)",
)
_JSON_OPTION = click.option("--json", "as_json", is_flag=True, help="Output as JSON")


@click.command("policies")
@_PATHS_ARGUMENT
@click.option(
    "--action",
    "-a",
    default=None,
    help="Only files declaring this action (e.g. deny, warn). Default from config.",
)
@_URL_OPTION
@_JSON_OPTION
@click.pass_obj
def policies(
    obj: CliContext,
    paths: tuple[Path, ...],
    action: str | None,
    urls: tuple[str, ...],
    as_json: bool,
) -> None:
    """List policy files.

    A policy is a Rego file with at least one rule of the form
    ACTION[msg] (e.g. deny[msg], warn[msg]). Files and directories
    are searched recursively for .rego files.

    Exit codes:
        0: Sources loaded
        1: A source could not be read or parsed
    """
    if action is None:
        action = obj.config.default_action

    try:
        files = gather_sources(obj.config, paths, urls)
        selected = load_policies_with_action(files, action)
    except RegoLoaderError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    echo_files(selected, as_json, "policy", "policies")


@click.command("libraries")
@_PATHS_ARGUMENT
@_URL_OPTION
@_JSON_OPTION
@click.pass_obj
def libraries(obj: CliContext, paths: tuple[Path, ...], urls: tuple[str, ...], as_json: bool) -> None:
    """List all Rego files, whether or not they declare actions.

    Exit codes:
        0: Sources loaded
        1: A source could not be read or parsed
    """
    try:
        files = gather_sources(obj.config, paths, urls)
        loaded = load_libraries(files)
    except RegoLoaderError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    echo_files(loaded, as_json, "library", "libraries")


@click.command("inspect")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_JSON_OPTION
def inspect(path: Path, as_json: bool) -> None:
    """Show the metadata extracted from one Rego file.

    Exit codes:
        0: File parsed
        1: File could not be read or parsed
    """
    try:
        contents = path.read_text(encoding="utf-8")
        rego_file = load_file(str(path), contents)
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"✗ Cannot read {path}: {e}", err=True)
        sys.exit(1)
    except RegoLoaderError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(rego_file.model_dump(exclude={"contents"}), indent=2))
        return

    click.echo(f"✓ {rego_file.file_path}")
    click.echo(f"  Package: {rego_file.package_name}")
    if rego_file.import_packages:
        click.echo("  Imports:")
        for import_path in rego_file.import_packages:
            click.echo(f"    - {import_path}")
    actions = ", ".join(rego_file.rules_actions) if rego_file.rules_actions else "(none)"
    click.echo(f"  Actions: {actions}")
    comment_count = len(rego_file.comments)
    click.echo(f"  {comment_count} comment{'s' if comment_count != 1 else ''}")

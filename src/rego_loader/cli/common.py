"""Shared helpers for CLI commands.

Holds the per-invocation context object, source gathering, and output
formatting used by the policies/libraries/inspect commands.
"""

from __future__ import annotations

__all__ = [
    "CliContext",
    "echo_files",
    "gather_sources",
]

import json
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import click

from rego_loader.collect import collect_files, fetch_remote_files
from rego_loader.config import LoaderConfig
from rego_loader.loader import File


@dataclass
class CliContext:
    """Objects shared by all subcommands (stored in click's ctx.obj).

    Attributes:
        config: Effective configuration.
        config_path: Where the configuration was (or would be) loaded from.
    """

    config: LoaderConfig
    config_path: Path


def gather_sources(config: LoaderConfig, paths: Sequence[Path], urls: Sequence[str]) -> dict[str, str]:
    """Collect local and remote Rego sources into one mapping.

    Raises:
        click.UsageError: If neither paths nor URLs were given.
        PolicySourceError: If a source cannot be read or fetched.
    """
    if not paths and not urls:
        raise click.UsageError("Provide at least one PATH or --url.")

    files = collect_files(paths, extensions=config.extensions, exclude_patterns=config.exclude_patterns)
    if urls:
        files.update(fetch_remote_files(urls, timeout=config.remote.timeout))
    return files


def echo_files(rego_files: list[File], as_json: bool, singular: str, plural: str) -> None:
    """Print File records sorted by path.

    Args:
        rego_files: Records to print.
        as_json: Emit a JSON array (without file contents) instead of text.
        singular: Noun for the summary line when one file is shown.
        plural: Noun for the summary line otherwise.
    """
    ordered = sorted(rego_files, key=lambda f: f.file_path)

    if as_json:
        data = [f.model_dump(exclude={"contents"}) for f in ordered]
        click.echo(json.dumps(data, indent=2))
        return

    for rego_file in ordered:
        click.echo(rego_file.file_path)
        click.echo(f"  package: {rego_file.package_name}")
        if rego_file.rules_actions:
            click.echo(f"  actions: {', '.join(rego_file.rules_actions)}")

    count = len(ordered)
    click.echo(f"{count} {singular if count == 1 else plural}")

"""Batch loader - load many Rego files and select them by action.

Retrieval modes:
    load_libraries              - every file, as importable reference material
    load_policies               - files with at least one rule action
    load_policies_with_action   - files declaring one specific action

All modes run the same load pass. Loading is all-or-nothing: if any file
fails to parse, the whole batch raises and nothing is returned.

Result order follows the iteration order of the input mapping and carries
no meaning. Callers that need a stable order should sort, e.g. by
File.file_path.
"""

from __future__ import annotations

__all__ = [
    "filter_by_action",
    "load_all",
    "load_libraries",
    "load_policies",
    "load_policies_with_action",
]

from collections.abc import Iterable, Mapping

from rego_loader.exceptions import RegoSyntaxError
from rego_loader.loader.models import File
from rego_loader.loader.module import load_file
from rego_loader.rego.parser import ModuleParser, RegoParser
from rego_loader.utils.logging import get_logger

_logger = get_logger("loader")


def load_all(files: Mapping[str, str], parser: ModuleParser | None = None) -> list[File]:
    """Load every file in a path -> contents mapping.

    Args:
        files: Mapping of file identifier to Rego source text.
        parser: Parser to use. Defaults to the built-in RegoParser.

    Returns:
        One File per mapping entry.

    Raises:
        RegoSyntaxError: If any file fails to parse. The error names the
            offending file; no File records are returned.
    """
    parser = parser or RegoParser()
    rego_files: list[File] = []

    for path, contents in files.items():
        try:
            rego_files.append(load_file(path, contents, parser=parser))
        except RegoSyntaxError as e:
            _logger.error(
                {
                    "event": "rego_parse_failed",
                    "file_path": e.path,
                    "line": e.line,
                    "error": e.detail,
                }
            )
            raise e.with_context("new rego file").with_context("load rego files") from e

    _logger.info({"event": "rego_files_loaded", "count": len(rego_files)})
    return rego_files


def filter_by_action(rego_files: Iterable[File], action: str = "") -> list[File]:
    """Select the policies among already loaded files.

    Args:
        rego_files: Loaded files.
        action: Action tag to require. Empty string selects every file
            that declares any action.

    Returns:
        Matching files, each at most once, in input order.
    """
    if action == "":
        return [rego_file for rego_file in rego_files if rego_file.is_policy]
    return [rego_file for rego_file in rego_files if rego_file.has_action(action)]


def load_libraries(files: Mapping[str, str], parser: ModuleParser | None = None) -> list[File]:
    """Load all files regardless of whether they declare actions."""
    return load_all(files, parser=parser)


def load_policies(files: Mapping[str, str], parser: ModuleParser | None = None) -> list[File]:
    """Load only the files whose rules declare at least one action.

    Raises:
        RegoSyntaxError: If any file fails to parse.
    """
    return load_policies_with_action(files, "", parser=parser)


def load_policies_with_action(
    files: Mapping[str, str],
    action: str,
    parser: ModuleParser | None = None,
) -> list[File]:
    """Load only the files declaring a given action.

    Args:
        files: Mapping of file identifier to Rego source text.
        action: Action tag that must appear in File.rules_actions (exact
            match). Empty string behaves like load_policies.
        parser: Parser to use. Defaults to the built-in RegoParser.

    Returns:
        Matching files.

    Raises:
        RegoSyntaxError: If any file fails to parse.
    """
    rego_files = load_all(files, parser=parser)
    policies = filter_by_action(rego_files, action)

    _logger.info(
        {
            "event": "policies_filtered",
            "action": action or None,
            "loaded": len(rego_files),
            "selected": len(policies),
        }
    )
    return policies

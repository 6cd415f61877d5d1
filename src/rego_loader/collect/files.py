"""Collect Rego sources from the local filesystem.

Builds the path -> contents mapping the loader consumes. Directories are
walked recursively in sorted order; hidden directories are skipped.
Files named explicitly on input are always included, even if their
suffix or name would otherwise be filtered out.
"""

from __future__ import annotations

__all__ = [
    "collect_files",
]

import fnmatch
import os
from collections.abc import Iterable, Sequence
from pathlib import Path

from rego_loader.constants import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_REGO_EXTENSIONS
from rego_loader.exceptions import PolicySourceError
from rego_loader.utils.logging import get_logger

_logger = get_logger("collect")


def _is_candidate(path: Path, extensions: Sequence[str], exclude_patterns: Sequence[str]) -> bool:
    if path.suffix not in extensions:
        return False
    return not any(fnmatch.fnmatch(path.name, pattern) for pattern in exclude_patterns)


def _walk(directory: Path, extensions: Sequence[str], exclude_patterns: Sequence[str]) -> list[Path]:
    found: list[Path] = []
    for root, dirs, names in os.walk(directory):
        # Prune in place so os.walk does not descend into hidden dirs
        dirs[:] = sorted(d for d in dirs if not d.startswith("."))
        for name in sorted(names):
            candidate = Path(root) / name
            if _is_candidate(candidate, extensions, exclude_patterns):
                found.append(candidate)
    return found


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise PolicySourceError(str(path), f"not valid UTF-8: {e}") from e
    except OSError as e:
        raise PolicySourceError(str(path), str(e)) from e


def collect_files(
    paths: Iterable[str | Path],
    extensions: Sequence[str] = DEFAULT_REGO_EXTENSIONS,
    exclude_patterns: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
) -> dict[str, str]:
    """Read Rego sources from files and directories.

    Args:
        paths: Files and/or directories to collect from.
        extensions: Suffixes kept when walking directories.
        exclude_patterns: fnmatch patterns of file names skipped when
            walking directories.

    Returns:
        Mapping of file path (as given, joined with walked names) to
        file contents.

    Raises:
        PolicySourceError: If a path does not exist or cannot be read.
    """
    files: dict[str, str] = {}

    for raw_path in paths:
        path = Path(raw_path)
        if path.is_dir():
            candidates = _walk(path, extensions, exclude_patterns)
        elif path.is_file():
            candidates = [path]
        else:
            raise PolicySourceError(str(path), "no such file or directory")

        for candidate in candidates:
            key = str(candidate)
            if key not in files:
                files[key] = _read_text(candidate)

    _logger.info({"event": "policy_sources_collected", "count": len(files)})
    return files

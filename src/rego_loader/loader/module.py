"""Module loader - turn one Rego source text into a File record.

Pure transformation: no file or network access, no shared state.
The same (path, contents) always produces an equal File.
"""

from __future__ import annotations

__all__ = [
    "load_file",
]

from rego_loader.exceptions import RegoSyntaxError
from rego_loader.loader.classifier import classify_rules
from rego_loader.loader.models import File
from rego_loader.rego.parser import ModuleParser, RegoParser
from rego_loader.utils.logging import get_logger

_logger = get_logger("loader")


def load_file(path: str, contents: str, parser: ModuleParser | None = None) -> File:
    """Parse a Rego file and build its File record.

    Args:
        path: Identifier of the file, used for FilePath and error messages.
        contents: Rego source text.
        parser: Parser to use. Defaults to the built-in RegoParser.

    Returns:
        File with package, imports, comments, contents and rule actions.

    Raises:
        RegoSyntaxError: If the contents are not valid Rego. No partial
            File is produced.
    """
    parser = parser or RegoParser()

    try:
        module = parser.parse_module(path, contents)
    except RegoSyntaxError as e:
        raise e.with_context("parse module") from e

    rego_file = File(
        file_path=path,
        package_name=str(module.package.path),
        import_packages=tuple(str(imp.path) for imp in module.imports),
        contents=contents,
        rules_actions=tuple(classify_rules(module.rules)),
        comments=tuple(comment.text for comment in module.comments),
    )

    _logger.debug(
        {
            "event": "rego_file_loaded",
            "file_path": path,
            "package_name": rego_file.package_name,
            "rules_count": len(module.rules),
            "rules_actions": rego_file.rules_actions,
        }
    )
    return rego_file

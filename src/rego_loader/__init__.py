"""rego-loader: load Rego policy files and classify them by action.

Public API:
    load_file                   - Parse one file into a File record
    load_all / load_libraries   - Load every file in a path -> contents mapping
    load_policies               - Only files whose rules declare an action
    load_policies_with_action   - Only files declaring a specific action
"""

__version__ = "0.3.0"

from rego_loader.exceptions import PolicySourceError, RegoLoaderError, RegoSyntaxError
from rego_loader.loader import (
    File,
    classify_rules,
    filter_by_action,
    load_all,
    load_file,
    load_libraries,
    load_policies,
    load_policies_with_action,
)

__all__ = [
    "__version__",
    # Records
    "File",
    # Loading
    "load_file",
    "load_all",
    "load_libraries",
    "load_policies",
    "load_policies_with_action",
    # Classification
    "classify_rules",
    "filter_by_action",
    # Exceptions
    "RegoLoaderError",
    "RegoSyntaxError",
    "PolicySourceError",
]

"""Rego file loading and action classification.

Structure:
    models.py       - File record
    classifier.py   - Action tags from rule heads
    module.py       - load_file(): one source text -> File
    batch.py        - load_all / load_libraries / load_policies /
                      load_policies_with_action, filter_by_action

Reading files from disk or fetching them remotely is in rego_loader.collect.
"""

from rego_loader.loader.batch import (
    filter_by_action,
    load_all,
    load_libraries,
    load_policies,
    load_policies_with_action,
)
from rego_loader.loader.classifier import RULE_ACTION_PATTERN, classify_rules, rule_action
from rego_loader.loader.models import File
from rego_loader.loader.module import load_file

__all__ = [
    # Record
    "File",
    # Classifier
    "RULE_ACTION_PATTERN",
    "classify_rules",
    "rule_action",
    # Loading
    "load_file",
    "load_all",
    "load_libraries",
    "load_policies",
    "load_policies_with_action",
    "filter_by_action",
]

"""Rule classifier - derive action tags from rule heads.

A rule declares an enforcement action by the ``action[msg ...]`` naming
convention:

    deny[msg] { ... }                   -> "deny"
    warn[msg] = details { ... }         -> "warn"
    violation contains msg if { ... }   -> "violation"  (renders violation[msg])
    allow { ... }                       -> no tag       (renders allow = true)

The match runs against the canonical rendering of each head, not the
source text, so formatting differences in the source do not matter.
Rules that express the same intent through other shapes are not tagged.
"""

from __future__ import annotations

__all__ = [
    "RULE_ACTION_PATTERN",
    "classify_rules",
    "rule_action",
]

import re
from collections.abc import Sequence

from rego_loader.rego.ast import Rule

# Lowercase action name immediately followed by "[msg"
RULE_ACTION_PATTERN: re.Pattern[str] = re.compile(r"^\s*([a-z]+)\[msg")


def rule_action(rule: Rule) -> str | None:
    """Return the action tag of a single rule, or None if it has none."""
    match = RULE_ACTION_PATTERN.match(str(rule.head))
    if match is None:
        return None
    return match.group(1)


def classify_rules(rules: Sequence[Rule]) -> list[str]:
    """Collect the action tags declared by a module's rules.

    Args:
        rules: Rules in declaration order.

    Returns:
        Action tags in declaration order, duplicates kept. Rules that do
        not follow the convention contribute nothing.
    """
    actions: list[str] = []
    for rule in rules:
        action = rule_action(rule)
        if action is not None:
            actions.append(action)
    return actions

"""File record produced by the loader.

One File is built per (path, contents) pair and never mutated afterwards.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class File(BaseModel):
    """A parsed Rego file with the metadata used for policy selection.

    Attributes:
        file_path: Identifier of the source file (opaque, for diagnostics).
        package_name: Package the module declares, rooted at data
            (e.g. "data.kubernetes.admission").
        import_packages: Rendered import paths in declaration order.
        contents: Original source text, kept verbatim for later evaluation.
        rules_actions: Action tags of the module's rules in declaration
            order. May contain duplicates.
        comments: Comment texts in source order (text after "#").
    """

    file_path: str
    package_name: str
    import_packages: tuple[str, ...] = ()
    contents: str
    rules_actions: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def is_policy(self) -> bool:
        """True when at least one rule declares an action."""
        return bool(self.rules_actions)

    def has_action(self, action: str) -> bool:
        """Check whether an action tag is declared (exact membership)."""
        return action in self.rules_actions

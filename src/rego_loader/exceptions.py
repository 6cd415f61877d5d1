"""Exceptions raised by rego-loader.

Hierarchy:
    RegoLoaderError
    ├── RegoSyntaxError     - the Rego parser rejected a file
    └── PolicySourceError   - a policy source could not be collected

Errors are wrapped with context at each call boundary and re-raised,
never swallowed. A malformed file aborts the whole batch it belongs to.
"""

from __future__ import annotations

__all__ = [
    "RegoLoaderError",
    "RegoSyntaxError",
    "PolicySourceError",
]


class RegoLoaderError(Exception):
    """Base class for all rego-loader errors."""


class RegoSyntaxError(RegoLoaderError):
    """Raised when a Rego source file cannot be parsed.

    Attributes:
        path: Identifier of the offending file.
        line: 1-based line of the error (0 if unknown).
        column: 1-based column of the error (0 if unknown).
        detail: Parser diagnostic without location or context.
        context: Operations the error passed through, outermost first.
    """

    def __init__(
        self,
        path: str,
        detail: str,
        line: int = 0,
        column: int = 0,
        context: tuple[str, ...] = (),
    ) -> None:
        self.path = path
        self.detail = detail
        self.line = line
        self.column = column
        self.context = context
        super().__init__(self._format())

    def _format(self) -> str:
        location = f"{self.path}:{self.line}" if self.line else self.path
        message = f"{location}: rego_parse_error: {self.detail}"
        return "".join(f"{op}: " for op in self.context) + message

    def with_context(self, operation: str) -> RegoSyntaxError:
        """Return a copy of this error with an outer operation added.

        Args:
            operation: Name of the operation the error is crossing,
                e.g. "load rego files".

        Returns:
            New RegoSyntaxError keeping path and diagnostic.
        """
        return RegoSyntaxError(
            self.path,
            self.detail,
            line=self.line,
            column=self.column,
            context=(operation, *self.context),
        )


class PolicySourceError(RegoLoaderError):
    """Raised when policy sources cannot be read from disk or fetched."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot load policy source {source}: {reason}")

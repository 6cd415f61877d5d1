"""Rego syntax tree.

All nodes are frozen dataclasses and render back to canonical Rego text
through ``__str__``. The canonical form is what the rule classifier
matches against, so rendering must be stable:

- strings are JSON-quoted
- ref keys that are identifier-like strings use dot notation,
  everything else uses brackets (``input.a["b-c"][i]``)
- the empty set renders as ``set()``
- body-only rules carry the implicit value ``true``
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Union

__all__ = [
    "Location",
    "Comment",
    "String",
    "Number",
    "Boolean",
    "Null",
    "Var",
    "Ref",
    "ArrayTerm",
    "ObjectTerm",
    "SetTerm",
    "Call",
    "BinaryOp",
    "UnaryMinus",
    "ArrayComprehension",
    "SetComprehension",
    "ObjectComprehension",
    "Term",
    "With",
    "Expr",
    "SomeDecl",
    "Every",
    "Literal",
    "Package",
    "Import",
    "Head",
    "Rule",
    "Module",
]

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Binding strength of infix operators (higher binds tighter)
PRECEDENCE: dict[str, int] = {
    ":=": 1,
    "=": 1,
    "in": 2,
    "==": 3,
    "!=": 3,
    "<": 3,
    "<=": 3,
    ">": 3,
    ">=": 3,
    "|": 4,
    "&": 5,
    "+": 6,
    "-": 6,
    "*": 7,
    "/": 7,
    "%": 7,
}


@dataclass(frozen=True)
class Location:
    """Position of a node in its source file (1-based)."""

    line: int
    column: int


@dataclass(frozen=True)
class Comment:
    """A source comment.

    Attributes:
        text: Everything after the ``#`` marker up to end of line, untrimmed.
        location: Where the ``#`` appeared.
    """

    text: str
    location: Location

    def __str__(self) -> str:
        return f"#{self.text}"


# =============================================================================
# Terms
# =============================================================================


@dataclass(frozen=True)
class String:
    value: str

    def __str__(self) -> str:
        return json.dumps(self.value, ensure_ascii=False)


@dataclass(frozen=True)
class Number:
    """Numeric literal, kept as written."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Boolean:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Null:
    def __str__(self) -> str:
        return "null"


@dataclass(frozen=True)
class Var:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Ref:
    """Reference such as ``data.lib.x`` or ``input.items[i].name``.

    The first term is the ref head (usually a Var); the remaining terms
    are the keys being accessed.
    """

    terms: tuple[Term, ...]

    def __str__(self) -> str:
        head, *rest = self.terms
        parts = [str(head)]
        for term in rest:
            if isinstance(term, String) and _IDENT_RE.match(term.value):
                parts.append(f".{term.value}")
            else:
                parts.append(f"[{term}]")
        return "".join(parts)

    def __len__(self) -> int:
        return len(self.terms)


@dataclass(frozen=True)
class ArrayTerm:
    items: tuple[Term, ...]

    def __str__(self) -> str:
        return "[" + ", ".join(str(item) for item in self.items) + "]"


@dataclass(frozen=True)
class ObjectTerm:
    items: tuple[tuple[Term, Term], ...]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{key}: {value}" for key, value in self.items) + "}"


@dataclass(frozen=True)
class SetTerm:
    items: tuple[Term, ...]

    def __str__(self) -> str:
        if not self.items:
            return "set()"
        return "{" + ", ".join(str(item) for item in self.items) + "}"


@dataclass(frozen=True)
class Call:
    operator: Term
    args: tuple[Term, ...]

    def __str__(self) -> str:
        return f"{self.operator}(" + ", ".join(str(arg) for arg in self.args) + ")"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: Term
    right: Term

    def __str__(self) -> str:
        precedence = PRECEDENCE[self.op]
        left = _wrap(self.left, precedence, right_side=False)
        right = _wrap(self.right, precedence, right_side=True)
        return f"{left} {self.op} {right}"


@dataclass(frozen=True)
class UnaryMinus:
    operand: Term

    def __str__(self) -> str:
        return f"-{_wrap(self.operand, max(PRECEDENCE.values()) + 1, right_side=True)}"


@dataclass(frozen=True)
class ArrayComprehension:
    term: Term
    body: tuple[Literal, ...]

    def __str__(self) -> str:
        return f"[{self.term} | {render_body(self.body)}]"


@dataclass(frozen=True)
class SetComprehension:
    term: Term
    body: tuple[Literal, ...]

    def __str__(self) -> str:
        return f"{{{self.term} | {render_body(self.body)}}}"


@dataclass(frozen=True)
class ObjectComprehension:
    key: Term
    value: Term
    body: tuple[Literal, ...]

    def __str__(self) -> str:
        return f"{{{self.key}: {self.value} | {render_body(self.body)}}}"


Term = Union[
    String,
    Number,
    Boolean,
    Null,
    Var,
    Ref,
    ArrayTerm,
    ObjectTerm,
    SetTerm,
    Call,
    BinaryOp,
    UnaryMinus,
    ArrayComprehension,
    SetComprehension,
    ObjectComprehension,
]


def _wrap(term: Term, parent_precedence: int, right_side: bool) -> str:
    """Render an operand, adding parentheses where precedence requires it."""
    if isinstance(term, BinaryOp):
        precedence = PRECEDENCE[term.op]
        if precedence < parent_precedence or (right_side and precedence == parent_precedence):
            return f"({term})"
    return str(term)


# =============================================================================
# Body literals
# =============================================================================


@dataclass(frozen=True)
class With:
    target: Term
    value: Term

    def __str__(self) -> str:
        return f"with {self.target} as {self.value}"


@dataclass(frozen=True)
class Expr:
    """Expression literal, optionally negated and with ``with`` modifiers."""

    term: Term
    negated: bool = False
    modifiers: tuple[With, ...] = ()

    def __str__(self) -> str:
        text = f"not {self.term}" if self.negated else str(self.term)
        for modifier in self.modifiers:
            text += f" {modifier}"
        return text


@dataclass(frozen=True)
class SomeDecl:
    """``some x, y`` or ``some k, v in collection``."""

    symbols: tuple[Term, ...]
    collection: Term | None = None

    def __str__(self) -> str:
        symbols = ", ".join(str(symbol) for symbol in self.symbols)
        if self.collection is None:
            return f"some {symbols}"
        return f"some {symbols} in {self.collection}"


@dataclass(frozen=True)
class Every:
    key: Term | None
    value: Term
    domain: Term
    body: tuple[Literal, ...]

    def __str__(self) -> str:
        symbols = f"{self.key}, {self.value}" if self.key is not None else str(self.value)
        return f"every {symbols} in {self.domain} {{ {render_body(self.body)} }}"


Literal = Union[Expr, SomeDecl, Every]


def render_body(body: tuple[Literal, ...]) -> str:
    return "; ".join(str(literal) for literal in body)


# =============================================================================
# Module structure
# =============================================================================


@dataclass(frozen=True)
class Package:
    """Package clause. ``path`` is rooted at ``data`` (``data.a.b``)."""

    path: Ref
    location: Location

    def __str__(self) -> str:
        # The data root is implicit in source form
        return "package " + str(Ref((Var(self.path.terms[1].value),) + self.path.terms[2:]))


@dataclass(frozen=True)
class Import:
    path: Ref
    alias: str | None
    location: Location

    def __str__(self) -> str:
        if self.alias:
            return f"import {self.path} as {self.alias}"
        return f"import {self.path}"


@dataclass(frozen=True)
class Head:
    """Rule head.

    Attributes:
        reference: The rule's name as a ref (``deny``, ``a.b.c``).
        args: Function arguments, None for non-function rules.
        key: Key term of partial set/object rules (``deny[msg]``).
        value: Value term; body-only complete rules get ``true``.
        assign: True when the value was bound with ``:=``.
    """

    reference: Ref
    args: tuple[Term, ...] | None = None
    key: Term | None = None
    value: Term | None = None
    assign: bool = False

    @property
    def name(self) -> str:
        return str(self.reference.terms[0])

    def __str__(self) -> str:
        if self.args is not None:
            text = f"{self.reference}(" + ", ".join(str(arg) for arg in self.args) + ")"
        elif self.key is not None and (len(self.reference) == 1 or self.value is not None):
            text = f"{self.reference}[{self.key}]"
        else:
            text = str(self.reference)

        if self.value is not None:
            text += (" := " if self.assign else " = ") + str(self.value)
        elif self.key is not None and len(self.reference) > 1:
            text += f" contains {self.key}"
        return text


@dataclass(frozen=True)
class Rule:
    """A rule: head, body, and optional ``else`` chain."""

    head: Head
    body: tuple[Literal, ...]
    location: Location
    default: bool = False
    else_rule: Rule | None = None

    def __str__(self) -> str:
        prefix = "default " if self.default else ""
        if not self.body:
            return f"{prefix}{self.head}"
        text = f"{prefix}{self.head} {{ {render_body(self.body)} }}"
        else_rule = self.else_rule
        while else_rule is not None:
            value = else_rule.head.value
            text += f" else = {value} {{ {render_body(else_rule.body)} }}"
            else_rule = else_rule.else_rule
        return text


@dataclass(frozen=True)
class Module:
    """A parsed Rego file."""

    package: Package
    imports: tuple[Import, ...] = ()
    rules: tuple[Rule, ...] = ()
    comments: tuple[Comment, ...] = ()

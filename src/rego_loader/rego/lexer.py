"""Tokenizer for Rego source text.

Produces a flat token list for the parser plus the comments found along
the way. Newlines are kept as tokens because they separate expressions
inside rule bodies; every other kind of whitespace is dropped.

Words are always emitted as "ident" tokens. Whether a word acts as a
keyword (not, with, some, ...) is decided by the parser, since several
of them (in, if, contains, every) are only keywords in some positions.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from rego_loader.exceptions import RegoSyntaxError
from rego_loader.rego.ast import Comment, Location

__all__ = [
    "Token",
    "tokenize",
]

_TOKEN_RE = re.compile(
    r"""
      (?P<newline>\n)
    | (?P<space>[ \t\r\f]+)
    | (?P<comment>\#[^\n]*)
    | (?P<number>\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
    | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<string>"(?:[^"\\\n]|\\.)*")
    | (?P<raw_string>`[^`]*`)
    | (?P<op>:=|==|!=|<=|>=|[<>=+\-*/%&|.,;:()\[\]{}])
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        kind: One of "ident", "number", "string", "op", "newline", "eof".
        value: Token text. For strings this is the decoded value.
        line: 1-based line number.
        column: 1-based column number.
    """

    kind: str
    value: str
    line: int
    column: int

    def describe(self) -> str:
        """Short description used in parse error messages."""
        if self.kind == "eof":
            return "EOF"
        if self.kind == "newline":
            return "newline"
        if self.kind == "string":
            return "string"
        if self.kind == "number":
            return "number"
        if self.kind == "ident":
            return f"ident {self.value}"
        return self.value


def tokenize(path: str, text: str) -> tuple[list[Token], list[Comment]]:
    """Split Rego source into tokens and comments.

    Args:
        path: File identifier, used in error messages.
        text: Raw source text.

    Returns:
        Tuple of (tokens, comments). The token list always ends with "eof".

    Raises:
        RegoSyntaxError: On unterminated strings or illegal characters.
    """
    tokens: list[Token] = []
    comments: list[Comment] = []
    line = 1
    line_start = 0
    pos = 0

    while pos < len(text):
        column = pos - line_start + 1
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            char = text[pos]
            if char == '"':
                raise RegoSyntaxError(path, "non-terminated string", line, column)
            if char == "`":
                raise RegoSyntaxError(path, "non-terminated raw string", line, column)
            raise RegoSyntaxError(path, f"illegal token {char!r}", line, column)

        kind = match.lastgroup
        value = match.group()
        pos = match.end()

        if kind == "newline":
            tokens.append(Token("newline", value, line, column))
            line += 1
            line_start = pos
        elif kind == "space":
            continue
        elif kind == "comment":
            comments.append(Comment(text=value[1:].removesuffix("\r"), location=Location(line, column)))
        elif kind == "string":
            try:
                decoded = json.loads(value)
            except ValueError:
                raise RegoSyntaxError(path, "invalid string literal", line, column) from None
            tokens.append(Token("string", decoded, line, column))
        elif kind == "raw_string":
            tokens.append(Token("string", value[1:-1], line, column))
            # Raw strings may span lines
            newlines = value.count("\n")
            if newlines:
                line += newlines
                line_start = match.start() + value.rindex("\n") + 1
        else:
            tokens.append(Token(kind, value, line, column))

    tokens.append(Token("eof", "", line, pos - line_start + 1))
    return tokens, comments

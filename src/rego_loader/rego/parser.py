"""Recursive-descent parser for Rego modules.

Parses one source file into a Module (package, imports, rules, comments).
The first syntax error aborts parsing with RegoSyntaxError carrying the
file path, line, column and a diagnostic in the "unexpected X token"
style used by OPA.

Grammar summary:
    module    = package { import | rule }
    package   = "package" ref
    import    = "import" ref [ "as" var ]
    rule      = [ "default" ] head [ "if" ] [ body ] { else } | head body { body }
    head      = ref [ "(" args ")" ] [ "contains" term ] [ ( "=" | ":=" ) term ]
    body      = "{" literal { ( ";" | newline ) literal } "}"
    literal   = some | every | [ "not" ] expr { "with" term "as" term }

Usage:
    module = parse_module("policy.rego", text)
    for rule in module.rules:
        print(rule.head)
"""

from __future__ import annotations

__all__ = [
    "ModuleParser",
    "RegoParser",
    "parse_module",
]

from typing import NoReturn, Protocol

from rego_loader.exceptions import RegoSyntaxError
from rego_loader.rego.ast import (
    PRECEDENCE,
    ArrayComprehension,
    ArrayTerm,
    BinaryOp,
    Boolean,
    Call,
    Comment,
    Every,
    Expr,
    Head,
    Import,
    Literal,
    Location,
    Module,
    Null,
    Number,
    ObjectComprehension,
    ObjectTerm,
    Package,
    Ref,
    Rule,
    SetComprehension,
    SetTerm,
    SomeDecl,
    String,
    Term,
    UnaryMinus,
    Var,
    With,
)
from rego_loader.rego.lexer import Token, tokenize

# Words that can never be used as variables
_RESERVED: frozenset[str] = frozenset(
    {"package", "import", "as", "default", "else", "not", "with", "some", "true", "false", "null"}
)

# Roots an import path may start from
_IMPORT_ROOTS: frozenset[str] = frozenset({"data", "input", "future", "rego"})


class ModuleParser(Protocol):
    """Capability the module loader needs from a Rego parser.

    Any object with a compatible ``parse_module`` can be passed to the
    loader in place of the built-in RegoParser.
    """

    def parse_module(self, path: str, text: str) -> Module:
        """Parse text into a Module, raising RegoSyntaxError on bad input."""
        ...


class RegoParser:
    """Built-in Rego parser."""

    def parse_module(self, path: str, text: str) -> Module:
        """Parse a Rego source file.

        Args:
            path: File identifier for error messages.
            text: Rego source text.

        Returns:
            Parsed Module.

        Raises:
            RegoSyntaxError: If the text is not valid Rego.
        """
        tokens, comments = tokenize(path, text)
        return _Parser(path, tokens, comments).parse()


def parse_module(path: str, text: str) -> Module:
    """Parse a Rego source file with the built-in parser."""
    return RegoParser().parse_module(path, text)


class _Parser:
    """Parser state for a single module."""

    def __init__(self, path: str, tokens: list[Token], comments: list[Comment]) -> None:
        self._path = path
        self._tokens = tokens
        self._comments = comments
        self._pos = 0

    # -------------------------------------------------------------------------
    # Token helpers
    # -------------------------------------------------------------------------

    @property
    def _tok(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.kind != "eof":
            self._pos += 1
        return tok

    def _is_op(self, value: str) -> bool:
        return self._tok.kind == "op" and self._tok.value == value

    def _is_word(self, value: str) -> bool:
        return self._tok.kind == "ident" and self._tok.value == value

    def _accept_op(self, value: str) -> bool:
        if self._is_op(value):
            self._advance()
            return True
        return False

    def _expect_op(self, value: str) -> Token:
        if not self._is_op(value):
            self._fail(f"expected {value}")
        return self._advance()

    def _skip_newlines(self) -> None:
        while self._tok.kind == "newline":
            self._advance()

    def _skip_separators(self) -> None:
        while self._tok.kind == "newline" or self._is_op(";"):
            self._advance()

    def _next_significant(self) -> Token:
        """Return the next token that is not a newline, without consuming."""
        offset = 0
        while self._peek(offset).kind == "newline":
            offset += 1
        return self._peek(offset)

    def _fail(self, expected: str | None = None, tok: Token | None = None) -> NoReturn:
        tok = tok or self._tok
        detail = f"unexpected {tok.describe()} token"
        if expected:
            detail += f": {expected}"
        raise RegoSyntaxError(self._path, detail, tok.line, tok.column)

    def _location(self, tok: Token) -> Location:
        return Location(tok.line, tok.column)

    # -------------------------------------------------------------------------
    # Module level
    # -------------------------------------------------------------------------

    def parse(self) -> Module:
        self._skip_separators()
        if self._tok.kind == "eof":
            raise RegoSyntaxError(self._path, "empty module")
        if not self._is_word("package"):
            self._fail("expected package")
        package = self._parse_package()

        imports: list[Import] = []
        rules: list[Rule] = []
        self._end_statement()
        while self._tok.kind != "eof":
            if self._is_word("package"):
                self._fail("package must be the first statement")
            elif self._is_word("import"):
                imports.append(self._parse_import())
            else:
                rules.extend(self._parse_rules())
            self._end_statement()

        return Module(
            package=package,
            imports=tuple(imports),
            rules=tuple(rules),
            comments=tuple(self._comments),
        )

    def _end_statement(self) -> None:
        """Require a statement boundary, then skip to the next statement."""
        if self._tok.kind not in ("newline", "eof") and not self._is_op(";"):
            self._fail("expected newline or ;")
        self._skip_separators()

    def _parse_package(self) -> Package:
        start = self._advance()
        root, keys = self._parse_path()
        # Package paths are stored rooted at data
        path = Ref((Var("data"), String(root.name), *keys))
        return Package(path=path, location=self._location(start))

    def _parse_import(self) -> Import:
        start = self._advance()
        path_tok = self._tok
        root, keys = self._parse_path()
        path = Ref((root, *keys))
        if root.name not in _IMPORT_ROOTS:
            raise RegoSyntaxError(
                self._path,
                f"invalid import path {path}: must begin with input, data, future or rego",
                path_tok.line,
                path_tok.column,
            )
        alias = None
        if self._is_word("as"):
            self._advance()
            alias = self._parse_var().name
        return Import(path=path, alias=alias, location=self._location(start))

    def _parse_path(self) -> tuple[Var, list[Term]]:
        """Parse a static dotted path: var { "." ident | "[" string "]" }."""
        root = self._parse_var()
        keys: list[Term] = []
        while True:
            if self._is_op("."):
                self._advance()
                if self._tok.kind != "ident":
                    self._fail("expected ident")
                keys.append(String(self._advance().value))
            elif self._is_op("["):
                self._advance()
                if self._tok.kind != "string":
                    self._fail("expected string")
                keys.append(String(self._advance().value))
                self._expect_op("]")
            else:
                return root, keys

    def _parse_var(self) -> Var:
        tok = self._tok
        if tok.kind != "ident" or tok.value in _RESERVED:
            self._fail("expected var")
        self._advance()
        return Var(tok.value)

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _parse_rules(self) -> list[Rule]:
        """Parse one rule statement; chained bodies yield one rule each."""
        start = self._tok
        if self._is_word("default"):
            return [self._parse_default_rule()]

        head, has_explicit_head = self._parse_head()

        bodies: list[tuple[Literal, ...]] = []
        if self._is_word("if"):
            self._advance()
            bodies.append(self._parse_if_body())
        elif self._is_op("{"):
            bodies.append(self._parse_body())

        if not bodies and not has_explicit_head:
            self._fail("rule must have a body or a value", tok=start)

        else_rule = None
        if bodies:
            while self._next_significant().kind == "op" and self._next_significant().value == "{":
                self._skip_newlines()
                bodies.append(self._parse_body())
            if self._next_significant().kind == "ident" and self._next_significant().value == "else":
                else_rule = self._parse_else_chain(head)

        location = self._location(start)
        rules = [Rule(head=head, body=bodies[0] if bodies else (), location=location, else_rule=else_rule)]
        rules.extend(Rule(head=head, body=body, location=location) for body in bodies[1:])
        return rules

    def _parse_default_rule(self) -> Rule:
        start = self._advance()
        reference = Ref(tuple(self._parse_head_ref()[0]))
        args = None
        if self._is_op("("):
            args = self._parse_args()
        if self._is_op(":="):
            assign = True
        elif self._is_op("="):
            assign = False
        else:
            self._fail("expected = or := after default rule name")
        self._advance()
        value = self._parse_term_expr()
        head = Head(reference=reference, args=args, value=value, assign=assign)
        return Rule(head=head, body=(), location=self._location(start), default=True)

    def _parse_head_ref(self) -> tuple[list[Term], bool]:
        """Parse the rule name ref.

        Returns:
            Tuple of (terms, last_is_bracket) where last_is_bracket tells
            whether the final key was written as ``[term]``.
        """
        terms: list[Term] = [self._parse_var()]
        last_is_bracket = False
        while True:
            if self._is_op("."):
                self._advance()
                if self._tok.kind != "ident":
                    self._fail("expected ident")
                terms.append(String(self._advance().value))
                last_is_bracket = False
            elif self._is_op("["):
                self._advance()
                self._skip_newlines()
                terms.append(self._parse_term_expr())
                self._skip_newlines()
                self._expect_op("]")
                last_is_bracket = True
            else:
                return terms, last_is_bracket

    def _parse_head(self) -> tuple[Head, bool]:
        """Parse a rule head.

        Returns:
            Tuple of (head, explicit) where explicit is True when the head
            declares a key or value and may therefore stand without a body.
        """
        terms, last_is_bracket = self._parse_head_ref()

        args = None
        if self._is_op("("):
            args = self._parse_args()

        key = None
        if args is None and self._is_word("contains"):
            self._advance()
            key = self._parse_term_expr()

        value = None
        assign = False
        if key is None and (self._is_op("=") or self._is_op(":=")):
            assign = self._advance().value == ":="
            value = self._parse_term_expr()

        explicit = key is not None or value is not None
        if key is None and args is None and last_is_bracket:
            if value is None:
                # v0 partial set: deny[msg] { ... }
                key, terms = terms[-1], terms[:-1]
                explicit = True
            elif len(terms) == 2:
                # partial object: p[k] = v { ... }
                key, terms = terms[-1], terms[:-1]

        if value is None and key is None:
            value = Boolean(True)

        return Head(reference=Ref(tuple(terms)), args=args, key=key, value=value, assign=assign), explicit

    def _parse_args(self) -> tuple[Term, ...]:
        self._expect_op("(")
        return tuple(self._parse_term_list(")"))

    def _parse_if_body(self) -> tuple[Literal, ...]:
        if self._is_op("{"):
            return self._parse_body()
        return (self._parse_literal(),)

    def _parse_body(self) -> tuple[Literal, ...]:
        start = self._expect_op("{")
        body = self._parse_literals("}")
        if not body:
            raise RegoSyntaxError(self._path, "found empty body", start.line, start.column)
        self._expect_op("}")
        return body

    def _parse_else_chain(self, head: Head) -> Rule:
        """Parse ``else [= value] [if] body`` clauses following a rule body."""
        self._skip_newlines()
        else_tok = self._advance()

        value: Term = Boolean(True)
        assign = False
        has_value = False
        if self._is_op("=") or self._is_op(":="):
            assign = self._advance().value == ":="
            value = self._parse_term_expr()
            has_value = True

        body: tuple[Literal, ...] = ()
        if self._is_word("if"):
            self._advance()
            body = self._parse_if_body()
        elif self._is_op("{"):
            body = self._parse_body()
        elif not has_value:
            self._fail("expected else value or body")

        next_else = None
        if self._next_significant().kind == "ident" and self._next_significant().value == "else":
            next_else = self._parse_else_chain(head)

        else_head = Head(reference=head.reference, args=head.args, value=value, assign=assign)
        return Rule(head=else_head, body=body, location=self._location(else_tok), else_rule=next_else)

    # -------------------------------------------------------------------------
    # Body literals
    # -------------------------------------------------------------------------

    def _parse_literals(self, closing: str) -> tuple[Literal, ...]:
        """Parse literals separated by ";" or newlines up to a closing op."""
        literals: list[Literal] = []
        self._skip_separators()
        while not self._is_op(closing):
            if self._tok.kind == "eof":
                self._fail(f"expected {closing}")
            literals.append(self._parse_literal())
            if not (self._tok.kind == "newline" or self._is_op(";") or self._is_op(closing)):
                self._fail(f"expected newline, ; or {closing}")
            self._skip_separators()
        return tuple(literals)

    def _parse_literal(self) -> Literal:
        if self._is_word("some"):
            return self._parse_some()
        if self._is_word("every") and self._peek().kind == "ident":
            return self._parse_every()

        negated = False
        if self._is_word("not"):
            self._advance()
            negated = True

        term = self._parse_infix(1)

        modifiers: list[With] = []
        while self._is_word("with"):
            self._advance()
            target = self._parse_postfix(self._parse_var())
            if not self._is_word("as"):
                self._fail("expected as")
            self._advance()
            modifiers.append(With(target=target, value=self._parse_term_expr()))

        return Expr(term=term, negated=negated, modifiers=tuple(modifiers))

    def _parse_some(self) -> SomeDecl:
        start = self._advance()
        symbols = [self._parse_infix(PRECEDENCE["=="])]
        while self._accept_op(","):
            symbols.append(self._parse_infix(PRECEDENCE["=="]))

        if self._is_word("in"):
            self._advance()
            if len(symbols) > 2:
                self._fail("expected at most two symbols before in")
            collection = self._parse_infix(PRECEDENCE["=="])
            return SomeDecl(symbols=tuple(symbols), collection=collection)

        for symbol in symbols:
            if not isinstance(symbol, Var):
                raise RegoSyntaxError(
                    self._path,
                    f"expected var in some declaration, got {symbol}",
                    start.line,
                    start.column,
                )
        return SomeDecl(symbols=tuple(symbols))

    def _parse_every(self) -> Every:
        self._advance()
        key = None
        value: Term = self._parse_var()
        if self._accept_op(","):
            key, value = value, self._parse_var()
        if not self._is_word("in"):
            self._fail("expected in")
        self._advance()
        domain = self._parse_infix(PRECEDENCE["=="])
        body = self._parse_body()
        return Every(key=key, value=value, domain=domain, body=body)

    # -------------------------------------------------------------------------
    # Terms
    # -------------------------------------------------------------------------

    def _parse_term_expr(self) -> Term:
        """Parse an expression that cannot be an assignment or unification."""
        return self._parse_infix(PRECEDENCE["in"])

    def _current_operator(self, allow_union: bool) -> str | None:
        tok = self._tok
        if tok.kind == "op" and tok.value in PRECEDENCE:
            if tok.value == "|" and not allow_union:
                return None
            return tok.value
        if self._is_word("in"):
            return "in"
        return None

    def _parse_infix(self, min_precedence: int, allow_union: bool = True) -> Term:
        """Precedence-climbing parser for infix operators."""
        left = self._parse_unary(allow_union)
        while True:
            op = self._current_operator(allow_union)
            if op is None or PRECEDENCE[op] < min_precedence:
                return left
            self._advance()
            self._skip_newlines()
            right = self._parse_infix(PRECEDENCE[op] + 1, allow_union)
            left = BinaryOp(op=op, left=left, right=right)

    def _parse_unary(self, allow_union: bool) -> Term:
        if self._is_op("-"):
            self._advance()
            if self._tok.kind == "number":
                return self._parse_postfix(Number("-" + self._advance().value))
            return UnaryMinus(self._parse_unary(allow_union))
        return self._parse_postfix(self._parse_primary())

    def _parse_primary(self) -> Term:
        tok = self._tok

        if tok.kind == "number":
            self._advance()
            return Number(tok.value)
        if tok.kind == "string":
            self._advance()
            return String(tok.value)
        if tok.kind == "ident":
            if tok.value == "true" or tok.value == "false":
                self._advance()
                return Boolean(tok.value == "true")
            if tok.value == "null":
                self._advance()
                return Null()
            if tok.value == "set" and self._peek().kind == "op" and self._peek().value == "(":
                if self._peek(2).kind == "op" and self._peek(2).value == ")":
                    self._pos += 3
                    return SetTerm(())
            return self._parse_var()
        if self._is_op("("):
            self._advance()
            self._skip_newlines()
            inner = self._parse_infix(PRECEDENCE["in"])
            self._skip_newlines()
            self._expect_op(")")
            return inner
        if self._is_op("["):
            return self._parse_array()
        if self._is_op("{"):
            return self._parse_brace()

        self._fail()

    def _parse_postfix(self, term: Term) -> Term:
        """Parse ref accesses and calls following a primary term."""
        terms: list[Term] = [term]

        def collapse() -> Term:
            return terms[0] if len(terms) == 1 else Ref(tuple(terms))

        while True:
            if self._is_op("."):
                self._advance()
                if self._tok.kind != "ident":
                    self._fail("expected ident")
                terms.append(String(self._advance().value))
            elif self._is_op("["):
                self._advance()
                self._skip_newlines()
                terms.append(self._parse_term_expr())
                self._skip_newlines()
                self._expect_op("]")
            elif self._is_op("(") and isinstance(terms[0], Var):
                operator = collapse()
                args = self._parse_args()
                terms = [Call(operator=operator, args=args)]
            else:
                return collapse()

    def _parse_term_list(self, closing: str) -> list[Term]:
        items: list[Term] = []
        self._skip_newlines()
        while not self._is_op(closing):
            items.append(self._parse_term_expr())
            self._skip_newlines()
            if not self._accept_op(","):
                break
            self._skip_newlines()
        self._skip_newlines()
        self._expect_op(closing)
        return items

    def _parse_array(self) -> Term:
        self._expect_op("[")
        self._skip_newlines()
        if self._accept_op("]"):
            return ArrayTerm(())

        first = self._parse_infix(PRECEDENCE["in"], allow_union=False)
        self._skip_newlines()
        if self._accept_op("|"):
            body = self._parse_literals("]")
            self._expect_op("]")
            return ArrayComprehension(term=first, body=body)

        items = [first]
        if self._accept_op(","):
            items.extend(self._parse_term_list("]"))
        else:
            self._expect_op("]")
        return ArrayTerm(tuple(items))

    def _parse_brace(self) -> Term:
        """Parse an object, set, or set/object comprehension."""
        self._expect_op("{")
        self._skip_newlines()
        if self._accept_op("}"):
            return ObjectTerm(())

        first = self._parse_infix(PRECEDENCE["in"], allow_union=False)
        self._skip_newlines()

        if self._accept_op(":"):
            self._skip_newlines()
            value = self._parse_infix(PRECEDENCE["in"], allow_union=False)
            self._skip_newlines()
            if self._accept_op("|"):
                body = self._parse_literals("}")
                self._expect_op("}")
                return ObjectComprehension(key=first, value=value, body=body)
            items = [(first, value)]
            while self._accept_op(","):
                self._skip_newlines()
                if self._is_op("}"):
                    break
                key = self._parse_term_expr()
                self._skip_newlines()
                self._expect_op(":")
                self._skip_newlines()
                items.append((key, self._parse_term_expr()))
                self._skip_newlines()
            self._expect_op("}")
            return ObjectTerm(tuple(items))

        if self._accept_op("|"):
            body = self._parse_literals("}")
            self._expect_op("}")
            return SetComprehension(term=first, body=body)

        items = [first]
        if self._accept_op(","):
            items.extend(self._parse_term_list("}"))
        else:
            self._expect_op("}")
        return SetTerm(tuple(items))

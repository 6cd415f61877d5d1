"""Rego language support - tokenizer, syntax tree and parser.

Structure:
    lexer.py    - tokenize(): source text -> tokens + comments
    ast.py      - Module, Rule, Head, Term nodes with canonical rendering
    parser.py   - RegoParser / parse_module(), ModuleParser protocol

The loader only depends on the ModuleParser protocol, so another parser
can be substituted as long as it returns the same Module shape.
"""

from rego_loader.rego.ast import Comment, Head, Import, Module, Package, Ref, Rule
from rego_loader.rego.parser import ModuleParser, RegoParser, parse_module

__all__ = [
    # Parser
    "ModuleParser",
    "RegoParser",
    "parse_module",
    # Syntax tree
    "Module",
    "Package",
    "Import",
    "Rule",
    "Head",
    "Ref",
    "Comment",
]

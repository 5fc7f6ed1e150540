"""Lambda form grammar: parse tree, parser and serializer."""

from colloquy.forms.nodes import (
    Apply,
    Atom,
    DateLit,
    Lambda,
    LambdaForm,
    LiteralForm,
    LiteralValue,
    NumberLit,
    StringLit,
    Variable,
    is_literal,
)
from colloquy.forms.parser import FormParser, parse
from colloquy.forms.serializer import serialize

__all__ = [
    "Apply",
    "Atom",
    "DateLit",
    "Lambda",
    "LambdaForm",
    "LiteralForm",
    "LiteralValue",
    "NumberLit",
    "StringLit",
    "Variable",
    "is_literal",
    "FormParser",
    "parse",
    "serialize",
]

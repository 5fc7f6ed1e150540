"""Lambda form parse tree.

Nodes are immutable and compare structurally, so two parses of the same
text are equal.
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Atom:
    """Identifier, usually a namespaced tag like ``tt:root.special.hello``."""

    name: str


@dataclass(frozen=True)
class Apply:
    """Single-argument application; chains encode curried calls."""

    left: "LambdaForm"
    right: "LambdaForm"


@dataclass(frozen=True)
class Lambda:
    """Variable binding. Parsed but never evaluated."""

    varname: str
    body: "LambdaForm"


@dataclass(frozen=True)
class StringLit:
    value: str


@dataclass(frozen=True)
class NumberLit:
    value: int | float


@dataclass(frozen=True)
class DateLit:
    value: date


@dataclass(frozen=True)
class Variable:
    name: str


LambdaForm = Atom | Apply | Lambda | StringLit | NumberLit | DateLit | Variable
LiteralForm = StringLit | NumberLit | DateLit
LiteralValue = str | int | float | date


def is_literal(form: LambdaForm) -> bool:
    """Check whether a form is a string, number or date literal."""
    return isinstance(form, (StringLit, NumberLit, DateLit))

"""Canonical text for lambda forms.

``parse(serialize(form)) == form`` for every form this module accepts.
"""

import math

from colloquy.forms.nodes import (
    Apply,
    Atom,
    DateLit,
    Lambda,
    LambdaForm,
    NumberLit,
    StringLit,
    Variable,
)
from colloquy.forms.parser import KEYWORDS, NAME_PATTERN


def serialize(form: LambdaForm) -> str:
    """Write a form in the notation accepted by ``FormParser``.

    Raises:
        ValueError: If the form has no representation in the grammar
            (a string holding a backslash, a name outside ``[0-9a-zA-Z:.]+``,
            an applied literal, or a keyword used as a call head).
    """
    if isinstance(form, Atom):
        return _name(form.name)
    if isinstance(form, StringLit):
        return f"(string {_quote(form.value)})"
    if isinstance(form, NumberLit):
        return f"(number {_number(form.value)})"
    if isinstance(form, DateLit):
        d = form.value
        return f"(date {d.year} {d.month} {d.day})"
    if isinstance(form, Variable):
        return f"(var {_name(form.name)})"
    if isinstance(form, Lambda):
        return f"(lambda {_name(form.varname)} {serialize(form.body)})"
    if isinstance(form, Apply):
        return f"({_head(form.left)} {serialize(form.right)})"
    raise ValueError(f"Not a lambda form: {form!r}")


def _head(left: LambdaForm) -> str:
    if isinstance(left, Atom):
        if left.name in KEYWORDS:
            raise ValueError(f"Keyword {left.name!r} cannot be used as a call head")
        return _name(left.name)
    if isinstance(left, (StringLit, NumberLit, DateLit)):
        raise ValueError(f"Cannot apply literal {left!r}")
    return serialize(left)


def _name(name: str) -> str:
    if not NAME_PATTERN.fullmatch(name):
        raise ValueError(f"Invalid identifier {name!r}")
    return name


def _quote(value: str) -> str:
    if "\\" in value:
        raise ValueError("Backslashes cannot be escaped in lambda form strings")
    return '"' + value.replace('"', '\\"').replace("\n", "\\n") + '"'


def _number(value: int | float) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Cannot serialize non-finite number {value}")
    text = repr(value)
    if NAME_PATTERN.fullmatch(text):
        return text
    return _quote(text)

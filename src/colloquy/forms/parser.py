"""Recursive-descent parser for the lambda form notation.

Grammar:
    atom  := "(" list | NAME | STRING
    list  := "string" (NAME | STRING) ")"
           | "number" (NAME | STRING) ")"
           | "date" NAME NAME NAME ")"
           | "lambda" NAME atom ")"
           | "var" NAME ")"
           | "(" list atom ")"
           | NAME ")"
           | NAME atom ")"

NAME tokens match ``[0-9a-zA-Z:.]+``. Strings are double quoted and only
understand the ``\\"`` and ``\\n`` escapes.
"""

import logging
import math
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum

from colloquy.core.errors import LambdaSyntaxError
from colloquy.forms.nodes import (
    Apply,
    Atom,
    DateLit,
    Lambda,
    LambdaForm,
    NumberLit,
    StringLit,
    Variable,
    is_literal,
)

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"[0-9a-zA-Z:.]+")
_INTEGER_PATTERN = re.compile(r"-?[0-9]+")

KEYWORDS = frozenset({"string", "number", "date", "lambda", "var"})

_ESCAPES = {'"': '"', "n": "\n"}


class TokenKind(str, Enum):
    OPEN = "("
    CLOSE = ")"
    NAME = "name"
    STRING = "string"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int


class FormParser:
    """Parses one lambda form string into a ``LambdaForm`` tree.

    Usage:
        form = FormParser('(tt:root.token.value (number 3))').parse()
    """

    def __init__(self, text: str):
        self._text = text
        self._idx = 0

    def parse(self) -> LambdaForm:
        """Parse the whole input.

        Returns:
            The parse tree.

        Raises:
            LambdaSyntaxError: If the input is empty, malformed, or has
                trailing tokens after the first complete form.
        """
        self._skip_whitespace()
        if self._idx >= len(self._text):
            raise LambdaSyntaxError("Empty input", position=0)

        try:
            form = self._parse_atom()
        except RecursionError:
            raise LambdaSyntaxError("Form nested too deeply", position=self._idx) from None

        self._skip_whitespace()
        if self._idx < len(self._text):
            raise LambdaSyntaxError(
                f"Unexpected trailing input at {self._idx}", position=self._idx
            )
        return form

    # -- tokenizer -------------------------------------------------------

    def _skip_whitespace(self) -> None:
        while self._idx < len(self._text) and self._text[self._idx].isspace():
            self._idx += 1

    def _next_token(self) -> Token:
        self._skip_whitespace()
        if self._idx >= len(self._text):
            raise LambdaSyntaxError("Unexpected end of input", position=self._idx)

        start = self._idx
        char = self._text[start]
        if char == "(":
            self._idx += 1
            return Token(TokenKind.OPEN, char, start)
        if char == ")":
            self._idx += 1
            return Token(TokenKind.CLOSE, char, start)
        if char == '"':
            return Token(TokenKind.STRING, self._eat_string(), start)

        match = NAME_PATTERN.match(self._text, start)
        if match is None:
            raise LambdaSyntaxError(f"Unexpected character {char!r} at {start}", position=start)
        self._idx = match.end()
        return Token(TokenKind.NAME, match.group(0), start)

    def _peek_token(self) -> Token:
        saved = self._idx
        try:
            return self._next_token()
        finally:
            self._idx = saved

    def _eat_string(self) -> str:
        start = self._idx
        self._idx += 1  # opening quote
        buffer: list[str] = []
        while self._idx < len(self._text):
            char = self._text[self._idx]
            if char == '"':
                self._idx += 1
                return "".join(buffer)
            if char == "\\":
                if self._idx + 1 >= len(self._text):
                    raise LambdaSyntaxError("Invalid escape at end of input", position=self._idx)
                escaped = self._text[self._idx + 1]
                if escaped not in _ESCAPES:
                    raise LambdaSyntaxError(
                        f"Invalid escape \\{escaped} at {self._idx}", position=self._idx
                    )
                buffer.append(_ESCAPES[escaped])
                self._idx += 2
            else:
                buffer.append(char)
                self._idx += 1

        raise LambdaSyntaxError(f"Unterminated string starting at {start}", position=start)

    def _expect(self, kind: TokenKind) -> Token:
        token = self._next_token()
        if token.kind is not kind:
            raise LambdaSyntaxError(
                f"Expected {kind.value} at {token.position}, got {token.text!r}",
                position=token.position,
            )
        return token

    def _expect_value(self, what: str) -> Token:
        token = self._next_token()
        if token.kind not in (TokenKind.NAME, TokenKind.STRING):
            raise LambdaSyntaxError(f"Expected {what} at {token.position}", position=token.position)
        return token

    # -- grammar ---------------------------------------------------------

    def _parse_atom(self) -> LambdaForm:
        token = self._next_token()
        if token.kind is TokenKind.OPEN:
            return self._parse_list()
        if token.kind is TokenKind.CLOSE:
            raise LambdaSyntaxError(
                f"Unexpected close-paren at {token.position}", position=token.position
            )
        if token.kind is TokenKind.STRING:
            return StringLit(token.text)
        return Atom(token.text)

    def _parse_list(self) -> LambdaForm:
        head = self._next_token()

        if head.kind is TokenKind.OPEN:
            left = self._parse_list()
            if is_literal(left):
                raise LambdaSyntaxError(
                    f"Cannot apply value {left} at {head.position}", position=head.position
                )
            right = self._parse_atom()
            self._expect(TokenKind.CLOSE)
            return Apply(left, right)

        if head.kind is TokenKind.CLOSE:
            raise LambdaSyntaxError(f"Empty list at {head.position}", position=head.position)
        if head.kind is TokenKind.STRING:
            raise LambdaSyntaxError(
                f"Expected identifier at {head.position}", position=head.position
            )

        name = head.text
        if name == "string":
            value = self._expect_value("string")
            self._expect(TokenKind.CLOSE)
            return StringLit(value.text)
        if name == "number":
            value = self._expect_value("number")
            self._expect(TokenKind.CLOSE)
            return NumberLit(self._to_number(value))
        if name == "date":
            parts = [self._expect_value("date") for _ in range(3)]
            self._expect(TokenKind.CLOSE)
            return DateLit(self._to_date(parts))
        if name == "lambda":
            varname = self._expect(TokenKind.NAME)
            body = self._parse_atom()
            self._expect(TokenKind.CLOSE)
            return Lambda(varname.text, body)
        if name == "var":
            varname = self._expect(TokenKind.NAME)
            self._expect(TokenKind.CLOSE)
            return Variable(varname.text)

        if self._peek_token().kind is TokenKind.CLOSE:
            self._next_token()
            return Atom(name)

        right = self._parse_atom()
        self._expect(TokenKind.CLOSE)
        return Apply(Atom(name), right)

    # -- literal conversion ----------------------------------------------

    @staticmethod
    def _to_number(token: Token) -> int | float:
        text = token.text.strip()
        try:
            if _INTEGER_PATTERN.fullmatch(text):
                return int(text)
            value = float(text)
        except ValueError as e:
            raise LambdaSyntaxError(
                f"Invalid number {token.text!r} at {token.position}", position=token.position
            ) from e
        if not math.isfinite(value):
            raise LambdaSyntaxError(
                f"Invalid number {token.text!r} at {token.position}", position=token.position
            )
        return value

    @staticmethod
    def _to_date(parts: list[Token]) -> date:
        try:
            year, month, day = (int(p.text) for p in parts)
            return date(year, month, day)
        except ValueError as e:
            raise LambdaSyntaxError(
                f"Invalid date at {parts[0].position}: {e}", position=parts[0].position
            ) from e


def parse(text: str) -> LambdaForm:
    """Parse a lambda form string."""
    form = FormParser(text).parse()
    logger.debug(f"Parsed lambda form {text!r} into {form}")
    return form

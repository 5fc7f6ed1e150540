"""Semantic classification of lambda forms."""

import logging

from colloquy.core.commands import (
    ActionCommand,
    Affirm,
    ClassifiedCommand,
    Deny,
    LiteralValue,
    Special,
    Value,
)
from colloquy.core.constants import (
    DEVICE_PREFIX,
    SPECIAL_PREFIX,
    VALUE_TOKEN,
    SpecialName,
    ValueCategory,
)
from colloquy.core.errors import (
    SemanticError,
    UnboundVariableError,
    UnexpectedLambdaError,
    UnknownActionError,
    UnknownDeviceError,
)
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
from colloquy.semantics.catalog import ActionCatalog

logger = logging.getLogger(__name__)


def categorize(form: LambdaForm) -> ValueCategory:
    """Map a literal form to the value category it answers.

    Raises:
        SemanticError: If the form is not a literal.
    """
    if isinstance(form, NumberLit):
        return ValueCategory.NUMBER
    if isinstance(form, StringLit):
        return ValueCategory.RAW_STRING
    if isinstance(form, DateLit):
        return ValueCategory.DATE
    raise SemanticError(f"Expected a literal value, got {form}")


def literal_value(form: LambdaForm) -> LiteralValue:
    """Python value carried by a literal form."""
    if isinstance(form, (NumberLit, StringLit, DateLit)):
        return form.value
    raise SemanticError(f"Expected a literal value, got {form}")


class SemanticAnalyzer:
    """Classifies a parsed lambda form into a ``ClassifiedCommand``."""

    def __init__(self, catalog: ActionCatalog):
        self.catalog = catalog

    def analyze(self, form: LambdaForm) -> ClassifiedCommand:
        """Classify a form.

        Args:
            form: Parse tree produced by ``FormParser``.

        Returns:
            Exactly one of Special, Affirm, Deny, Value or ActionCommand.

        Raises:
            SemanticError: If the form is well-formed but unclassifiable.
        """
        if isinstance(form, Atom) and form.name.startswith(SPECIAL_PREFIX):
            command = self._classify_special(form.name)
        elif isinstance(form, Apply) and form.left == Atom(VALUE_TOKEN):
            command = Value(category=categorize(form.right), payload=literal_value(form.right))
        elif isinstance(form, (Apply, Atom)):
            command = self._classify_call(form)
        elif isinstance(form, Lambda):
            raise UnexpectedLambdaError(f"Unexpected top-level lambda binding {form.varname}")
        elif isinstance(form, Variable):
            raise UnboundVariableError(f"Unbound variable {form.name}")
        else:
            raise SemanticError(f"Invalid top-level {form}")

        logger.debug(f"Analyzed {form} into {command!r}")
        return command

    def _classify_special(self, name: str) -> ClassifiedCommand:
        suffix = name[len(SPECIAL_PREFIX) :]
        if suffix == SpecialName.YES:
            return Affirm()
        if suffix == SpecialName.NO:
            return Deny()
        return Special(name=suffix)

    def _classify_call(self, form: LambdaForm) -> ActionCommand:
        head, args = _uncurry(form)
        if isinstance(head, Variable):
            raise UnboundVariableError(f"Unbound variable {head.name}")
        if not isinstance(head, Atom):
            raise SemanticError(f"Unexpected call to {head}")

        action = head.name
        if not self.catalog.has_action(action):
            raise UnknownActionError(f"Unknown action {action}")

        selector = args[0] if args else None
        if isinstance(selector, Atom) and selector.name.startswith(DEVICE_PREFIX):
            target = self.catalog.lookup(action, selector.name)
            if target is not None:
                return ActionCommand.from_target(target, params=_literals(args[1:]))

        fallback = self.catalog.fallback(action)
        if fallback:
            # An unknown device atom is still consumed as the selector.
            is_device = isinstance(selector, Atom) and selector.name.startswith(DEVICE_PREFIX)
            rest = args[1:] if is_device else args
            logger.debug(f"Action {action} resolved through fallback {[t.kind for t in fallback]}")
            return ActionCommand.from_target(
                fallback[0], params=_literals(rest), alternatives=fallback[1:]
            )

        if selector is None:
            raise SemanticError(f"Missing parameters to action {action}")
        if not isinstance(selector, Atom) or not selector.name.startswith(DEVICE_PREFIX):
            raise SemanticError(f"Invalid first parameter to {action} (must be device)")
        raise UnknownDeviceError(f"Action {action} is not valid for device {selector.name}")


def _uncurry(form: LambdaForm) -> tuple[LambdaForm, list[LambdaForm]]:
    """Split a curried Apply chain into its head and ordered arguments.

    ``(((f a) b) c)`` becomes ``(f, [a, b, c])``.
    """
    args: list[LambdaForm] = []
    while isinstance(form, Apply):
        args.append(form.right)
        form = form.left
    if isinstance(form, Lambda):
        raise UnexpectedLambdaError("Unexpected lambda form not in normal form")
    args.reverse()
    return form, args


def _literals(forms: list[LambdaForm]) -> list[LiteralValue]:
    values = []
    for form in forms:
        if isinstance(form, Lambda):
            raise UnexpectedLambdaError("Unexpected lambda form in argument position")
        if isinstance(form, Variable):
            raise UnboundVariableError(f"Unbound variable {form.name}")
        values.append(literal_value(form))
    return values


def analyze(form: LambdaForm, catalog: ActionCatalog) -> ClassifiedCommand:
    """Classify a form against a catalog."""
    return SemanticAnalyzer(catalog).analyze(form)

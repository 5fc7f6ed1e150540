"""Classified command hierarchy produced by semantic analysis.

A ``ClassifiedCommand`` is the tagged result of analysing one lambda form.
Exactly one subclass is instantiated per utterance; dialogue contexts
dispatch on the concrete type.
"""

from datetime import date
from typing import Annotated, Any, ClassVar, Literal, Type

from pydantic import BaseModel, ConfigDict, Field

from colloquy.core.constants import ParamType, ValueCategory

LiteralValue = str | int | float | date


# Parameter schema


class Constant(BaseModel):
    """Parameter fixed by the catalog; never asked."""

    model_config = ConfigDict(frozen=True)

    source: Literal["constant"] = "constant"
    value: Any


class Input(BaseModel):
    """Parameter that must be elicited from the user unless supplied."""

    model_config = ConfigDict(frozen=True)

    source: Literal["input"] = "input"
    question: str = Field(description="Question asked when the value is missing")
    type: ParamType = Field(description="Declared type; implies the expected answer category")

    @property
    def category(self) -> ValueCategory:
        return self.type.category


ParameterSpec = Annotated[Constant | Input, Field(discriminator="source")]


class ActionTarget(BaseModel):
    """Device kind, channel and parameter schema resolved for an action."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str = Field(description="Device kind, e.g. 'tv' or 'twitter'")
    channel: str = Field(description="Channel invoked on the device")
    parameters: list[ParameterSpec] = Field(
        default_factory=list, alias="schema", description="All parameters of the channel"
    )


# Commands


class ClassifiedCommand(BaseModel):
    """Base classified command.

    Uses a registry keyed on the ``type`` literal so serialized commands
    can be parsed back into their concrete class.
    """

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Discriminator field for command type")

    _registry: ClassVar[dict[str, Type["ClassifiedCommand"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Register subclasses by the default of their ``type`` field."""
        super().__init_subclass__(**kwargs)
        from typing import get_args, get_origin

        annotation = cls.__annotations__.get("type")
        if annotation is not None and get_origin(annotation) is Literal:
            args = get_args(annotation)
            if args and isinstance(args[0], str):
                ClassifiedCommand._registry[args[0]] = cls

    @classmethod
    def parse(cls, data: dict[str, Any]) -> "ClassifiedCommand":
        """Parse a dictionary into a typed command using the registry."""
        command_type = data.get("type")
        if not command_type:
            raise ValueError("Command data missing 'type' field")

        cmd_class = cls._registry.get(command_type)
        if not cmd_class:
            raise ValueError(f"Unknown command type: {command_type}")

        return cmd_class.model_validate(data)


class Special(ClassifiedCommand):
    """Fixed system utterance (help, hello, thanks, nevermind, debug...)."""

    type: Literal["special"] = "special"
    name: str = Field(description="Suffix after the special namespace, e.g. 'help'")


class Affirm(ClassifiedCommand):
    """User said yes."""

    type: Literal["affirm"] = "affirm"


class Deny(ClassifiedCommand):
    """User said no."""

    type: Literal["deny"] = "deny"


class Value(ClassifiedCommand):
    """Bare value answer."""

    type: Literal["value"] = "value"
    category: ValueCategory
    payload: LiteralValue


class ActionCommand(ClassifiedCommand):
    """Invocable action plus parameters already supplied in the utterance.

    ``parameters`` (the channel schema) describes every parameter of the
    channel; ``params`` holds only the call arguments that followed the
    device selector. ``alternatives`` lists further targets when the
    catalog fallback was used instead of an explicit device.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["action"] = "action"
    kind: str
    channel: str
    parameters: list[ParameterSpec] = Field(default_factory=list, alias="schema")
    params: list[LiteralValue] = Field(default_factory=list)
    alternatives: list[ActionTarget] = Field(default_factory=list)

    @property
    def targets(self) -> list[ActionTarget]:
        """Primary target followed by fallback alternatives, in order."""
        primary = ActionTarget(kind=self.kind, channel=self.channel, parameters=self.parameters)
        return [primary, *self.alternatives]

    @classmethod
    def from_target(
        cls,
        target: ActionTarget,
        params: list[LiteralValue] | None = None,
        alternatives: list[ActionTarget] | None = None,
    ) -> "ActionCommand":
        return cls(
            kind=target.kind,
            channel=target.channel,
            parameters=target.parameters,
            params=params or [],
            alternatives=alternatives or [],
        )


def parse_command(data: dict[str, Any]) -> ClassifiedCommand:
    """Parse a serialized command dict back to a command object."""
    return ClassifiedCommand.parse(data)

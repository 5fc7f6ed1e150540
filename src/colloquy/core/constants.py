"""Core constants and enums."""

from enum import Enum

SPECIAL_PREFIX = "tt:root.special."
VALUE_TOKEN = "tt:root.token.value"
DEVICE_PREFIX = "tt:device."


class ValueCategory(str, Enum):
    """What kind of answer a dialogue context is waiting for."""

    YES_NO = "yes_no"
    NUMBER = "number"
    RAW_STRING = "raw_string"
    DATE = "date"

    @property
    def label(self) -> str:
        """Human readable name used in replies."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    ValueCategory.YES_NO: "yes or no",
    ValueCategory.NUMBER: "number",
    ValueCategory.RAW_STRING: "free-form text",
    ValueCategory.DATE: "date",
}


class ParamType(str, Enum):
    """Declared type of an action parameter in the catalog."""

    STRING = "string"
    NUMBER = "number"
    MEASURE = "measure"
    BOOLEAN = "boolean"
    DATE = "date"

    @property
    def category(self) -> ValueCategory:
        """Answer category the user is asked for when eliciting this type."""
        if self is ParamType.STRING:
            return ValueCategory.RAW_STRING
        if self in (ParamType.NUMBER, ParamType.MEASURE):
            return ValueCategory.NUMBER
        if self is ParamType.BOOLEAN:
            return ValueCategory.YES_NO
        return ValueCategory.DATE


class SpecialName(str, Enum):
    """Suffixes of the special-command namespace."""

    YES = "yes"
    NO = "no"
    HELLO = "hello"
    DEBUG = "debug"
    HELP = "help"
    THANKYOU = "thankyou"
    SORRY = "sorry"
    COOL = "cool"
    NEVERMIND = "nevermind"

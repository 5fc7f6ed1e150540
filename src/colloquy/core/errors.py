"""Core interpreter errors."""


class ColloquyError(Exception):
    """Base class for all Colloquy errors."""

    pass


class ConfigError(ColloquyError):
    """Raised when configuration or the action catalog is invalid."""


class LambdaSyntaxError(ColloquyError):
    """Raised when a lambda form is malformed."""

    def __init__(self, message: str, position: int | None = None):
        super().__init__(message)
        self.position = position


class SemanticError(ColloquyError):
    """Raised when a well-formed lambda form cannot be classified."""

    pass


class UnboundVariableError(SemanticError):
    """A variable reference appeared where a value or call head was required."""

    pass


class UnexpectedLambdaError(SemanticError):
    """A lambda abstraction reached the analyzer (form not in normal form)."""

    pass


class UnknownActionError(SemanticError):
    """The call names an action that is not in the catalog."""

    pass


class UnknownDeviceError(SemanticError):
    """The action has no entry for the requested device kind."""

    pass


class DeviceResolutionError(ColloquyError):
    """Raised when no device of the requested kind is available."""

    def __init__(self, kinds: list[str]):
        super().__init__(f"No device of kind {' or '.join(kinds)}")
        self.kinds = kinds


class ExecutionError(ColloquyError):
    """Raised when a device invocation fails."""

    pass


class IdentityUnavailableError(ColloquyError):
    """Raised when the identity collaborator cannot resolve the user's name."""

    pass

"""Exception hierarchy for pico-factory.

All library-specific exceptions inherit from :class:`FactoryError`, making it
easy to catch any pico-factory error with a single ``except FactoryError``
clause.
"""

from typing import Any, Iterable


class FactoryError(Exception):
    """Base exception for all pico-factory errors."""

    pass


class AttributeDefinitionError(FactoryError):
    """Raised when an attribute declaration is invalid.

    Either both a value and a generator were supplied, or the attribute name
    is already declared in the same factory and redefinition is not allowed.
    The owning definition is left untouched.
    """

    def __init__(self, msg: str):
        super().__init__(msg)


class DuplicateDefinitionError(FactoryError):
    """Raised when a factory, alias, or global sequence name is already taken.

    Attributes:
        kind: ``"factory"`` or ``"sequence"``.
        name: The name that was registered twice.
    """

    def __init__(self, kind: str, name: Any):
        super().__init__(f"{kind.capitalize()} already defined: {name}")
        self.kind = kind
        self.name = name


class FactoryNotFoundError(FactoryError):
    """Raised when the registry has no factory under the requested name.

    Attributes:
        name: The factory name that was not found.
    """

    def __init__(self, name: Any):
        super().__init__(f"No such factory: {name}")
        self.name = name


class SequenceNotFoundError(FactoryError):
    """Raised when no global sequence is registered under the requested name.

    Attributes:
        name: The sequence name that was not found.
    """

    def __init__(self, name: Any):
        super().__init__(f"No such sequence: {name}")
        self.name = name


class InvalidCallbackNameError(FactoryError):
    """Raised when a callback is registered for an unknown lifecycle hook.

    Attributes:
        hook: The rejected hook name.
        valid: The accepted hook names.
    """

    def __init__(self, hook: Any, valid: Iterable[str]):
        self.hook = hook
        self.valid = tuple(valid)
        super().__init__(f"{hook} is not a valid callback name. Valid callback names are {list(self.valid)}")


class ConfigurationError(FactoryError):
    """Raised for configuration problems (invalid sources or values)."""

    def __init__(self, msg: str):
        super().__init__(msg)

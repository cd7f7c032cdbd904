"""Factory definitions and the name-to-definition registry.

This module defines :class:`FactoryDefinition` (the ordered record of
attributes, callbacks and aliases a declaration body produces) and
:class:`FactoryRegistry` (the name/alias lookup the build strategy consumes).
"""

import logging
import threading
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from .attributes import Attribute
from .constants import CALLBACK_NAMES, REDEFINE_ERROR, REDEFINE_OVERRIDE, REDEFINITION_POLICIES
from .exceptions import (
    AttributeDefinitionError,
    ConfigurationError,
    DuplicateDefinitionError,
    FactoryNotFoundError,
    InvalidCallbackNameError,
)

_logger = logging.getLogger(__name__)

Callback = Callable[..., Any]


class FactoryDefinition:
    """Everything one factory declares, in declaration order.

    The definition only records. Resolving attributes, honouring per-instance
    overrides and firing callbacks are the build strategy's job.

    Args:
        name: The factory name.
        model: The class the build strategy instantiates, if any.
        options: Free-form options kept for the build strategy.
        redefinition: What happens when an attribute name is declared twice:
            ``"error"`` raises :class:`AttributeDefinitionError`,
            ``"override"`` replaces the earlier attribute in place.
    """

    def __init__(
        self,
        name: str,
        model: Optional[type] = None,
        options: Optional[Mapping[str, Any]] = None,
        redefinition: str = REDEFINE_ERROR,
    ) -> None:
        if redefinition not in REDEFINITION_POLICIES:
            raise ConfigurationError(f"Unknown redefinition policy: {redefinition!r}; expected one of {list(REDEFINITION_POLICIES)}")
        self.name = name
        self.model = model
        self.options: Dict[str, Any] = dict(options or {})
        self.redefinition = redefinition
        self._attributes: List[Attribute] = []
        self._callbacks: Dict[str, List[Callback]] = {hook: [] for hook in CALLBACK_NAMES}
        self._aliases: List[str] = []

    @property
    def attributes(self) -> Tuple[Attribute, ...]:
        return tuple(self._attributes)

    @property
    def aliases(self) -> Tuple[str, ...]:
        return tuple(self._aliases)

    def attribute_names(self) -> Tuple[str, ...]:
        return tuple(a.name for a in self._attributes)

    def get_attribute(self, name: str) -> Optional[Attribute]:
        for attribute in self._attributes:
            if attribute.name == name:
                return attribute
        return None

    def _index_of(self, name: str) -> int:
        for idx, attribute in enumerate(self._attributes):
            if attribute.name == name:
                return idx
        return -1

    def define_attribute(self, attribute: Attribute) -> Attribute:
        """Append *attribute*, applying the redefinition policy.

        Raises:
            AttributeDefinitionError: If the name is already declared and the
                policy is ``"error"``.
        """
        idx = self._index_of(attribute.name)
        if idx < 0:
            self._attributes.append(attribute)
        elif self.redefinition == REDEFINE_OVERRIDE:
            self._attributes[idx] = attribute
            _logger.debug("Factory %r: attribute %r overridden", self.name, attribute.name)
        else:
            raise AttributeDefinitionError(f"Attribute already defined: {attribute.name}")
        return attribute

    def add_callback(self, hook: str, callback: Callback) -> Callback:
        """Append *callback* to the list for lifecycle *hook*.

        Raises:
            InvalidCallbackNameError: If *hook* is not a known hook name.
            TypeError: If *callback* is not callable.
        """
        if hook not in self._callbacks:
            raise InvalidCallbackNameError(hook, CALLBACK_NAMES)
        if not callable(callback):
            raise TypeError(f"{hook} callback must be callable, got {type(callback).__name__}")
        self._callbacks[hook].append(callback)
        _logger.debug("Factory %r: %s callback registered", self.name, hook)
        return callback

    def callbacks(self, hook: str) -> Tuple[Callback, ...]:
        if hook not in self._callbacks:
            raise InvalidCallbackNameError(hook, CALLBACK_NAMES)
        return tuple(self._callbacks[hook])

    def add_alias(self, name: str) -> None:
        if name not in self._aliases:
            self._aliases.append(name)

    def __len__(self) -> int:
        return len(self._attributes)

    def __iter__(self) -> Iterator[Attribute]:
        return iter(tuple(self._attributes))

    def __contains__(self, name) -> bool:
        return self._index_of(name) >= 0

    def __repr__(self):
        return f"FactoryDefinition(name={self.name!r}, attributes={list(self.attribute_names())!r})"


class FactoryRegistry:
    """Name-to-definition registry; one definition may sit under several names."""

    def __init__(self) -> None:
        self._factories: Dict[str, FactoryDefinition] = {}
        self._lock = threading.RLock()

    def register(self, definition: FactoryDefinition, alias: Optional[str] = None) -> None:
        """Register *definition* under *alias*, or under its own name.

        Registering the same definition twice under one name is a no-op.

        Raises:
            DuplicateDefinitionError: If a different definition already owns
                the name.
        """
        name = alias if alias is not None else definition.name
        with self._lock:
            current = self._factories.get(name)
            if current is definition:
                return
            if current is not None:
                raise DuplicateDefinitionError("factory", name)
            self._factories[name] = definition
        if alias is not None:
            _logger.debug("Registered factory %r as %r", definition.name, alias)
        else:
            _logger.debug("Registered factory %r", name)

    def unregister(self, name: str, definition: FactoryDefinition) -> None:
        """Remove *name* if it still points at *definition*."""
        with self._lock:
            if self._factories.get(name) is definition:
                del self._factories[name]

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._factories

    def get(self, name: str) -> FactoryDefinition:
        """Return the definition registered under *name*.

        Raises:
            FactoryNotFoundError: If nothing is registered under *name*.
        """
        with self._lock:
            if name not in self._factories:
                raise FactoryNotFoundError(name)
            return self._factories[name]

    def names(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._factories)

    def clear(self) -> None:
        with self._lock:
            self._factories.clear()
        _logger.debug("Cleared factory registry")

    def __contains__(self, name) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._factories)

"""Constants used throughout the pico-factory library.

This module defines the library logger, the lifecycle hook names accepted by
:class:`~pico_factory.factory.FactoryDefinition`, the redefinition policies,
and the :data:`NO_VALUE` sentinel.
"""

import logging
from typing import Tuple

LOGGER_NAME: str = "pico_factory"
"""Default logger name for the pico-factory library."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for pico-factory internal diagnostics."""

AFTER_BUILD: str = "after_build"
"""Hook fired after an instance is built in memory."""

AFTER_CREATE: str = "after_create"
"""Hook fired after an instance is built and persisted."""

AFTER_STUB: str = "after_stub"
"""Hook fired after a stubbed instance is produced."""

CALLBACK_NAMES: Tuple[str, ...] = (AFTER_BUILD, AFTER_CREATE, AFTER_STUB)
"""Every lifecycle hook name a factory definition accepts, in phase order."""

REDEFINE_ERROR: str = "error"
"""Redefinition policy: reject a second declaration of the same attribute."""

REDEFINE_OVERRIDE: str = "override"
"""Redefinition policy: replace the earlier declaration in place."""

REDEFINITION_POLICIES: Tuple[str, ...] = (REDEFINE_ERROR, REDEFINE_OVERRIDE)

DEFAULT_SEQUENCE_START: int = 1
"""First value emitted by a sequence when no start is given."""


class _NoValue:
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "NO_VALUE"

    def __bool__(self):
        return False

    def __reduce__(self):
        return (_NoValue, ())


NO_VALUE = _NoValue()
"""Marker for an attribute declared without a value.

Distinct from ``None``, which is a legitimate declared value.
"""

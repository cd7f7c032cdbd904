"""Settings for a factory set and the sources they are read from.

Provides :class:`FactorySettings`, the flat sources :class:`EnvSource` and
:class:`FlatDictSource`, and the :func:`configuration` builder that merges
them.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol

from .constants import DEFAULT_SEQUENCE_START, REDEFINE_ERROR, REDEFINITION_POLICIES
from .exceptions import ConfigurationError

KEY_SEQUENCE_START = "SEQUENCE_START"
KEY_REDEFINITION = "REDEFINITION"


class ConfigSource(Protocol):
    """Protocol for flat (key-value) configuration sources."""

    def get(self, key: str) -> Optional[str]: ...


class EnvSource:
    """Configuration source backed by OS environment variables.

    Args:
        prefix: Prefix prepended to every key lookup.

    Example:
        >>> src = EnvSource()
        >>> src.get("SEQUENCE_START")  # reads os.environ["PICO_FACTORY_SEQUENCE_START"]
    """

    def __init__(self, prefix: str = "PICO_FACTORY_") -> None:
        self.prefix = prefix

    def get(self, key: str) -> Optional[str]:
        return os.environ.get(self.prefix + key)


class FlatDictSource:
    """Configuration source backed by an in-memory dictionary.

    Args:
        data: The key-value mapping.
        prefix: Optional prefix prepended to every key lookup.
        case_sensitive: If ``False``, keys are normalised to upper-case
            for lookup.
    """

    def __init__(self, data: Mapping[str, Any], prefix: str = "", case_sensitive: bool = True):
        if case_sensitive:
            self._data = {str(k): v for k, v in data.items()}
            self._prefix = prefix
        else:
            self._data = {str(k).upper(): v for k, v in data.items()}
            self._prefix = prefix.upper()
        self._case_sensitive = case_sensitive

    def get(self, key: str) -> Optional[str]:
        k = f"{self._prefix}{key}"
        if not self._case_sensitive:
            k = k.upper()
        v = self._data.get(k)
        if isinstance(v, (str, int, float, bool)):
            return str(v)
        return None


@dataclass(frozen=True)
class FactorySettings:
    """Immutable settings for a :class:`~pico_factory.api.FactorySet`.

    Attributes:
        default_sequence_start: First number of any sequence declared
            without an explicit start.
        redefinition: Policy for a second declaration of the same attribute
            in one factory, ``"error"`` or ``"override"``.
    """

    default_sequence_start: int = DEFAULT_SEQUENCE_START
    redefinition: str = REDEFINE_ERROR

    def __post_init__(self):
        if isinstance(self.default_sequence_start, bool) or not isinstance(self.default_sequence_start, int):
            raise ConfigurationError(f"default_sequence_start must be an int, got {self.default_sequence_start!r}")
        if self.redefinition not in REDEFINITION_POLICIES:
            raise ConfigurationError(
                f"Unknown redefinition policy: {self.redefinition!r}; expected one of {list(REDEFINITION_POLICIES)}"
            )


def _lookup(key: str, sources: tuple, overrides: Dict[str, Any]) -> Optional[str]:
    if key in overrides:
        return str(overrides[key])
    for src in sources:
        v = src.get(key)
        if v is not None:
            return v
    return None


def configuration(*sources: ConfigSource, overrides: Optional[Dict[str, Any]] = None) -> FactorySettings:
    """Build :class:`FactorySettings` from one or more flat sources.

    Keys are ``SEQUENCE_START`` and ``REDEFINITION``. *overrides* win over
    every source; earlier sources win over later ones; anything unset keeps
    its default.

    Raises:
        ConfigurationError: If a source has an unknown type or a value is
            invalid.

    Example:
        >>> settings = configuration(EnvSource(), overrides={"REDEFINITION": "override"})
    """
    for src in sources:
        if not isinstance(src, (EnvSource, FlatDictSource)):
            raise ConfigurationError(f"Unknown configuration source type: {type(src)}")

    ov = dict(overrides or {})
    values: Dict[str, Any] = {}

    raw_start = _lookup(KEY_SEQUENCE_START, sources, ov)
    if raw_start is not None:
        try:
            values["default_sequence_start"] = int(raw_start.strip())
        except ValueError:
            raise ConfigurationError(f"{KEY_SEQUENCE_START} must be an integer, got {raw_start!r}") from None

    raw_policy = _lookup(KEY_REDEFINITION, sources, ov)
    if raw_policy is not None:
        values["redefinition"] = raw_policy.strip().lower()

    return FactorySettings(**values)

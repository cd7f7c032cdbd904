# pico_factory/__init__.py
try:
    from ._version import __version__
except Exception:
    __version__ = "0.0.0"

from .api import FactorySet
from .attributes import Association, Attribute, BuildContext, Dynamic, Static
from .config_builder import EnvSource, FactorySettings, FlatDictSource, configuration
from .constants import AFTER_BUILD, AFTER_CREATE, AFTER_STUB, CALLBACK_NAMES, NO_VALUE
from .definition_proxy import DefinitionProxy
from .exceptions import (
    AttributeDefinitionError,
    ConfigurationError,
    DuplicateDefinitionError,
    FactoryError,
    FactoryNotFoundError,
    InvalidCallbackNameError,
    SequenceNotFoundError,
)
from .factory import FactoryDefinition, FactoryRegistry
from .sequence import Sequence, SequenceRegistry

__all__ = [
    "__version__",
    "FactorySet",
    "FactoryDefinition",
    "FactoryRegistry",
    "DefinitionProxy",
    "Attribute",
    "Static",
    "Dynamic",
    "Association",
    "BuildContext",
    "Sequence",
    "SequenceRegistry",
    "FactorySettings",
    "EnvSource",
    "FlatDictSource",
    "configuration",
    "NO_VALUE",
    "AFTER_BUILD",
    "AFTER_CREATE",
    "AFTER_STUB",
    "CALLBACK_NAMES",
    "FactoryError",
    "AttributeDefinitionError",
    "DuplicateDefinitionError",
    "FactoryNotFoundError",
    "SequenceNotFoundError",
    "InvalidCallbackNameError",
    "ConfigurationError",
]

"""The restricted object handed to a factory's declaration body.

A :class:`DefinitionProxy` turns terse declarations into attributes on its
:class:`~pico_factory.factory.FactoryDefinition`::

    def user(f):
        f.name("Billy Idol")       # Static("name", "Billy Idol")
        f.email()                  # global "email" sequence, if registered
        f.author()                 # Association("author", "author")
        f.token(generator=lambda ctx: uuid4().hex)

Names listed in :attr:`DefinitionProxy.OPERATIONS` dispatch to the methods
below. Any other public name becomes a declaration and is resolved by
:meth:`DefinitionProxy._declare`.
"""

import logging
from typing import Any, Callable, Mapping, Optional

from .attributes import Association, Attribute, Dynamic, Generator, Static
from .constants import AFTER_BUILD, AFTER_CREATE, AFTER_STUB, NO_VALUE
from .exceptions import AttributeDefinitionError
from .factory import Callback, FactoryDefinition, FactoryRegistry
from .sequence import Sequence, SequenceRegistry

_logger = logging.getLogger(__name__)


def _next_of(sequence: Sequence) -> Generator:
    def generate(context):
        return sequence.next()

    return generate


class DefinitionProxy:
    """Declaration surface for one factory body.

    Only the operations in :attr:`OPERATIONS` and ``object``'s dunder
    primitives are real members. Every other public name is a declaration,
    so an attribute called ``name``, ``count`` or ``items`` can never collide
    with an inherited method. Underscore names are never declarations.

    Args:
        definition: The definition being populated.
        sequences: Global sequences, consulted by bare declarations.
        registry: Factory registry, used by :meth:`aliased_as`.
    """

    OPERATIONS = frozenset(
        {
            "add_attribute",
            "association",
            "sequence",
            "aliased_as",
            AFTER_BUILD,
            AFTER_CREATE,
            AFTER_STUB,
        }
    )

    __slots__ = ("_definition", "_sequences", "_registry")

    def __init__(self, definition: FactoryDefinition, sequences: SequenceRegistry, registry: FactoryRegistry) -> None:
        object.__setattr__(self, "_definition", definition)
        object.__setattr__(self, "_sequences", sequences)
        object.__setattr__(self, "_registry", registry)

    def __setattr__(self, name, value):
        raise AttributeError(f"Cannot assign '{name}' on a definition proxy; declare it with {name}(...) instead")

    def __delattr__(self, name):
        raise AttributeError(f"Cannot delete '{name}' on a definition proxy")

    def __getattr__(self, name: str) -> Callable[..., Attribute]:
        if name.startswith("_"):
            raise AttributeError(name)

        def declare(*args: Any, **kwargs: Any) -> Attribute:
            return self._declare(name, args, kwargs)

        declare.__name__ = name
        declare.__qualname__ = f"DefinitionProxy.{name}"
        return declare

    def __dir__(self):
        return sorted(self.OPERATIONS)

    def __reduce_ex__(self, protocol):
        raise TypeError(f"Definition proxy for factory '{self._definition.name}' cannot be copied or pickled")

    def __repr__(self):
        return f"<DefinitionProxy factory={self._definition.name!r}>"

    def _declare(self, name: str, args: tuple, kwargs: dict) -> Attribute:
        generator = kwargs.pop("generator", None)
        if kwargs:
            raise TypeError(f"{name}() got unexpected keyword arguments: {sorted(kwargs)}")
        if len(args) > 1:
            raise TypeError(f"{name}() takes at most one value ({len(args)} given)")

        if args or generator is not None:
            return self.add_attribute(name, *args, generator=generator)

        sequence = self._sequences.lookup(name)
        if sequence is not None:
            _logger.debug("Factory %r: %r resolved to global sequence", self._definition.name, name)
            return self.add_attribute(name, generator=_next_of(sequence))

        _logger.debug("Factory %r: %r resolved to association", self._definition.name, name)
        return self.association(name)

    def add_attribute(self, name: str, value: Any = NO_VALUE, generator: Optional[Generator] = None) -> Attribute:
        """Add an attribute assigned on every generated instance.

        Pass either *value* or *generator*, never both. A generator is called
        lazily with the build context, once per instance, and not at all when
        the attribute is overridden for that instance.

        Args:
            name: The attribute name.
            value: Fixed value; ``None`` is a real value here.
            generator: Callable taking the build context.

        Returns:
            The attribute that was added.

        Raises:
            AttributeDefinitionError: If both *value* and *generator* are
                given, or the name is already declared.
            TypeError: If *generator* is not callable.
        """
        if generator is not None:
            if value is not NO_VALUE:
                raise AttributeDefinitionError(f"Both value and generator given for attribute '{name}'")
            if not callable(generator):
                raise TypeError(f"Generator for attribute '{name}' must be callable")
            attribute: Attribute = Dynamic(name, generator)
        else:
            attribute = Static(name, value)

        self._definition.define_attribute(attribute)
        _logger.debug("Factory %r: %s attribute %r", self._definition.name, type(attribute).__name__, name)
        return attribute

    def association(self, name: str, options: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> Association:
        """Add an attribute built from another factory with the same strategy.

        Options can be given as a mapping, as keywords, or both. *name* and
        *options* are positional-only, so options called ``name`` or ``options``
        can be passed as keywords too. The
        ``factory`` option names the factory to use and is not forwarded;
        without it the attribute name is used, so an ``author`` association
        builds the ``author`` factory::

            f.association("author", factory="user")

        Returns:
            The :class:`Association` that was added.
        """
        forwarded = dict(options or {})
        forwarded.update(kwargs)
        factory_name = forwarded.pop("factory", None)
        if factory_name is None:
            factory_name = name

        attribute = Association(name, factory_name, forwarded)
        self._definition.define_attribute(attribute)
        _logger.debug("Factory %r: association %r -> factory %r", self._definition.name, name, factory_name)
        return attribute

    def sequence(self, name: str, start: Optional[int] = None, generator: Optional[Callable[[int], Any]] = None) -> Attribute:
        """Add an attribute backed by a sequence private to this factory.

        Equivalent to registering a global sequence and declaring a lazy
        attribute that calls its ``next()``, except that nothing is
        registered globally::

            f.sequence("email", generator=lambda n: f"person{n}@example.com")

        Args:
            name: The attribute name.
            start: First number; the sequence registry default when ``None``.
            generator: Optional callable applied to each number.
        """
        sequence = Sequence(self._sequences.default_start if start is None else start, generator)
        return self.add_attribute(name, generator=_next_of(sequence))

    def aliased_as(self, name: str) -> None:
        """Register this factory under an additional name.

        Raises:
            DuplicateDefinitionError: If *name* belongs to another factory.
        """
        self._registry.register(self._definition, alias=name)
        self._definition.add_alias(name)

    def after_build(self, callback: Callback) -> Callback:
        return self._definition.add_callback(AFTER_BUILD, callback)

    def after_create(self, callback: Callback) -> Callback:
        return self._definition.add_callback(AFTER_CREATE, callback)

    def after_stub(self, callback: Callback) -> Callback:
        return self._definition.add_callback(AFTER_STUB, callback)

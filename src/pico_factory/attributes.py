"""Attribute strategies recorded by a factory definition.

An attribute describes how one field of a generated instance gets its value.
Nothing here builds objects: :meth:`Attribute.resolve` hands the work to the
:class:`BuildContext` supplied by the build strategy.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Protocol

from .constants import NO_VALUE


class BuildContext(Protocol):
    """What a lazy generator or an association may use while an instance is built.

    Provided by the build strategy. ``strategy`` names the active strategy
    (e.g. ``"build"`` or ``"create"``) and ``associate`` builds another factory
    with that same strategy::

        def owner(ctx: BuildContext):
            return ctx.associate("owner", "user", {})
    """

    strategy: str

    def associate(self, name: str, factory_name: str, options: Mapping[str, Any]) -> Any: ...


Generator = Callable[[BuildContext], Any]


class Attribute:
    """Base class for the attribute variants.

    Attributes:
        name: The attribute name assigned on generated instances.
    """

    __slots__ = ()

    name: str

    def resolve(self, context: BuildContext) -> Any:
        raise NotImplementedError

    @property
    def is_static(self) -> bool:
        return isinstance(self, Static)

    @property
    def is_dynamic(self) -> bool:
        return isinstance(self, Dynamic)

    @property
    def is_association(self) -> bool:
        return isinstance(self, Association)


@dataclass(frozen=True)
class Static(Attribute):
    """An attribute whose value is fixed at definition time.

    ``value`` is :data:`~pico_factory.constants.NO_VALUE` when the attribute was
    declared without one.
    """

    name: str
    value: Any = NO_VALUE

    def resolve(self, context: BuildContext) -> Any:
        return self.value


@dataclass(frozen=True)
class Dynamic(Attribute):
    """An attribute computed lazily from the build context.

    The build strategy calls :meth:`resolve` once per generated instance and
    skips it entirely when the caller overrides the attribute. Exceptions
    raised by ``generator`` propagate unchanged.
    """

    name: str
    generator: Generator

    def __eq__(self, other):
        if not isinstance(other, Dynamic):
            return NotImplemented
        return self.name == other.name and self.generator is other.generator

    def __hash__(self):
        return hash((Dynamic, self.name, id(self.generator)))

    def resolve(self, context: BuildContext) -> Any:
        return self.generator(context)


@dataclass(frozen=True)
class Association(Attribute):
    """An attribute built from another factory with the parent's strategy.

    Attributes:
        name: The attribute name.
        factory_name: The factory used to build the associated instance.
        options: Extra options forwarded to that sub-build (never contains
            ``factory``).
    """

    name: str
    factory_name: str
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def __reduce__(self):
        return (Association, (self.name, self.factory_name, dict(self.options)))

    def __eq__(self, other):
        if not isinstance(other, Association):
            return NotImplemented
        return (self.name, self.factory_name, dict(self.options)) == (
            other.name,
            other.factory_name,
            dict(other.options),
        )

    def __hash__(self):
        return hash((Association, self.name, self.factory_name))

    def __repr__(self):
        return f"Association(name={self.name!r}, factory_name={self.factory_name!r}, options={dict(self.options)!r})"

    def resolve(self, context: BuildContext) -> Any:
        return context.associate(self.name, self.factory_name, dict(self.options))


__all__ = ["Attribute", "Association", "BuildContext", "Dynamic", "Generator", "Static"]

"""Public entry point: :class:`FactorySet` owns the registries and runs declaration bodies."""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, Optional

from .config_builder import FactorySettings
from .constants import LOGGER
from .definition_proxy import DefinitionProxy
from .exceptions import DuplicateDefinitionError
from .factory import FactoryDefinition, FactoryRegistry
from .sequence import Sequence, SequenceRegistry

Body = Callable[[DefinitionProxy], Any]


class _Definer:
    """Returned by :meth:`FactorySet.define`; usable as a decorator or a ``with`` block."""

    __slots__ = ("_owner", "_definition", "_aliases", "_used", "_cm")

    def __init__(self, owner: "FactorySet", definition: FactoryDefinition, aliases: Iterable[str]) -> None:
        self._owner = owner
        self._definition = definition
        self._aliases = tuple(aliases)
        self._used = False

    def __call__(self, body: Body) -> FactoryDefinition:
        with self._session() as proxy:
            body(proxy)
        return self._definition

    def __enter__(self) -> DefinitionProxy:
        self._cm = self._session()
        return self._cm.__enter__()

    def __exit__(self, exc_type, exc_val, exc_tb):
        return self._cm.__exit__(exc_type, exc_val, exc_tb)

    @contextmanager
    def _session(self) -> Iterator[DefinitionProxy]:
        if self._used:
            raise RuntimeError(f"Definition body for factory '{self._definition.name}' already ran")
        self._used = True
        self._owner._ensure_available(self._definition)
        proxy = DefinitionProxy(self._definition, self._owner.sequences, self._owner.factories)
        try:
            yield proxy
            self._owner._commit(self._definition, self._aliases)
        except BaseException:
            self._owner._rollback(self._definition)
            raise


class FactorySet:
    """A self-contained set of factories and global sequences.

    Create one per process or test run and pass it where it is needed; call
    :meth:`reset` between runs::

        factories = FactorySet()
        factories.sequence("email", generator=lambda n: f"person{n}@example.com")

        @factories.define("user", model=User)
        def user(f):
            f.name("Billy Idol")
            f.email()

        with factories.define("post", model=Post) as f:
            f.title("Hello")
            f.association("author", factory="user")

    Args:
        settings: Library settings; defaults to :class:`FactorySettings`.
        logger: Logger for this set's own records.
    """

    def __init__(self, settings: Optional[FactorySettings] = None, logger: Optional[logging.Logger] = None) -> None:
        self.settings = settings or FactorySettings()
        self._logger = logger or LOGGER
        self._factories = FactoryRegistry()
        self._sequences = SequenceRegistry(default_start=self.settings.default_sequence_start)

    @property
    def factories(self) -> FactoryRegistry:
        return self._factories

    @property
    def sequences(self) -> SequenceRegistry:
        return self._sequences

    def define(self, name: str, model: Optional[type] = None, *, aliases: Iterable[str] = (), **options: Any) -> _Definer:
        """Start a factory definition.

        The body receives a fresh :class:`DefinitionProxy`. The factory and
        its *aliases* are registered only if the body completes; a failing
        body leaves nothing behind.

        Args:
            name: The factory name.
            model: The class the build strategy instantiates.
            aliases: Extra names for the factory.
            **options: Kept on the definition for the build strategy.

        Raises:
            DuplicateDefinitionError: If *name* is already registered.
        """
        if self._factories.has(name):
            raise DuplicateDefinitionError("factory", name)
        definition = FactoryDefinition(name, model=model, options=options, redefinition=self.settings.redefinition)
        return _Definer(self, definition, aliases)

    def _ensure_available(self, definition: FactoryDefinition) -> None:
        if self._factories.has(definition.name):
            raise DuplicateDefinitionError("factory", definition.name)

    def _commit(self, definition: FactoryDefinition, aliases: Iterable[str]) -> None:
        self._factories.register(definition)
        for alias in aliases:
            self._factories.register(definition, alias=alias)
            definition.add_alias(alias)
        self._logger.debug("Defined factory %r with %d attribute(s)", definition.name, len(definition))

    def _rollback(self, definition: FactoryDefinition) -> None:
        self._factories.unregister(definition.name, definition)
        for alias in definition.aliases:
            self._factories.unregister(alias, definition)
        self._logger.debug("Discarded factory %r after a failed definition body", definition.name)

    def factory(self, name: str) -> FactoryDefinition:
        return self._factories.get(name)

    def sequence(self, name: str, start: Optional[int] = None, generator: Optional[Callable[[int], Any]] = None) -> Sequence:
        """Register a global sequence; bare declarations named *name* will use it."""
        return self._sequences.register(name, start, generator)

    def next(self, name: str) -> Any:
        return self._sequences.next(name)

    def rewind_sequences(self) -> None:
        self._sequences.rewind()

    def reset(self) -> None:
        """Forget every factory and global sequence."""
        self._factories.clear()
        self._sequences.clear()
        self._logger.debug("Factory set reset")

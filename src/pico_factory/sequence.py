"""Sequences: monotonically increasing counters for unique per-build values.

Provides :class:`Sequence` and the :class:`SequenceRegistry` that holds the
globally named sequences of a :class:`~pico_factory.api.FactorySet`.
"""

import logging
import threading
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from .constants import DEFAULT_SEQUENCE_START
from .exceptions import DuplicateDefinitionError, SequenceNotFoundError

_logger = logging.getLogger(__name__)


def _identity(n: int) -> Any:
    return n


class Sequence:
    """A thread-safe counter that maps each emitted number through a generator.

    The first call to :meth:`next` emits ``generator(start)``, the second
    ``generator(start + 1)``, and so on. A number is never emitted twice until
    :meth:`rewind` is called explicitly.

    Args:
        start: The first number fed to the generator.
        generator: Callable applied to each number; identity by default.

    Example:
        >>> email = Sequence(generator=lambda n: f"person{n}@example.com")
        >>> email.next()
        'person1@example.com'
    """

    __slots__ = ("_start", "_value", "_generator", "_lock")

    def __init__(self, start: int = DEFAULT_SEQUENCE_START, generator: Optional[Callable[[int], Any]] = None) -> None:
        if generator is not None and not callable(generator):
            raise TypeError("Sequence generator must be callable")
        self._start = start
        self._value = start
        self._generator = generator or _identity
        self._lock = threading.Lock()

    @property
    def start(self) -> int:
        return self._start

    def peek(self) -> int:
        """Return the number the next call to :meth:`next` will consume."""
        with self._lock:
            return self._value

    def next(self) -> Any:
        with self._lock:
            n = self._value
            self._value = n + 1
        return self._generator(n)

    def rewind(self) -> None:
        """Reset the counter to its start value."""
        with self._lock:
            self._value = self._start

    def __repr__(self):
        return f"Sequence(start={self._start!r}, next={self._value!r})"


class SequenceRegistry:
    """Name-to-sequence map shared by every factory of one factory set.

    Created once per process or test run and cleared by its owner between
    runs.

    Args:
        default_start: Start value used when :meth:`register` gets none.
    """

    def __init__(self, default_start: int = DEFAULT_SEQUENCE_START) -> None:
        self._default_start = default_start
        self._sequences: Dict[str, Sequence] = {}
        self._lock = threading.RLock()

    @property
    def default_start(self) -> int:
        return self._default_start

    def register(self, name: str, start: Optional[int] = None, generator: Optional[Callable[[int], Any]] = None) -> Sequence:
        """Create and register a global sequence.

        Args:
            name: The sequence name, also the shorthand attribute name that
                picks it up in a declaration body.
            start: First number; the registry default when ``None``.
            generator: Optional callable applied to each number.

        Returns:
            The new :class:`Sequence`.

        Raises:
            DuplicateDefinitionError: If *name* is already registered.
        """
        seq = Sequence(self._default_start if start is None else start, generator)
        with self._lock:
            if name in self._sequences:
                raise DuplicateDefinitionError("sequence", name)
            self._sequences[name] = seq
        _logger.debug("Registered sequence %r starting at %r", name, seq.start)
        return seq

    def lookup(self, name: str) -> Optional[Sequence]:
        """Return the sequence registered under *name*, or ``None``."""
        with self._lock:
            return self._sequences.get(name)

    def get(self, name: str) -> Sequence:
        """Return the sequence registered under *name*.

        Raises:
            SequenceNotFoundError: If no such sequence exists.
        """
        seq = self.lookup(name)
        if seq is None:
            raise SequenceNotFoundError(name)
        return seq

    def next(self, name: str) -> Any:
        return self.get(name).next()

    def names(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._sequences)

    def rewind(self) -> None:
        with self._lock:
            sequences = list(self._sequences.values())
        for seq in sequences:
            seq.rewind()

    def clear(self) -> None:
        with self._lock:
            self._sequences.clear()
        _logger.debug("Cleared sequence registry")

    def __contains__(self, name) -> bool:
        with self._lock:
            return name in self._sequences

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sequences)

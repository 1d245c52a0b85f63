"""Lazy, restartable sequences.

A Stream is built over a snapshot of some collection. Every call to ``iter``
starts again from the beginning of that snapshot, and derived streams
(``filter``, ``map``) stay lazy: nothing is evaluated until iteration.
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Callable,
    Iterable,
    Iterator,
    Optional,
    Tuple,
    Type,
    Union,
    override,
)

from bettertypes.common import Entry, Iterating, require

if TYPE_CHECKING:
    from bettertypes.map import BMap
    from bettertypes.seq import BList
    from bettertypes.set import BSet

__all__ = ["Stream"]


class Stream[T](Iterating[T]):
    """A finite lazy sequence that can be iterated any number of times."""

    def __init__(self, source: Callable[[], Iterator[T]]) -> None:
        """Initialize from a factory producing a fresh iterator per pass.

        Use mk() or empty() rather than calling this directly.

        Args:
            source: Called once per iteration to produce the elements.
        """
        self._source = source

    @staticmethod
    def empty(_ty: Optional[Type[T]] = None) -> Stream[T]:
        """Create a stream with no elements."""
        return Stream(lambda: iter(()))

    @staticmethod
    def mk(values: Iterable[T]) -> Stream[T]:
        """Create a stream over a snapshot of the given values.

        The values are copied immediately, so later changes to the source
        collection are not seen by the stream.

        Args:
            values: The elements of the stream.

        Returns:
            A restartable stream over the copied elements.
        """
        snapshot = tuple(values)
        return Stream(lambda: iter(snapshot))

    @override
    def iter(self) -> Iterator[T]:
        return self._source()

    def filter(self, predicate: Callable[[T], bool]) -> Stream[T]:
        """Keep only the elements satisfying the predicate.

        Args:
            predicate: Called on each element during iteration.

        Returns:
            A new lazy stream.
        """
        require("predicate", predicate)
        return Stream(lambda: (x for x in self.iter() if predicate(x)))

    def map[U](self, fn: Callable[[T], U]) -> Stream[U]:
        """Transform each element.

        Args:
            fn: Called on each element during iteration.

        Returns:
            A new lazy stream of transformed elements.
        """
        require("fn", fn)
        return Stream(lambda: (fn(x) for x in self.iter()))

    def first(self) -> Optional[T]:
        """Return the first element, or None if the stream is empty."""
        for x in self.iter():
            return x
        return None

    def count(self) -> int:
        return sum(1 for _ in self.iter())

    def any_match(self, predicate: Callable[[T], bool]) -> bool:
        return any(predicate(x) for x in self.iter())

    def all_match(self, predicate: Callable[[T], bool]) -> bool:
        return all(predicate(x) for x in self.iter())

    def for_each(self, fn: Callable[[T], None]) -> None:
        for x in self.iter():
            fn(x)

    def to_list(self) -> BList[T]:
        from bettertypes.seq import BList

        return BList.mk(self.iter())

    def to_set(self) -> BSet[T]:
        from bettertypes.set import BSet

        return BSet.mk(self.iter())

    def to_map[K, V](
        self: Stream[Union[Entry[K, V], Tuple[K, V]]],
    ) -> BMap[K, V]:
        """Collect a stream of entries or pairs into a new map.

        Later pairs overwrite earlier ones with the same key.

        Returns:
            A new map holding the collected pairs.

        Raises:
            InvalidArgument: If any key or value is None.
        """
        from bettertypes.map import BMap

        return BMap.mk(self.iter())

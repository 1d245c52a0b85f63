"""Hash-backed mutable set with stream and filter helpers"""

from __future__ import annotations

from collections.abc import MutableSet
from typing import Any, Callable, Iterable, Iterator, Optional, Type, override

from bettertypes.common import Iterating, Sized, require
from bettertypes.stream import Stream

__all__ = ["BSet"]


class BSet[T](MutableSet[T], Sized, Iterating[T]):
    """A set that owns its storage and never shares it.

    Building a BSet from any iterable copies the elements, so a BSet handed
    out as a view is independent of whatever it was built from.
    """

    def __init__(self, values: Optional[Iterable[T]] = None) -> None:
        self._items: set[T] = set() if values is None else set(values)

    @staticmethod
    def empty(_ty: Optional[Type[T]] = None) -> BSet[T]:
        """Create an empty set.

        Args:
            _ty: Optional type hint (unused).

        Returns:
            An empty set instance.
        """
        return BSet()

    @staticmethod
    def mk(values: Iterable[T]) -> BSet[T]:
        """Create a set from an iterable of values.

        Args:
            values: Iterable of values to include in the set.

        Returns:
            A set containing all the given values.
        """
        return BSet(values)

    @override
    def size(self) -> int:
        return len(self._items)

    @override
    def iter(self) -> Iterator[T]:
        return iter(self._items)

    @override
    def __iter__(self) -> Iterator[T]:
        return self.iter()

    @override
    def __len__(self) -> int:
        return self.size()

    def contains(self, value: T) -> bool:
        return value in self._items

    @override
    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    @override
    def add(self, value: T) -> None:
        self._items.add(value)

    @override
    def discard(self, value: T) -> None:
        self._items.discard(value)

    def copy(self) -> BSet[T]:
        return BSet(self._items)

    def filter(self, predicate: Callable[[T], bool]) -> BSet[T]:
        """Return a new set of the elements satisfying the predicate.

        Args:
            predicate: Called once per element.

        Returns:
            A new, independent set.
        """
        require("predicate", predicate)
        return BSet(x for x in self._items if predicate(x))

    def sequence(self) -> Stream[T]:
        """Return a restartable stream over a snapshot of this set."""
        return Stream.mk(self._items)

    @classmethod
    def _from_iterable(cls, it: Iterable[Any]) -> BSet[Any]:
        return cls(it)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._items!r})"

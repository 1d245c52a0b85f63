"""Ordered mutable list with stream and filter helpers.

BList keeps duplicates and insertion order. Like BSet it always copies its
source on construction, which makes it safe to hand out as a value snapshot.
"""

from __future__ import annotations

from collections.abc import MutableSequence
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    List,
    Optional,
    Type,
    Union,
    overload,
    override,
)

from bettertypes.common import Iterating, Sized, require
from bettertypes.stream import Stream

__all__ = ["BList"]


class BList[T](MutableSequence[T], Sized, Iterating[T]):
    """A list that owns its storage and never shares it."""

    def __init__(self, values: Optional[Iterable[T]] = None) -> None:
        self._items: List[T] = [] if values is None else list(values)

    @staticmethod
    def empty(_ty: Optional[Type[T]] = None) -> BList[T]:
        """Create an empty list.

        Args:
            _ty: Optional type hint (unused).

        Returns:
            An empty list instance.
        """
        return BList()

    @staticmethod
    def mk(values: Iterable[T]) -> BList[T]:
        """Create a list from an iterable of values, keeping their order.

        Args:
            values: Iterable of values to include in the list.

        Returns:
            A list containing all the given values in order.
        """
        return BList(values)

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

    @overload
    def __getitem__(self, index: int) -> T: ...
    @overload
    def __getitem__(self, index: slice) -> BList[T]: ...
    def __getitem__(self, index: Union[int, slice]) -> Union[T, BList[T]]:
        if isinstance(index, slice):
            return BList(self._items[index])
        return self._items[index]

    @overload
    def __setitem__(self, index: int, value: T) -> None: ...
    @overload
    def __setitem__(self, index: slice, value: Iterable[T]) -> None: ...
    def __setitem__(self, index: Any, value: Any) -> None:
        self._items[index] = value

    def __delitem__(self, index: Union[int, slice]) -> None:
        del self._items[index]

    @override
    def insert(self, index: int, value: T) -> None:
        self._items.insert(index, value)

    def copy(self) -> BList[T]:
        return BList(self._items)

    def filter(self, predicate: Callable[[T], bool]) -> BList[T]:
        """Return a new list of the elements satisfying the predicate.

        Args:
            predicate: Called once per element, in order.

        Returns:
            A new, independent list.
        """
        require("predicate", predicate)
        return BList(x for x in self._items if predicate(x))

    def sequence(self) -> Stream[T]:
        """Return a restartable stream over a snapshot of this list."""
        return Stream.mk(self._items)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, BList):
            return self._items == other._items
        elif isinstance(other, list):
            return self._items == other
        else:
            return NotImplemented

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._items!r})"

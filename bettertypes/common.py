"""Common utility types and functions for the bettertypes collection library.

This module provides the entry type, the error types, and the small abstract
bases shared by the map, set and list implementations.
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple, Type, Union, override

__all__ = [
    "Entry",
    "EntryType",
    "Impossible",
    "InvalidArgument",
    "Iterating",
    "Sized",
    "TypeSpec",
    "require",
]


type TypeSpec[T] = Union[Type[T], Tuple[Type[T], ...]]
"""A runtime type descriptor: a class or a tuple of classes."""


class Impossible(Exception):
    """Exception raised when encountering theoretically impossible states.

    Used to indicate internal consistency violations in collection operations.
    """

    pass


class InvalidArgument(ValueError):
    """Exception raised when a required argument is missing or malformed.

    This is a programming error on the caller's side. It is always raised
    before any state is changed.
    """

    def __init__(self, name: str, reason: str = "must not be None") -> None:
        """Initialize an InvalidArgument for the named argument.

        Args:
            name: The name of the offending argument.
            reason: Why the argument was rejected.
        """
        super().__init__(f"{name} {reason}")
        self.name = name


def require[T](name: str, value: Optional[T]) -> T:
    """Return the value, or raise InvalidArgument if it is None.

    Args:
        name: The argument name to report.
        value: The argument value.

    Returns:
        The value, narrowed to non-optional.

    Raises:
        InvalidArgument: If the value is None.
    """
    if value is None:
        raise InvalidArgument(name)
    return value


class Sized(metaclass=ABCMeta):
    @abstractmethod
    def size(self) -> int: ...

    def null(self) -> bool:
        return self.size() == 0

    def __bool__(self) -> bool:
        return not self.null()

    def __len__(self) -> int:
        return self.size()


class Iterating[U](metaclass=ABCMeta):
    @abstractmethod
    def iter(self) -> Iterator[U]: ...

    def list(self) -> List[U]:
        return list(self.iter())

    def __iter__(self) -> Iterator[U]:
        return self.iter()


@dataclass(frozen=True)
class Entry[K, V]:
    """An immutable key-value pair.

    Equality is structural over both key and value. The hash only covers the
    key, so entries holding unhashable values can still live in a set.
    """

    key: K
    value: V

    @override
    def __hash__(self) -> int:
        return hash(self.key)

    def __iter__(self) -> Iterator[Any]:
        """Unpack like a pair: ``key, value = entry``."""
        yield self.key
        yield self.value

    def pair(self) -> Tuple[K, V]:
        return (self.key, self.value)

    @staticmethod
    def of(item: Union[Entry[K, V], Tuple[K, V]]) -> Entry[K, V]:
        """Coerce an entry or a 2-tuple into an entry.

        Args:
            item: An Entry or a (key, value) tuple.

        Returns:
            The item as an Entry.

        Raises:
            InvalidArgument: If the item is neither an Entry nor a pair.
        """
        match item:
            case Entry():
                return item
            case (key, value):
                return Entry(key, value)
            case _:
                raise InvalidArgument("entry", f"is not a key-value pair: {item!r}")


@dataclass(frozen=True)
class EntryType[K, V]:
    """Type descriptor for an entry: a key type and a value type.

    Used to narrow a map on both positions at once.
    """

    key_type: TypeSpec[K]
    value_type: TypeSpec[V]

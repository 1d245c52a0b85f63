"""Hash-backed mutable map with default-insert retrieval, snapshot views and
type-narrowing filters"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    Optional,
    Tuple,
    Union,
    cast,
    override,
)

from bettertypes.common import (
    Entry,
    EntryType,
    InvalidArgument,
    Sized,
    TypeSpec,
    require,
)
from bettertypes.config import DEFAULT_CONFIG, MapConfig, TypeMatch
from bettertypes.seq import BList
from bettertypes.set import BSet
from bettertypes.stream import Stream

__all__ = ["BMap", "PairSource"]

_LOG = logging.getLogger(__name__)


type PairSource[K, V] = Union[
    Mapping[K, V],
    Iterable[Entry[K, V]],
    Iterable[Tuple[K, V]],
]
"""Anything a map can be populated from."""


def _pairs[K, V](source: PairSource[K, V]) -> Iterator[Tuple[K, V]]:
    if isinstance(source, Mapping):
        yield from source.items()
    elif hasattr(source, "keys"):
        for key in source.keys():
            yield (key, source[key])
    else:
        for item in source:
            entry = Entry.of(item)
            yield (entry.key, entry.value)


def _build_store[K, V](source: Optional[PairSource[K, V]]) -> Dict[K, V]:
    """Validate every pair into a fresh dict. Last write wins."""
    store: Dict[K, V] = {}
    if source is None:
        return store
    for key, value in _pairs(source):
        store[require("key", key)] = require("value", value)
    return store


class BMap[K, V](MutableMapping[K, V], Sized):
    """A map that rejects None keys and values and owns its storage.

    Views (keys, values, entries, items) are snapshot copies. Filters build
    new maps with their own storage, so a filter result and its source can
    be mutated independently.
    """

    def __init__(
        self,
        source: Optional[PairSource[K, V]] = None,
        /,
        config: Optional[MapConfig] = None,
    ) -> None:
        """Create a map, optionally populated from a source of pairs.

        Args:
            source: A mapping, or an iterable of entries or (key, value)
                tuples (a Stream works too). Later pairs overwrite earlier
                ones with the same key.
            config: Settings for this map and every map derived from it.
                Copied from the source when it is a BMap and none is given.

        Raises:
            InvalidArgument: If any key or value is None, or an item is not a
                pair. Nothing is constructed in that case.
        """
        if config is None:
            config = source._config if isinstance(source, BMap) else DEFAULT_CONFIG
        self._config = config
        self._store: Dict[K, V] = _build_store(source)

    @staticmethod
    def empty(config: Optional[MapConfig] = None) -> BMap[K, V]:
        return BMap(config=config)

    @staticmethod
    def of(*entries: Union[Entry[K, V], Tuple[K, V]]) -> BMap[K, V]:
        """Create a map from literal entries or pairs.

        Example:
            >>> BMap.of(("a", 1), Entry("b", 2)).size()
            2
        """
        return BMap(entries)

    @staticmethod
    def mk(
        source: PairSource[K, V], config: Optional[MapConfig] = None
    ) -> BMap[K, V]:
        """Create a map from a mapping or an iterable of pairs."""
        return BMap(source, config=config)

    @property
    def config(self) -> MapConfig:
        return self._config

    def _derive[L, W](self, pairs: Iterable[Tuple[L, W]]) -> BMap[L, W]:
        result: BMap[L, W] = BMap(config=self._config)
        result._store = dict(pairs)
        return result

    @override
    def size(self) -> int:
        return len(self._store)

    @override
    def __len__(self) -> int:
        return self.size()

    @override
    def __iter__(self) -> Iterator[K]:
        return iter(self._store)

    @override
    def __getitem__(self, key: K) -> V:
        return self._store[key]

    @override
    def __setitem__(self, key: K, value: V) -> None:
        self._store[require("key", key)] = require("value", value)

    @override
    def __delitem__(self, key: K) -> None:
        del self._store[key]

    @override
    def __contains__(self, key: object) -> bool:
        return key in self._store

    def contains(self, key: K) -> bool:
        return key in self._store

    @override
    def get(self, key: K, default: Any = None) -> Any:
        """Look up a key without side effects.

        Args:
            key: The key to look up.
            default: Returned when the key is absent.

        Returns:
            The stored value, or default when the key is absent.
        """
        return self._store.get(key, default)

    def lookup(self, key: K) -> Optional[V]:
        return self._store.get(key)

    def put(self, key: K, value: V) -> Optional[V]:
        """Insert or overwrite a pair.

        Args:
            key: The key, not None.
            value: The value, not None.

        Returns:
            The value previously stored under the key, or None.

        Raises:
            InvalidArgument: If key or value is None.
        """
        require("key", key)
        require("value", value)
        previous = self._store.get(key)
        self._store[key] = value
        return previous

    def remove(self, key: K) -> Optional[V]:
        """Remove a key if present and return its value, or None."""
        return self._store.pop(key, None)

    @override
    def update(  # type: ignore[override]
        self, other: Optional[PairSource[K, V]] = None, /, **kwargs: V
    ) -> None:
        """Insert or overwrite every pair from a source and keyword arguments.

        The whole batch is validated before anything is stored, so a rejected
        pair leaves the map as it was.

        Raises:
            InvalidArgument: If any key or value is None, or an item is not a
                pair.
        """
        staged = _build_store(other)
        staged.update(_build_store(kwargs))
        self._store.update(staged)

    @override
    def clear(self) -> None:
        self._store.clear()

    def copy(self) -> BMap[K, V]:
        """Shallow copy: a new store holding the same key and value objects."""
        return self._derive(self._store.items())

    def __copy__(self) -> BMap[K, V]:
        return self.copy()

    def get_or_default_put(self, key: K, default_value: V) -> V:
        """Get the value of a key, inserting the default if it is absent.

        When the key is present its value is returned and nothing changes.
        Otherwise the default is stored under the key and returned. The
        returned object is the stored one, so changes made to it through the
        return value are seen by this map.

        Args:
            key: Key to query, not None.
            default_value: Value put in the key's place, then returned. Not
                None.

        Returns:
            The value of the key if found, the default value if not. Never
            None.

        Raises:
            InvalidArgument: If key or default_value is None. The map is left
                unchanged.
        """
        require("key", key)
        require("default_value", default_value)
        if key in self._store:
            return self._store[key]
        self._store[key] = default_value
        return default_value

    @override
    def keys(self) -> BSet[K]:  # type: ignore[override]
        return BSet(self._store.keys())

    @override
    def values(self) -> BList[V]:  # type: ignore[override]
        return BList(self._store.values())

    def entries(self) -> BSet[Entry[K, V]]:
        return BSet(Entry(k, v) for k, v in self._store.items())

    @override
    def items(self) -> BList[Tuple[K, V]]:  # type: ignore[override]
        return BList(self._store.items())

    def entry_sequence(self) -> Stream[Entry[K, V]]:
        """Return a restartable stream over a snapshot of the entries."""
        return self.entries().sequence()

    def key_sequence(self) -> Stream[K]:
        """Return a restartable stream over a snapshot of the keys."""
        return self.keys().sequence()

    def value_sequence(self) -> Stream[V]:
        """Return a restartable stream over a snapshot of the values."""
        return self.values().sequence()

    def filter_by_entry(self, predicate: Callable[[Entry[K, V]], bool]) -> BMap[K, V]:
        """Gets a filtered map, filtered by entry.

        Args:
            predicate: Called with each entry; entries it accepts are kept.
                Anything it raises propagates and no map is produced.

        Returns:
            A new map with its own storage.
        """
        require("predicate", predicate)
        return self._keep(lambda k, v: predicate(Entry(k, v)))

    def filter_by_key(self, predicate: Callable[[K], bool]) -> BMap[K, V]:
        """Gets a filtered map, filtered by key."""
        require("predicate", predicate)
        return self._keep(lambda k, _: predicate(k))

    def filter_by_value(self, predicate: Callable[[V], bool]) -> BMap[K, V]:
        """Gets a filtered map, filtered by value."""
        require("predicate", predicate)
        return self._keep(lambda _, v: predicate(v))

    def filter_by_value_type[W](
        self, value_type: TypeSpec[W], match: Optional[TypeMatch] = None
    ) -> BMap[K, W]:
        """Filters this map by type of value.

        Entries whose value fails the type test are dropped, not errored.

        Args:
            value_type: A class or tuple of classes.
            match: Type test to use, defaulting to the map's config.

        Returns:
            A new map whose values all pass the type test.
        """
        test = self._type_test("value_type", value_type, match)
        return cast("BMap[K, W]", self._keep(lambda _, v: test(v)))

    def filter_by_key_type[L](
        self, key_type: TypeSpec[L], match: Optional[TypeMatch] = None
    ) -> BMap[L, V]:
        """Filters this map by type of key.

        Entries whose key fails the type test are dropped, not errored.
        """
        test = self._type_test("key_type", key_type, match)
        return cast("BMap[L, V]", self._keep(lambda k, _: test(k)))

    def filter_by_entry_type[L, W](
        self, entry_type: EntryType[L, W], match: Optional[TypeMatch] = None
    ) -> BMap[L, W]:
        """Filters this map by the key and value types of an entry descriptor.

        Args:
            entry_type: The key and value types both positions must pass.
            match: Type test to use, defaulting to the map's config.

        Returns:
            A new map whose keys and values all pass their type tests.
        """
        require("entry_type", entry_type)
        return self.filter_by_key_and_value_types(
            entry_type.key_type, entry_type.value_type, match
        )

    def filter_by_key_and_value_types[L, W](
        self,
        key_type: TypeSpec[L],
        value_type: TypeSpec[W],
        match: Optional[TypeMatch] = None,
    ) -> BMap[L, W]:
        """Filters this map by type of key and type of value together."""
        key_test = self._type_test("key_type", key_type, match)
        value_test = self._type_test("value_type", value_type, match)
        kept = self._keep(lambda k, v: key_test(k) and value_test(v))
        return cast("BMap[L, W]", kept)

    def _type_test(
        self, name: str, ty: Optional[TypeSpec[Any]], match: Optional[TypeMatch]
    ) -> Callable[[Any], bool]:
        require(name, ty)
        classes = ty if isinstance(ty, tuple) else (ty,)
        if not classes or not all(isinstance(c, type) for c in classes):
            raise InvalidArgument(name, f"is not a type or tuple of types: {ty!r}")
        policy = self._config.type_match if match is None else match
        return policy.test(ty)

    def _keep(self, accept: Callable[[K, V], bool]) -> BMap[K, V]:
        # Fully evaluated before the result map is created.
        kept = [(k, v) for k, v in self._store.items() if accept(k, v)]
        _LOG.debug("filter kept %d of %d entries", len(kept), len(self._store))
        return self._derive(kept)

    @override
    def __eq__(self, other: Any) -> bool:
        if isinstance(other, BMap):
            return self._store == other._store
        elif isinstance(other, Mapping):
            return self._store == dict(other.items())
        else:
            return NotImplemented

    def to_dict(self) -> Dict[K, V]:
        return dict(self._store)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._store!r})"

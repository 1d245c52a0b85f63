"""Tests for BMap."""

import copy
import logging

import pytest

from bettertypes.common import Entry, EntryType, InvalidArgument
from bettertypes.config import MapConfig, TypeMatch
from bettertypes.map import BMap
from bettertypes.seq import BList
from bettertypes.set import BSet
from bettertypes.stream import Stream


def abc_map() -> BMap[str, int]:
    return BMap({"a": 1, "b": 2, "c": 3})


def test_empty_map():
    """Test creating an empty map"""
    bmap = BMap[str, int]()
    assert bmap.null()
    assert bmap.size() == 0
    assert len(bmap) == 0
    assert not bmap
    assert BMap.empty() == {}


def test_construct_from_dict():
    bmap = BMap({"a": 1, "b": 2})
    assert bmap["a"] == 1
    assert bmap.get("b") == 2
    assert bmap.to_dict() == {"a": 1, "b": 2}


def test_construct_from_pairs_and_entries():
    bmap = BMap([("a", 1), Entry("b", 2)])
    assert bmap == {"a": 1, "b": 2}


def test_construct_of_literal_pairs():
    bmap = BMap.of(("a", 1), Entry("b", 2), ("a", 3))
    # Last write wins
    assert bmap == {"a": 3, "b": 2}


def test_construct_from_stream():
    stream = Stream.mk([("x", 10), ("y", 20)])
    assert BMap(stream) == {"x": 10, "y": 20}
    assert stream.to_map() == {"x": 10, "y": 20}


def test_construct_from_set_of_entries():
    entries = BSet.mk([Entry("a", 1), Entry("b", 2)])
    assert BMap.mk(entries) == {"a": 1, "b": 2}


def test_copy_is_shallow_and_independent():
    inner = [1, 2]
    bmap = BMap({"k": inner})
    dup = bmap.copy()
    assert dup == bmap
    assert dup is not bmap

    dup["other"] = [3]
    assert "other" not in bmap
    # Shallow: value objects are shared
    assert dup["k"] is inner
    assert copy.copy(bmap) == bmap


def test_copy_constructor_keeps_config():
    config = MapConfig(type_match=TypeMatch.Exact)
    bmap = BMap({"a": 1}, config=config)
    assert BMap(bmap).config == config
    assert bmap.copy().config == config


@pytest.mark.parametrize(
    "pairs",
    [
        [("a", 1), (None, 2)],
        [("a", 1), ("b", None)],
        [Entry("a", None)],
    ],
)
def test_construct_rejects_none(pairs):
    with pytest.raises(InvalidArgument):
        BMap(pairs)


def test_construct_rejects_none_in_mapping():
    with pytest.raises(InvalidArgument):
        BMap({"a": 1, "b": None})


def test_construct_rejects_non_pairs():
    with pytest.raises(InvalidArgument):
        BMap(["abc"])
    with pytest.raises(InvalidArgument):
        BMap([("a", 1, 2)])


def test_get_absent_returns_none():
    bmap = abc_map()
    assert bmap.get("z") is None
    assert bmap.lookup("z") is None
    assert bmap.get("z", 0) == 0
    assert bmap.size() == 3
    with pytest.raises(KeyError):
        bmap["z"]


def test_get_or_default_put_absent_key():
    bmap = abc_map()
    assert bmap.get_or_default_put("z", 9) == 9
    assert bmap.get("z") == 9
    assert bmap.size() == 4


def test_get_or_default_put_present_key():
    bmap = abc_map()
    assert bmap.get_or_default_put("a", 100) == 1
    assert bmap == {"a": 1, "b": 2, "c": 3}


def test_get_or_default_put_aliases_stored_value():
    bmap: BMap[str, list] = BMap()
    bmap.get_or_default_put("xs", []).append(1)
    bmap.get_or_default_put("xs", []).append(2)
    assert bmap["xs"] == [1, 2]


def test_get_or_default_put_rejects_none():
    bmap = abc_map()
    with pytest.raises(InvalidArgument):
        bmap.get_or_default_put(None, 1)
    with pytest.raises(InvalidArgument):
        bmap.get_or_default_put("z", None)
    assert "z" not in bmap
    assert bmap.size() == 3


def test_mutation_rejects_none():
    bmap = abc_map()
    with pytest.raises(InvalidArgument):
        bmap["z"] = None
    with pytest.raises(InvalidArgument):
        bmap[None] = 1
    with pytest.raises(InvalidArgument):
        bmap.put("z", None)
    with pytest.raises(InvalidArgument):
        bmap.update({"z": None})
    with pytest.raises(InvalidArgument):
        bmap.setdefault("z")
    assert bmap == {"a": 1, "b": 2, "c": 3}


def test_update_rejected_batch_leaves_map_unchanged():
    bmap = BMap({"a": 1})
    with pytest.raises(InvalidArgument):
        bmap.update([("b", 2), ("c", None)])
    with pytest.raises(InvalidArgument):
        bmap.update({"b": 2}, c=None)
    with pytest.raises(InvalidArgument):
        bmap.update([("b", 2), ("c",)])
    assert bmap == {"a": 1}


def test_update_accepts_mappings_pairs_and_kwargs():
    bmap = BMap({"a": 1})
    bmap.update({"b": 2})
    bmap.update([("c", 3), Entry("d", 4)])
    bmap.update(BMap({"a": 10}), e=5)
    bmap.update()
    assert bmap == {"a": 10, "b": 2, "c": 3, "d": 4, "e": 5}


def test_put_and_remove():
    bmap = abc_map()
    assert bmap.put("a", 10) == 1
    assert bmap.put("d", 4) is None
    assert bmap.remove("d") == 4
    assert bmap.remove("d") is None
    del bmap["b"]
    assert bmap == {"a": 10, "c": 3}
    assert bmap.pop("c") == 3
    bmap.clear()
    assert bmap.null()


def test_iteration_yields_keys():
    assert sorted(abc_map()) == ["a", "b", "c"]
    assert dict(abc_map()) == {"a": 1, "b": 2, "c": 3}


def test_views_are_snapshots():
    bmap = abc_map()
    keys = bmap.keys()
    values = bmap.values()
    entries = bmap.entries()
    items = bmap.items()

    bmap["d"] = 4
    del bmap["a"]

    assert keys == {"a", "b", "c"}
    assert sorted(values) == [1, 2, 3]
    assert entries == {Entry("a", 1), Entry("b", 2), Entry("c", 3)}
    assert sorted(items) == [("a", 1), ("b", 2), ("c", 3)]


def test_mutating_views_leaves_map_alone():
    bmap = abc_map()
    bmap.keys().add("z")
    bmap.values().append(99)
    bmap.entries().clear()
    assert bmap == {"a": 1, "b": 2, "c": 3}


def test_view_types():
    bmap = abc_map()
    assert isinstance(bmap.keys(), BSet)
    assert isinstance(bmap.values(), BList)
    assert isinstance(bmap.entries(), BSet)


def test_values_keep_duplicates():
    bmap = BMap({"a": 1, "b": 1, "c": 2})
    assert sorted(bmap.values()) == [1, 1, 2]


def test_entries_with_unhashable_values():
    bmap = BMap({"a": [1], "b": [2]})
    assert Entry("a", [1]) in bmap.entries()
    assert Entry("a", [2]) not in bmap.entries()


def test_sequences():
    bmap = abc_map()
    entry_seq = bmap.entry_sequence()
    key_seq = bmap.key_sequence()
    value_seq = bmap.value_sequence()
    bmap["d"] = 4

    assert sorted(key_seq) == ["a", "b", "c"]
    assert sorted(value_seq) == [1, 2, 3]
    assert entry_seq.count() == 3
    # Restartable
    assert sorted(key_seq) == ["a", "b", "c"]


def test_empty_sequences():
    bmap: BMap[str, int] = BMap()
    assert bmap.keys() == set()
    assert list(bmap.entry_sequence()) == []
    assert bmap.entry_sequence().first() is None


def test_filter_by_value():
    bmap = abc_map()
    result = bmap.filter_by_value(lambda v: v > 1)
    assert result == {"b": 2, "c": 3}
    assert bmap == {"a": 1, "b": 2, "c": 3}


def test_filter_by_key():
    result = abc_map().filter_by_key(lambda k: k != "b")
    assert result == {"a": 1, "c": 3}


def test_filter_by_entry():
    result = abc_map().filter_by_entry(lambda e: e.key == "a" or e.value == 3)
    assert result == {"a": 1, "c": 3}


def test_filter_result_is_independent():
    bmap = abc_map()
    result = bmap.filter_by_value(lambda v: v > 1)

    result["z"] = 26
    del result["b"]
    assert bmap == {"a": 1, "b": 2, "c": 3}

    bmap["c"] = 30
    assert result == {"c": 3, "z": 26}


def test_filter_keeps_config():
    config = MapConfig(type_match=TypeMatch.Exact)
    bmap = BMap({"a": 1}, config=config)
    assert bmap.filter_by_key(lambda _: True).config == config


def test_filter_predicate_failure_propagates():
    bmap = abc_map()

    def explode(v: int) -> bool:
        if v == 2:
            raise RuntimeError("boom")
        return True

    with pytest.raises(RuntimeError, match="boom"):
        bmap.filter_by_value(explode)
    assert bmap == {"a": 1, "b": 2, "c": 3}


def test_filter_rejects_none_predicate():
    with pytest.raises(InvalidArgument):
        abc_map().filter_by_value(None)


def test_filter_by_value_type():
    bmap = BMap({"a": 1, "b": "two", "c": 3.0, "d": True})
    assert bmap.filter_by_value_type(str) == {"b": "two"}
    # bool is a subclass of int
    assert bmap.filter_by_value_type(int) == {"a": 1, "d": True}
    assert bmap.filter_by_value_type((int, float)).size() == 3
    assert bmap.filter_by_value_type(bytes).null()


def test_filter_by_value_type_exact():
    bmap = BMap({"a": 1, "d": True})
    assert bmap.filter_by_value_type(int, match=TypeMatch.Exact) == {"a": 1}
    exact = BMap(bmap, config=MapConfig(type_match=TypeMatch.Exact))
    assert exact.filter_by_value_type(int) == {"a": 1}
    assert exact.filter_by_value_type(int, match=TypeMatch.Instance).size() == 2


def test_filter_by_key_type():
    bmap = BMap({"a": 1, 2: 2, (3,): 3})
    assert bmap.filter_by_key_type(str) == {"a": 1}
    assert bmap.filter_by_key_type(tuple) == {(3,): 3}


def test_filter_by_key_and_value_types():
    bmap = BMap({"a": 1, "b": "x", 3: 3, 4: "y"})
    assert bmap.filter_by_key_and_value_types(str, int) == {"a": 1}
    assert bmap.filter_by_entry_type(EntryType(int, str)) == {4: "y"}


def test_filter_by_type_rejects_bad_descriptor():
    bmap = abc_map()
    with pytest.raises(InvalidArgument):
        bmap.filter_by_value_type(None)
    with pytest.raises(InvalidArgument):
        bmap.filter_by_key_type("str")
    with pytest.raises(InvalidArgument):
        bmap.filter_by_entry_type(None)
    with pytest.raises(InvalidArgument):
        bmap.filter_by_value_type((int, "x"))
    with pytest.raises(InvalidArgument):
        bmap.filter_by_value_type((int, "x"), match=TypeMatch.Exact)
    with pytest.raises(InvalidArgument):
        bmap.filter_by_key_type(())
    with pytest.raises(InvalidArgument):
        bmap.filter_by_entry_type(EntryType(str, (int, None)))


def test_filter_logs_kept_count(caplog):
    caplog.set_level(logging.DEBUG, logger="bettertypes.map")
    abc_map().filter_by_value(lambda v: v > 1)
    assert "filter kept 2 of 3 entries" in caplog.text


def test_equality_and_repr():
    assert abc_map() == abc_map()
    assert abc_map() != {"a": 1}
    assert abc_map() != [("a", 1)]
    assert repr(BMap({"a": 1})) == "BMap({'a': 1})"

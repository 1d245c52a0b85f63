from bettertypes.common import Entry, EntryType, Impossible, InvalidArgument
from bettertypes.config import DEFAULT_CONFIG, MapConfig, TypeMatch
from bettertypes.map import BMap
from bettertypes.seq import BList
from bettertypes.set import BSet
from bettertypes.stream import Stream

__all__ = [
    "BList",
    "BMap",
    "BSet",
    "DEFAULT_CONFIG",
    "Entry",
    "EntryType",
    "Impossible",
    "InvalidArgument",
    "MapConfig",
    "Stream",
    "TypeMatch",
]

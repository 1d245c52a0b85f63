"""Configuration for bettertypes collections.

Holds the policy used by the type-narrowing filters and a helper for setting
up logging in applications that use the library.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum, auto, unique
from typing import Any, Callable, Optional

from bettertypes.common import Impossible, InvalidArgument, TypeSpec

__all__ = [
    "DEFAULT_CONFIG",
    "ENV_TYPE_MATCH",
    "MapConfig",
    "TypeMatch",
    "configure_logging",
]


ENV_TYPE_MATCH = "BETTERTYPES_TYPE_MATCH"


@unique
class TypeMatch(Enum):
    """How a runtime value is tested against a type descriptor."""

    Instance = auto()  # isinstance: subclasses pass
    Exact = auto()  # type(value) must be the class itself

    @staticmethod
    def parse(name: str) -> TypeMatch:
        """Parse a case-insensitive policy name.

        Args:
            name: Either "instance" or "exact".

        Returns:
            The matching TypeMatch.

        Raises:
            InvalidArgument: If the name is unknown.
        """
        for member in TypeMatch:
            if member.name.lower() == name.strip().lower():
                return member
        raise InvalidArgument("type_match", f"is not a known policy: {name!r}")

    def test(self, ty: TypeSpec[Any]) -> Callable[[Any], bool]:
        """Build a predicate that checks values against the descriptor.

        Args:
            ty: A class or a tuple of classes.

        Returns:
            A predicate returning True for values that pass the test.
        """
        match self:
            case TypeMatch.Instance:
                return lambda value: isinstance(value, ty)
            case TypeMatch.Exact:
                classes = ty if isinstance(ty, tuple) else (ty,)
                return lambda value: type(value) in classes
            case _:
                raise Impossible


@dataclass(frozen=True)
class MapConfig:
    """Per-map settings, inherited by every map derived from it."""

    type_match: TypeMatch = TypeMatch.Instance

    @staticmethod
    def from_env(default: Optional[MapConfig] = None) -> MapConfig:
        """Read the configuration from the environment.

        Args:
            default: Settings used for anything not set in the environment.

        Returns:
            The resulting configuration.
        """
        base = DEFAULT_CONFIG if default is None else default
        raw = os.environ.get(ENV_TYPE_MATCH)
        if raw is None:
            return base
        return MapConfig(type_match=TypeMatch.parse(raw))


DEFAULT_CONFIG = MapConfig()


def configure_logging(log_level: str) -> None:
    """Configure root logging for an application using this library.

    The library itself never calls this; it only logs through module loggers.

    Args:
        log_level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING').
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s",
        level=log_level,
    )

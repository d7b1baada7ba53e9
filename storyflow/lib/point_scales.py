"""
Point scales: the named sets of estimate values a project may use.

A project refers to its scale by name (Project.point_scale). The scale itself
is resolved late, at validation time, through a PointScaleRegistry so that
story data never embeds scale values.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping


class UnknownPointScale(LookupError):
    """A project's point_scale name does not resolve to a configured scale."""

    def __init__(self, name: str | None):
        self.name = name
        super().__init__(f"Unknown point scale: {name!r}")


@dataclass(frozen=True)
class PointScale:
    """An ordered, immutable set of permitted estimate values."""
    name: str
    values: tuple

    def __contains__(self, value) -> bool:
        # bool is an int subclass; True must not pass as an estimate of 1
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return value in self.values

    def __iter__(self):
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


DEFAULT_POINT_SCALE = "fibonacci"

BUILTIN_POINT_SCALES = {
    "linear": (0, 1, 2, 3),
    "fibonacci": (0, 1, 2, 3, 5, 8, 13, 21),
    "powers_of_two": (0, 1, 2, 4, 8, 16),
}


class PointScaleRegistry:
    """Read-only lookup of point scales by name."""

    def __init__(self, scales: Mapping[str, Iterable] | None = None):
        source = BUILTIN_POINT_SCALES if scales is None else scales
        self._scales = {
            name: PointScale(name, tuple(values)) for name, values in source.items()
        }

    def resolve(self, name: str | None) -> PointScale:
        """Return the scale called `name`.

        Raises:
            UnknownPointScale: If no scale with that name is configured
        """
        if name is None or name not in self._scales:
            raise UnknownPointScale(name)
        return self._scales[name]

    def names(self) -> list[str]:
        return list(self._scales)

    def __contains__(self, name: str) -> bool:
        return name in self._scales


def default_registry() -> PointScaleRegistry:
    return PointScaleRegistry()

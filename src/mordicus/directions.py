"""Cardinal directions, grid coordinates, and move directives."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from mordicus.units import CellType


class Direction(enum.Enum):
    """Cardinal movement directions with (x_delta, y_delta) values.

    Member order is significant: neighbor scans walk Up, Right, Down, Left.
    """

    UP = (0, -1)
    RIGHT = (1, 0)
    DOWN = (0, 1)
    LEFT = (-1, 0)

    @classmethod
    def from_name(cls, name: str) -> Direction:
        """Parse ``"up"``, ``"ArrowUp"``, ``"UP"`` and similar spellings."""
        key = name.strip().upper()
        if key.startswith("ARROW"):
            key = key[len("ARROW"):]
        try:
            return cls[key]
        except KeyError as exc:
            raise ValueError(f"Unknown direction: {name!r}") from exc


class Coordinates(NamedTuple):
    """A grid position: ``x`` is the column, ``y`` the row."""

    x: int
    y: int


def forward_position(
    pos: Coordinates, direction: Direction, n: int = 1,
) -> Coordinates:
    """Step *n* cells from *pos* in *direction*. No bounds check."""
    dx, dy = direction.value
    return Coordinates(pos.x + dx * n, pos.y + dy * n)


@dataclass(frozen=True)
class Move:
    """Relocate the cell at ``source`` onto every coordinate in ``targets``.

    ``replace_with`` overrides the type written to the targets; when unset
    the source's current type is copied. The source is always cleared.
    """

    source: Coordinates
    targets: tuple[Coordinates, ...]
    replace_with: CellType | None = None

    @classmethod
    def single(
        cls,
        source: Coordinates,
        target: Coordinates,
        replace_with: CellType | None = None,
    ) -> Move:
        return cls(source, (target,), replace_with)

    def to_dict(self) -> dict:
        """Serialize the move to a dictionary."""
        return {
            "source": list(self.source),
            "targets": [list(t) for t in self.targets],
            "replace_with": (
                self.replace_with.symbol if self.replace_with is not None else None
            ),
        }

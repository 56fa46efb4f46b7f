"""Cell types and the taxonomy sets the rules engine consults."""

from __future__ import annotations

import enum

from mordicus.directions import Direction


class CellType(enum.IntEnum):
    """Integer codes stored in the grid array."""

    EMPTY = 0
    PLAYER = 1
    COIN = 2
    BANANA = 3
    RED_GORILLA = 4
    BLUE_GORILLA = 5
    SATIATED_GORILLA = 6
    GREEN_BLOCK = 7
    RED_BLOCK = 8
    ARROW_UP = 9
    ARROW_RIGHT = 10
    ARROW_DOWN = 11
    ARROW_LEFT = 12

    @property
    def symbol(self) -> str:
        """Level-file symbol for this cell type."""
        return _SYMBOLS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> CellType:
        try:
            return _BY_SYMBOL[symbol]
        except KeyError as exc:
            raise ValueError(f"Unknown cell symbol: {symbol!r}") from exc


_VS16 = "\ufe0f"

_SYMBOLS: dict[CellType, str] = {
    CellType.EMPTY: "\u2b1b",
    CellType.PLAYER: "\U0001f62e",
    CellType.COIN: "\U0001f7e1",
    CellType.BANANA: "\U0001f34c",
    CellType.RED_GORILLA: "\U0001f98d",
    CellType.BLUE_GORILLA: "\U0001f435",
    CellType.SATIATED_GORILLA: "\U0001f648",
    CellType.GREEN_BLOCK: "\U0001f7e9",
    CellType.RED_BLOCK: "\U0001f7e5",
    CellType.ARROW_UP: "\u2b06" + _VS16,
    CellType.ARROW_RIGHT: "\u27a1" + _VS16,
    CellType.ARROW_DOWN: "\u2b07" + _VS16,
    CellType.ARROW_LEFT: "\u2b05" + _VS16,
}

_BY_SYMBOL: dict[str, CellType] = {s: t for t, s in _SYMBOLS.items()}
# Arrows typed without the emoji variation selector.
_BY_SYMBOL.update(
    {s.rstrip(_VS16): t for t, s in _SYMBOLS.items() if s.endswith(_VS16)}
)


# Arrow type -> the direction it drifts in, in Up, Right, Down, Left order.
ARROW_DIRECTIONS: dict[CellType, Direction] = {
    CellType.ARROW_UP: Direction.UP,
    CellType.ARROW_RIGHT: Direction.RIGHT,
    CellType.ARROW_DOWN: Direction.DOWN,
    CellType.ARROW_LEFT: Direction.LEFT,
}

ARROWS: frozenset[CellType] = frozenset(ARROW_DIRECTIONS)
ATTACKERS: frozenset[CellType] = frozenset(
    {CellType.RED_GORILLA, CellType.BLUE_GORILLA}
)
MOVE_BLOCKERS: frozenset[CellType] = frozenset(
    {CellType.RED_BLOCK, CellType.SATIATED_GORILLA}
)
# A push chain may run onto a coin, which the last pushed cell overwrites.
PUSH_BLOCKERS: frozenset[CellType] = MOVE_BLOCKERS | ATTACKERS
MOVABLES: frozenset[CellType] = ARROWS | {CellType.BANANA, CellType.GREEN_BLOCK}

PICKUPS: frozenset[CellType] = frozenset({CellType.COIN, CellType.BANANA})
# The player walks onto these without pushing.
FREE_MOVE_TARGETS: frozenset[CellType] = frozenset(
    {CellType.EMPTY, CellType.COIN}
)
# Gorillas advance onto these neighbors.
PREY: frozenset[CellType] = frozenset({CellType.PLAYER, CellType.BANANA})

# Type a gorilla takes after it moves; missing means unchanged.
SATIATED_FORM: dict[CellType, CellType] = {
    CellType.BLUE_GORILLA: CellType.SATIATED_GORILLA,
}
# Passive turns advance blue gorillas before red ones.
GORILLA_ORDER: tuple[CellType, ...] = (
    CellType.BLUE_GORILLA,
    CellType.RED_GORILLA,
)
# What colliding arrows leave behind.
COLLISION_DEBRIS = CellType.RED_BLOCK

"""Puzzle resolution engine: active moves and chained passive turns.

Every function here is pure. Snapshots go in, new snapshots come out, and
nothing is mutated in place. The caller owns the current snapshot and is
expected to drain a returned queue before asking for the next move.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field, replace

from mordicus import units
from mordicus.directions import Coordinates, Direction, Move, forward_position
from mordicus.grid import Grid, grids_equal
from mordicus.units import CellType

logger = logging.getLogger(__name__)

# Bonus spent by every step the player takes.
FREE_MOVE_COST = 5


class MissingPlayerError(AssertionError):
    """Raised when an operation that needs a live player gets a grid without one."""


@dataclass(frozen=True)
class LevelSnapshot:
    """The complete state the engine operates on."""

    grid: Grid
    bonus: int
    lives: int

    def to_dict(self) -> dict:
        return {
            "grid": self.grid.to_symbols(),
            "bonus": self.bonus,
            "lives": self.lives,
        }


@dataclass(frozen=True)
class StateTransition(LevelSnapshot):
    """A snapshot plus the moves that produced it, for the animator."""

    moves: tuple[Move, ...] = field(default=())

    def snapshot(self) -> LevelSnapshot:
        return LevelSnapshot(grid=self.grid, bonus=self.bonus, lives=self.lives)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["moves"] = [m.to_dict() for m in self.moves]
        return data


# -- predicates -----------------------------------------------------------------


def is_player_dead(grid: Grid) -> bool:
    return grid.find_player() is None


def is_success(grid: Grid) -> bool:
    """True when the player is alive, unthreatened, and every pickup is gone."""
    player = grid.find_player()
    if player is None:
        return False
    if grid.neighboring_cell_types(player) & units.ATTACKERS:
        return False
    return grid.count(units.PICKUPS) == 0


def _require_player(grid: Grid) -> Coordinates:
    player = grid.find_player()
    if player is None:
        raise MissingPlayerError("invalid grid, no player character found")
    return player


# -- entry point ----------------------------------------------------------------


def get_move_queue(
    snapshot: LevelSnapshot, direction: Direction,
) -> list[StateTransition]:
    """Resolve one player input into an ordered queue of transitions.

    Returns an empty list when the move is illegal. Otherwise the first
    entry is the active move and the rest are passive turns.
    """
    result = get_active_move_result(snapshot, direction)
    if result is None:
        logger.debug("Illegal move %s ignored.", direction.name)
        return []

    queue = [result, *get_resolved_state_results(result)]
    logger.debug("Move %s resolved into %d transitions.", direction.name, len(queue))
    return queue


# -- active move ----------------------------------------------------------------


def get_active_move_result(
    snapshot: LevelSnapshot, direction: Direction,
) -> StateTransition | None:
    """Apply the player's own move, or return ``None`` if it is illegal."""
    player = _require_player(snapshot.grid)
    ahead = snapshot.grid.cell_forward(player, direction)

    if ahead in units.FREE_MOVE_TARGETS:
        return _free_move_result(snapshot, direction)
    if ahead in units.MOVABLES:
        return _push_move_result(snapshot, direction)
    return None


def _free_move_result(
    snapshot: LevelSnapshot, direction: Direction,
) -> StateTransition:
    player = _require_player(snapshot.grid)
    move = Move.single(player, forward_position(player, direction))
    return StateTransition(
        grid=snapshot.grid.apply_move(move),
        bonus=max(0, snapshot.bonus - FREE_MOVE_COST),
        lives=snapshot.lives,
        moves=(move,),
    )


def _push_move_result(
    snapshot: LevelSnapshot, direction: Direction,
) -> StateTransition | None:
    grid = snapshot.grid
    player = _require_player(grid)

    chain: list[Coordinates] = []
    pos = forward_position(player, direction)
    cell = grid.cell_at(pos)
    while cell in units.MOVABLES:
        chain.append(pos)
        pos = forward_position(pos, direction)
        cell = grid.cell_at(pos)

    if not chain or cell is None or cell in units.PUSH_BLOCKERS:
        return None

    # Furthest first, so no cell is overwritten before it is read.
    pushes = tuple(
        Move.single(p, forward_position(p, direction)) for p in reversed(chain)
    )
    pushed = replace(snapshot, grid=grid.apply_moves(pushes))
    step = _free_move_result(pushed, direction)
    return replace(step, moves=(*step.moves, *pushes))


# -- passive turns --------------------------------------------------------------


def get_passive_moves_result(snapshot: LevelSnapshot) -> StateTransition:
    """Run one passive turn against the snapshot's grid as a single batch."""
    grid = snapshot.grid
    moves: list[Move] = []
    for gorilla in units.GORILLA_ORDER:
        moves.extend(_gorilla_moves(gorilla, grid))
    moves.extend(_free_arrow_moves(grid))

    return StateTransition(
        grid=grid.apply_moves(moves),
        bonus=snapshot.bonus,
        lives=snapshot.lives,
        moves=tuple(moves),
    )


def _gorilla_moves(gorilla: CellType, grid: Grid) -> list[Move]:
    """Every *gorilla* advances onto all adjacent prey at once."""
    moves: list[Move] = []
    for pos in grid.find_all(gorilla):
        targets = tuple(
            n for n in grid.neighbor_positions(pos)
            if grid.cell_at(n) in units.PREY
        )
        if targets:
            moves.append(Move(pos, targets, units.SATIATED_FORM.get(gorilla)))
    return moves


def _free_arrow_moves(grid: Grid) -> list[Move]:
    """Arrows drift one step into empty cells; arrows meeting head-on crash."""
    moves: list[Move] = []
    for arrow, direction in units.ARROW_DIRECTIONS.items():
        for pos in grid.find_all(arrow):
            if grid.cell_forward(pos, direction) == CellType.EMPTY:
                moves.append(Move.single(pos, forward_position(pos, direction)))

    # Each arrow contributes at most one move, so a repeated target always
    # means two distinct sources.
    landings = Counter(m.targets[0] for m in moves)
    return [
        replace(m, replace_with=units.COLLISION_DEBRIS) if landings[m.targets[0]] > 1 else m
        for m in moves
    ]


def get_resolved_state_results(snapshot: LevelSnapshot) -> list[StateTransition]:
    """Chain passive turns until the grid settles, the level is won, or the player dies.

    One transition is emitted per turn so each wave can be animated. A
    fixed-point turn is not emitted. A capture ends the queue with a
    transition that has one life fewer. A winning turn appears exactly once.
    """
    queue: list[StateTransition] = []
    if is_success(snapshot.grid):
        return queue

    previous = snapshot
    current = get_passive_moves_result(previous)
    while (
        not grids_equal(previous.grid, current.grid)
        and not is_success(current.grid)
        and not is_player_dead(current.grid)
    ):
        queue.append(current)
        previous = current
        current = get_passive_moves_result(previous)

    if is_player_dead(current.grid):
        logger.debug("Player captured after %d passive turns.", len(queue) + 1)
        queue.append(replace(current, lives=current.lives - 1))
    elif is_success(current.grid):
        queue.append(current)

    return queue

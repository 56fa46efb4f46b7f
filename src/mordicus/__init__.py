"""Mordicus: grid puzzle rules engine and level-play orchestration."""

from mordicus.config import GameConfig, GameType, LevelType
from mordicus.directions import Coordinates, Direction, Move, forward_position
from mordicus.grid import Grid, grids_equal
from mordicus.levels import Level, LevelCatalog
from mordicus.logic import (
    LevelSnapshot,
    MissingPlayerError,
    StateTransition,
    get_active_move_result,
    get_move_queue,
    get_passive_moves_result,
    get_resolved_state_results,
    is_player_dead,
    is_success,
)
from mordicus.session import GameRun, LevelSession, Outcome
from mordicus.store import JsonFileStore, MemoryStore, Store
from mordicus.units import CellType

__all__ = [
    "CellType",
    "Coordinates",
    "Direction",
    "GameConfig",
    "GameRun",
    "GameType",
    "Grid",
    "JsonFileStore",
    "Level",
    "LevelCatalog",
    "LevelSession",
    "LevelSnapshot",
    "LevelType",
    "MemoryStore",
    "MissingPlayerError",
    "Move",
    "Outcome",
    "StateTransition",
    "Store",
    "forward_position",
    "get_active_move_result",
    "get_move_queue",
    "get_passive_moves_result",
    "get_resolved_state_results",
    "grids_equal",
    "is_player_dead",
    "is_success",
]

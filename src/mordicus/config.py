"""Game rule presets and their persistence."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mordicus.store import Store

logger = logging.getLogger(__name__)

USE_ORIGINAL_CONFIG_KEY = "use-original-game-config"


class GameType(str, enum.Enum):
    """Rule flavour: the modern remake or the original game's rules."""

    REMAKE = "remake"
    ORIGINAL = "original"


class LevelType(str, enum.Enum):
    """Which level collection a level belongs to."""

    ORIGINAL = "original"
    CUSTOM = "custom"


@dataclass(frozen=True)
class GameConfig:
    """Scoring, lives, and checkpoint rules for a game run.

    Supports JSON serialization so a run can be reproduced.
    """

    game_type: GameType = GameType.REMAKE
    level_type: LevelType = LevelType.ORIGINAL

    # Scoring
    start_bonus: int = 1000
    points_per_level: int = 1000

    # Lives
    start_lives: int = 5
    gain_new_life_after_x_points: int = 10_000
    max_lives: int = 99

    # Checkpoints
    password_every_x_levels: int = 1
    undo_move_enabled: bool = True

    def __post_init__(self) -> None:
        if self.start_bonus < 0:
            raise ValueError("start_bonus must be >= 0.")
        if self.start_lives < 1:
            raise ValueError("start_lives must be at least 1.")
        if self.max_lives < self.start_lives:
            raise ValueError("max_lives must be >= start_lives.")
        if self.gain_new_life_after_x_points < 1:
            raise ValueError("gain_new_life_after_x_points must be at least 1.")
        if self.password_every_x_levels < 1:
            raise ValueError("password_every_x_levels must be at least 1.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict (enums become their values)."""
        d = asdict(self)
        d["game_type"] = self.game_type.value
        d["level_type"] = self.level_type.value
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        if "game_type" in raw:
            raw["game_type"] = GameType(raw["game_type"])
        if "level_type" in raw:
            raw["level_type"] = LevelType(raw["level_type"])
        return cls(**raw)


REMAKE_CONFIG = GameConfig()

ORIGINAL_CONFIG = replace(
    REMAKE_CONFIG,
    game_type=GameType.ORIGINAL,
    password_every_x_levels=10,
    undo_move_enabled=False,
)


def get_game_config(store: Store) -> GameConfig:
    """Return the preset selected in *store*; the remake rules by default."""
    if store.get(USE_ORIGINAL_CONFIG_KEY):
        return ORIGINAL_CONFIG
    return REMAKE_CONFIG


def toggle_original_config(store: Store) -> GameConfig:
    """Flip between the remake and original presets and return the new one."""
    if get_game_config(store).game_type == GameType.ORIGINAL:
        store.remove(USE_ORIGINAL_CONFIG_KEY)
    else:
        store.set(USE_ORIGINAL_CONFIG_KEY, "true")
    config = get_game_config(store)
    logger.info("Switched to %s game rules.", config.game_type.value)
    return config

"""Level catalog, checkpoint passwords, and saved progress."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

from mordicus.config import LevelType
from mordicus.grid import Grid

if TYPE_CHECKING:
    from mordicus.store import Store

logger = logging.getLogger(__name__)

LAST_LEVEL_PASSWORD_KEY = "last-level-password"
PASSWORD_LENGTH = 6
_HASH_SEED = 123456

RawGrid = Sequence[Sequence[str]]


@dataclass(frozen=True)
class Level:
    """A playable grid plus its position in the collection."""

    grid: Grid
    level_type: LevelType
    stage: int
    password: str


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def simple_length6_hash(text: str) -> str:
    """Short, stable digest used as a level password.

    A 31-multiplier string hash with signed 32-bit wraparound, fed the
    first UTF-16 code unit of each code point, keeping the last six
    characters of the decimal result.
    """
    h = _HASH_SEED
    for ch in text:
        code = ord(ch)
        if code > 0xFFFF:
            code = 0xD800 + ((code - 0x10000) >> 10)
        h = _to_int32(31 * h + code)
    return str(h)[-PASSWORD_LENGTH:]


def level_password(rows: RawGrid) -> str:
    """Password for a level given as rows of symbols, before clash handling."""
    text = json.dumps(
        [list(row) for row in rows], ensure_ascii=False, separators=(",", ":"),
    )
    return simple_length6_hash(text)


def _bump_password(password: str) -> str:
    return str(int(password) + 1)[-PASSWORD_LENGTH:].rjust(PASSWORD_LENGTH, "0")


class LevelCatalog:
    """All known levels, indexed by collection, stage, and password.

    Passwords are unique across every collection: a clashing digest is
    bumped until it is free, in load order.
    """

    def __init__(self, collections: Mapping[str, Sequence[RawGrid]]) -> None:
        self._by_type: dict[LevelType, dict[str, Level]] = {
            t: {} for t in LevelType
        }
        taken: set[str] = set()
        for type_name, grids in collections.items():
            level_type = LevelType(type_name)
            for index, rows in enumerate(grids):
                password = level_password(rows)
                while password in taken:
                    password = _bump_password(password)
                taken.add(password)
                self._by_type[level_type][password] = Level(
                    grid=Grid.from_symbols(rows),
                    level_type=level_type,
                    stage=index + 1,
                    password=password,
                )
        logger.info(
            "Loaded %s.",
            ", ".join(f"{len(v)} {t.value} levels" for t, v in self._by_type.items()),
        )

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_file(cls, path: str | Path) -> LevelCatalog:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(raw)

    @classmethod
    def default(cls) -> LevelCatalog:
        """Catalog of the levels bundled with the package."""
        data = resources.files("mordicus").joinpath("data/levels.json")
        return cls(json.loads(data.read_text(encoding="utf-8")))

    # -- queries --------------------------------------------------------------

    def levels(self, level_type: LevelType = LevelType.ORIGINAL) -> list[Level]:
        return list(self._by_type[LevelType(level_type)].values())

    def stage_count(self, level_type: LevelType = LevelType.ORIGINAL) -> int:
        return len(self._by_type[LevelType(level_type)])

    def find_by_password(
        self, password: str, level_type: LevelType = LevelType.ORIGINAL,
    ) -> Level | None:
        return self._by_type[LevelType(level_type)].get(password)

    def find_by_stage(
        self, stage: int, level_type: LevelType = LevelType.ORIGINAL,
    ) -> Level | None:
        if stage < 1:
            raise ValueError(
                "stage number should be an integer greater than zero, "
                f"requested stage #{stage}"
            )
        levels = self.levels(level_type)
        return levels[stage - 1] if stage <= len(levels) else None

    def first_level(self, level_type: LevelType = LevelType.ORIGINAL) -> Level:
        level = self.find_by_stage(1, level_type)
        if level is None:
            raise KeyError(f"No {LevelType(level_type).value} levels loaded.")
        return level

    # -- checkpoints ----------------------------------------------------------

    @staticmethod
    def checkpoint_stage(stage: int, every: int) -> int:
        """Last stage at or below *stage* that hands out a password."""
        return max((stage // every) * every, 1)

    def password_on_stage(
        self,
        stage: int,
        level_type: LevelType = LevelType.ORIGINAL,
        every: int = 1,
    ) -> str:
        level = self.find_by_stage(self.checkpoint_stage(stage, every), level_type)
        return (level or self.first_level(level_type)).password

    def save_password(
        self,
        store: Store,
        stage: int,
        level_type: LevelType = LevelType.ORIGINAL,
        every: int = 1,
    ) -> str:
        password = self.password_on_stage(stage, level_type, every)
        store.set(LAST_LEVEL_PASSWORD_KEY, password)
        logger.debug("Checkpoint password for stage %d saved.", stage)
        return password

    @staticmethod
    def saved_password(store: Store) -> str | None:
        return store.get(LAST_LEVEL_PASSWORD_KEY)

    def furthest_played_level(
        self,
        store: Store,
        level_type: LevelType = LevelType.ORIGINAL,
        every: int = 1,
    ) -> Level:
        """The checkpoint level for the saved password, or the first level."""
        saved = self.find_by_password(self.saved_password(store) or "", level_type)
        if saved is None:
            return self.first_level(level_type)
        password = self.password_on_stage(saved.stage, level_type, every)
        return self.find_by_password(password, level_type) or self.first_level(level_type)

"""In-memory registry of game runs served over the API."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field

from mordicus.config import ORIGINAL_CONFIG, REMAKE_CONFIG, GameType, LevelType
from mordicus.levels import LevelCatalog
from mordicus.server.models import RunSummary, SnapshotModel
from mordicus.session import GameRun
from mordicus.store import MemoryStore, Store

logger = logging.getLogger(__name__)

_MAX_FINISHED_RUNS = 100


@dataclass
class RunInstance:
    """A game run plus the bookkeeping the registry needs."""

    run_id: str
    run: GameRun
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def summary(self) -> RunSummary:
        run = self.run
        return RunSummary(
            run_id=self.run_id,
            game_type=run.config.game_type.value,
            level_type=run.level.level_type.value,
            stage=run.level.stage,
            score=run.score,
            outcome=run.outcome.value,
            finished=run.finished,
            completed=run.completed,
            password=run.current_password,
            snapshot=SnapshotModel.from_snapshot(run.session.snapshot),
        )


class RunManager:
    """Central registry managing all game runs.

    Engine calls for one run are serialized through the run's lock; the
    caller drains the returned queue before sending the next input.
    """

    def __init__(
        self,
        catalog: LevelCatalog | None = None,
        store: Store | None = None,
        max_finished_runs: int = _MAX_FINISHED_RUNS,
    ) -> None:
        if max_finished_runs < 0:
            raise ValueError("max_finished_runs must be >= 0.")
        self.catalog = catalog if catalog is not None else LevelCatalog.default()
        self.store = store if store is not None else MemoryStore()
        self._runs: dict[str, RunInstance] = {}
        self._max_finished_runs = max_finished_runs

    def create_run(
        self,
        password: str | None = None,
        level_type: str = "original",
        game_type: str = "remake",
    ) -> RunInstance:
        """Start a run at the level behind *password*, or at stage 1."""
        config = ORIGINAL_CONFIG if GameType(game_type) == GameType.ORIGINAL else REMAKE_CONFIG
        lt = LevelType(level_type)
        if password is not None:
            level = self.catalog.find_by_password(password, lt)
            if level is None:
                raise KeyError("No level found for this password.")
        else:
            level = self.catalog.first_level(lt)

        run_id = uuid.uuid4().hex[:12]
        instance = RunInstance(
            run_id=run_id,
            run=GameRun(self.catalog, config, self.store, level=level),
        )
        self._runs[run_id] = instance
        logger.info("Run %s created at %s stage %d.", run_id, lt.value, level.stage)
        return instance

    def get_run(self, run_id: str) -> RunInstance:
        instance = self._runs.get(run_id)
        if instance is None:
            raise KeyError(f"Run {run_id} not found.")
        return instance

    def list_runs(self) -> list[RunSummary]:
        """Return summaries of unfinished runs."""
        return [i.summary() for i in self._runs.values() if not i.run.finished]

    def mark_if_finished(self, instance: RunInstance) -> None:
        """Record when a run ends, then bound the number of finished runs kept."""
        if instance.run.finished and instance.finished_at is None:
            instance.finished_at = time.monotonic()
            logger.info("Run %s finished with score %d.", instance.run_id, instance.run.score)
            self._prune_finished_runs()

    def _prune_finished_runs(self) -> None:
        finished = [i for i in self._runs.values() if i.finished_at is not None]
        overflow = len(finished) - self._max_finished_runs
        if overflow <= 0:
            return
        finished.sort(key=lambda i: i.finished_at)
        for stale in finished[:overflow]:
            self._runs.pop(stale.run_id, None)
        logger.info(
            "Pruned %d finished runs (retaining up to %d).",
            overflow,
            self._max_finished_runs,
        )

"""Level-play orchestration on top of the pure rules engine.

A :class:`LevelSession` owns the authoritative snapshot for one attempt at
one level and feeds it through the engine one input at a time. A
:class:`GameRun` strings sessions together into a game: retries, next
levels, extra lives, game over, and the final score.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import replace

from mordicus.config import GameConfig
from mordicus.directions import Direction
from mordicus.levels import Level, LevelCatalog
from mordicus.logic import (
    LevelSnapshot,
    StateTransition,
    get_move_queue,
    get_resolved_state_results,
    is_player_dead,
    is_success,
)
from mordicus.store import Store, update_best_bonus, update_best_total_score

logger = logging.getLogger(__name__)


class Outcome(str, enum.Enum):
    """Where a level attempt stands after its latest settled snapshot."""

    PLAYING = "playing"
    COMPLETE = "complete"
    RETRY = "retry"
    GAME_OVER = "game_over"


class UndoRedoStack:
    """Linear history of settled snapshots with a movable cursor."""

    def __init__(self) -> None:
        self._items: list[LevelSnapshot] = []
        self._pos = 0

    def undo(self) -> LevelSnapshot | None:
        self._pos = max(0, self._pos - 1)
        return self._items[self._pos] if self._items else None

    def redo(self) -> LevelSnapshot | None:
        self._pos = max(0, min(len(self._items) - 1, self._pos + 1))
        return self._items[self._pos] if self._items else None

    def push(self, snapshot: LevelSnapshot) -> None:
        """Record *snapshot*, discarding anything that was undone."""
        del self._items[self._pos + 1:]
        self._items.append(snapshot)
        self._pos = len(self._items) - 1

    def __len__(self) -> int:
        return len(self._items)


class LevelSession:
    """One attempt at one level.

    Call :meth:`start` once to settle the opening grid, then :meth:`move`
    per player input. Each returned queue is already applied: its last
    entry is the new :attr:`snapshot`.
    """

    def __init__(
        self,
        level: Level,
        config: GameConfig,
        store: Store,
        score: int = 0,
        lives: int | None = None,
    ) -> None:
        self.level = level
        self.config = config
        self.store = store
        self.score = score
        self.snapshot = LevelSnapshot(
            grid=level.grid,
            bonus=config.start_bonus,
            lives=config.start_lives if lives is None else lives,
        )
        self.outcome = Outcome.PLAYING
        self.new_score: int | None = None
        self._history = UndoRedoStack() if config.undo_move_enabled else None
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> list[StateTransition]:
        """Let the opening grid react before the first input.

        Returns the opening snapshot followed by any passive turns.
        """
        if self._started:
            raise RuntimeError("Level session already started.")
        self._started = True
        queue = [
            StateTransition(
                grid=self.snapshot.grid,
                bonus=self.snapshot.bonus,
                lives=self.snapshot.lives,
            ),
            *get_resolved_state_results(self.snapshot),
        ]
        self._commit(queue)
        logger.info(
            "Stage %d (%s) started with %d lives.",
            self.level.stage, self.level.level_type.value, self.snapshot.lives,
        )
        return queue

    def move(self, direction: Direction) -> list[StateTransition]:
        """Resolve one input; an empty list means nothing happened."""
        self._require_started()
        if self.outcome is not Outcome.PLAYING:
            return []
        queue = get_move_queue(self.snapshot, direction)
        if queue:
            self._commit(queue)
        return queue

    def undo(self) -> LevelSnapshot | None:
        return self._recall(self._history.undo if self._history else None)

    def redo(self) -> LevelSnapshot | None:
        return self._recall(self._history.redo if self._history else None)

    def abort(self) -> LevelSnapshot:
        """Give up on the attempt; costs one life."""
        self._require_started()
        if self.outcome is not Outcome.PLAYING:
            raise RuntimeError("Only a level in play can be aborted.")
        self.snapshot = replace(self.snapshot, lives=self.snapshot.lives - 1)
        self.outcome = Outcome.GAME_OVER if self.snapshot.lives <= 0 else Outcome.RETRY
        logger.info("Stage %d aborted, %d lives left.", self.level.stage, self.snapshot.lives)
        return self.snapshot

    # -- helpers --------------------------------------------------------------

    def _require_started(self) -> None:
        if not self._started:
            raise RuntimeError("Level session has not been started.")

    def _recall(self, step) -> LevelSnapshot | None:
        self._require_started()
        if step is None or self.outcome is not Outcome.PLAYING:
            return None
        recovered = step()
        if recovered is not None:
            self.snapshot = recovered
        return recovered

    def _commit(self, queue: list[StateTransition]) -> None:
        self.snapshot = queue[-1].snapshot()
        self._update_outcome()
        if self._history is not None:
            self._history.push(self.snapshot)

    def _update_outcome(self) -> None:
        grid = self.snapshot.grid
        if self.snapshot.lives <= 0:
            self.outcome = Outcome.GAME_OVER
            logger.info("Game over on stage %d.", self.level.stage)
        elif is_player_dead(grid):
            self.outcome = Outcome.RETRY
            logger.info("Captured on stage %d, %d lives left.", self.level.stage, self.snapshot.lives)
        elif is_success(grid):
            self.outcome = Outcome.COMPLETE
            update_best_bonus(self.store, self.level.password, self.snapshot.bonus)
            self.new_score = self.score + self.config.points_per_level + self.snapshot.bonus
            logger.info(
                "Stage %d complete with bonus %d, score now %d.",
                self.level.stage, self.snapshot.bonus, self.new_score,
            )


class GameRun:
    """A game from the chosen starting level until game over or the last level."""

    def __init__(
        self,
        catalog: LevelCatalog,
        config: GameConfig,
        store: Store,
        level: Level | None = None,
    ) -> None:
        self.catalog = catalog
        self.config = config
        self.store = store
        self.score = 0
        self.completed = False
        start = level or catalog.first_level(config.level_type)
        self.session: LevelSession
        self.opening = self._enter(start, score=0, lives=config.start_lives)

    # -- queries --------------------------------------------------------------

    @property
    def level(self) -> Level:
        return self.session.level

    @property
    def outcome(self) -> Outcome:
        return self.session.outcome

    @property
    def lives(self) -> int:
        return self.session.snapshot.lives

    @property
    def finished(self) -> bool:
        return self.completed or self.session.outcome is Outcome.GAME_OVER

    @property
    def current_password(self) -> str:
        """Checkpoint password to resume this run from."""
        return self.catalog.password_on_stage(
            self.level.stage, self.level.level_type, self.config.password_every_x_levels,
        )

    # -- transitions ----------------------------------------------------------

    def move(self, direction: Direction) -> list[StateTransition]:
        self._require_active()
        return self.session.move(direction)

    def undo(self) -> LevelSnapshot | None:
        self._require_active()
        return self.session.undo()

    def redo(self) -> LevelSnapshot | None:
        self._require_active()
        return self.session.redo()

    def abort(self) -> LevelSnapshot:
        self._require_active()
        return self.session.abort()

    def retry(self) -> list[StateTransition]:
        """Replay the current level with the lives that are left."""
        self._require_active()
        if self.outcome not in (Outcome.RETRY, Outcome.COMPLETE):
            raise RuntimeError("The level can only be retried after it ends.")
        return self._enter(self.level, score=self.score, lives=self.lives)

    def next_level(self) -> list[StateTransition]:
        """Advance after a completed level; returns ``[]`` when the game is won."""
        self._require_active()
        if self.outcome is not Outcome.COMPLETE:
            raise RuntimeError("The next level unlocks only after completing this one.")

        new_score = self.session.new_score
        assert new_score is not None  # noqa: S101
        following = self.catalog.find_by_stage(self.level.stage + 1, self.level.level_type)
        if following is None:
            self.score = new_score
            self.completed = True
            best = update_best_total_score(self.store, self.level.level_type, new_score)
            logger.info("Game complete with score %d (best %d).", new_score, best)
            return []

        step = self.config.gain_new_life_after_x_points
        bonus_life = 1 if self.score // step < new_score // step else 0
        lives = min(self.lives + bonus_life, self.config.max_lives)
        return self._enter(following, score=new_score, lives=lives)

    # -- helpers --------------------------------------------------------------

    def _require_active(self) -> None:
        if self.finished:
            raise RuntimeError("This game run is finished.")

    def _enter(self, level: Level, score: int, lives: int) -> list[StateTransition]:
        every = self.config.password_every_x_levels
        first = self.catalog.first_level(level.level_type)
        # Keep the saved checkpoint when the player is back at the very start.
        if self.catalog.password_on_stage(level.stage, level.level_type, every) != first.password:
            self.catalog.save_password(self.store, level.stage, level.level_type, every)
        self.score = score
        self.session = LevelSession(level, self.config, self.store, score=score, lives=lives)
        return self.session.start()

"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from mordicus.logic import LevelSnapshot, StateTransition


class CreateRunRequest(BaseModel):
    """Request body for POST /runs."""

    password: str | None = Field(default=None, pattern=r"^\d{6}$")
    level_type: Literal["original", "custom"] = "original"
    game_type: Literal["remake", "original"] = "remake"


class MoveRequest(BaseModel):
    """Request body for POST /runs/{run_id}/move."""

    direction: Literal["up", "right", "down", "left"]


class ContinueRequest(BaseModel):
    """Request body for POST /runs/{run_id}/continue."""

    choice: Literal["retry", "next"]


class LevelInfo(BaseModel):
    """Public level metadata; passwords stay hidden."""

    stage: int
    level_type: str
    width: int
    height: int


class MoveModel(BaseModel):
    source: tuple[int, int]
    targets: list[tuple[int, int]]
    replace_with: str | None = None


class SnapshotModel(BaseModel):
    """A level snapshot with the grid as rows of symbols."""

    grid: list[list[str]]
    bonus: int
    lives: int

    @classmethod
    def from_snapshot(cls, snapshot: LevelSnapshot) -> SnapshotModel:
        return cls(**snapshot.to_dict())


class TransitionModel(SnapshotModel):
    moves: list[MoveModel] = Field(default_factory=list)

    @classmethod
    def from_transition(cls, transition: StateTransition) -> TransitionModel:
        return cls(**transition.to_dict())


class RunSummary(BaseModel):
    """Current state of a game run."""

    run_id: str
    game_type: str
    level_type: str
    stage: int
    score: int
    outcome: str
    finished: bool
    completed: bool
    password: str
    snapshot: SnapshotModel


class TransitionsResponse(BaseModel):
    """Transitions to animate, in order, followed by the resulting run state."""

    transitions: list[TransitionModel]
    run: RunSummary


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str

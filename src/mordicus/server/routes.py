"""REST API route handlers for levels and game runs."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import APIRouter, HTTPException, Request

from mordicus.config import LevelType
from mordicus.directions import Direction
from mordicus.logic import StateTransition
from mordicus.server.models import (
    ContinueRequest,
    CreateRunRequest,
    ErrorResponse,
    LevelInfo,
    MoveRequest,
    RunSummary,
    TransitionModel,
    TransitionsResponse,
)
from mordicus.server.run_manager import RunInstance, RunManager
from mordicus.session import Outcome

router = APIRouter(
    tags=["runs"],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)


def _get_manager(request: Request) -> RunManager:
    return request.app.state.run_manager


def _get_instance(request: Request, run_id: str) -> RunInstance:
    try:
        return _get_manager(request).get_run(run_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Run not found.") from exc


async def _transition(
    request: Request,
    run_id: str,
    action: Callable[[RunInstance], list[StateTransition]],
) -> TransitionsResponse:
    """Run *action* under the run's lock and report what changed."""
    instance = _get_instance(request, run_id)
    async with instance.lock:
        try:
            queue = action(instance)
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        _get_manager(request).mark_if_finished(instance)
        return TransitionsResponse(
            transitions=[TransitionModel.from_transition(t) for t in queue],
            run=instance.summary(),
        )


@router.get("/levels")
async def list_levels(
    request: Request, level_type: LevelType = LevelType.ORIGINAL,
) -> list[LevelInfo]:
    """List the stages of a level collection."""
    return [
        LevelInfo(
            stage=level.stage,
            level_type=level.level_type.value,
            width=level.grid.width,
            height=level.grid.height,
        )
        for level in _get_manager(request).catalog.levels(level_type)
    ]


@router.post("/runs", status_code=201)
async def create_run(body: CreateRunRequest, request: Request) -> TransitionsResponse:
    """Start a new run; the response carries the opening transitions."""
    manager = _get_manager(request)
    try:
        instance = manager.create_run(
            password=body.password,
            level_type=body.level_type,
            game_type=body.game_type,
        )
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=exc.args[0]) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return TransitionsResponse(
        transitions=[TransitionModel.from_transition(t) for t in instance.run.opening],
        run=instance.summary(),
    )


@router.get("/runs")
async def list_runs(request: Request) -> list[RunSummary]:
    """List unfinished runs."""
    return _get_manager(request).list_runs()


@router.get("/runs/{run_id}")
async def get_run(run_id: str, request: Request) -> RunSummary:
    return _get_instance(request, run_id).summary()


@router.post("/runs/{run_id}/move")
async def move(run_id: str, body: MoveRequest, request: Request) -> TransitionsResponse:
    """Apply one player input. An illegal move yields no transitions."""
    direction = Direction.from_name(body.direction)

    def action(instance: RunInstance) -> list[StateTransition]:
        if instance.run.outcome is not Outcome.PLAYING:
            raise RuntimeError("The level is not in play.")
        return instance.run.move(direction)

    return await _transition(request, run_id, action)


@router.post("/runs/{run_id}/undo")
async def undo(run_id: str, request: Request) -> RunSummary:
    return await _recall(request, run_id, redo=False)


@router.post("/runs/{run_id}/redo")
async def redo(run_id: str, request: Request) -> RunSummary:
    return await _recall(request, run_id, redo=True)


async def _recall(request: Request, run_id: str, redo: bool) -> RunSummary:
    instance = _get_instance(request, run_id)
    async with instance.lock:
        try:
            recovered = instance.run.redo() if redo else instance.run.undo()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        if recovered is None:
            raise HTTPException(status_code=409, detail="Nothing to restore.")
        return instance.summary()


@router.post("/runs/{run_id}/abort")
async def abort(run_id: str, request: Request) -> RunSummary:
    """Give up on the current level, losing a life."""
    instance = _get_instance(request, run_id)
    async with instance.lock:
        try:
            instance.run.abort()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        _get_manager(request).mark_if_finished(instance)
        return instance.summary()


@router.post("/runs/{run_id}/continue")
async def continue_run(
    run_id: str, body: ContinueRequest, request: Request,
) -> TransitionsResponse:
    """Retry the level or move on to the next one once the level has ended."""

    def action(instance: RunInstance) -> list[StateTransition]:
        if body.choice == "next":
            return instance.run.next_level()
        return instance.run.retry()

    return await _transition(request, run_id, action)

"""Quest HTTP router: goals, events, score, save/load."""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path, PurePath

from fastapi import APIRouter, Depends, HTTPException, Query

from app.auth import verify_api_key
from app.config import settings
from app.quest.engine import InvalidGoalError, InvalidGoalIndexError, QuestEngine
from app.quest.goals import Goal
from app.quest.models import (
    EventResult,
    GoalCreate,
    GoalView,
    LoadResult,
    NotificationView,
    PresetView,
    SaveResult,
    ScoreView,
)
from app.quest.player import Notification
from app.quest.presets import list_presets
from app.quest.store import SaveFileNotFound

router = APIRouter(prefix="/quest", tags=["quest"])

# The engine is not thread-safe. Handlers stay `async def` so engine calls
# run serially on the event loop, never in the sync-handler threadpool.

_engine: QuestEngine | None = None

_IDENTITY = {"name", "description", "points"}


def get_engine() -> QuestEngine:
    """Process-wide engine, built from settings on first use."""
    global _engine
    if _engine is None:
        _engine = QuestEngine(
            points_per_level=settings.points_per_level,
            seed_demo_goals=settings.seed_demo_goals,
            default_path=settings.save_path,
            replay_on_load=settings.replay_notifications_on_load,
        )
    return _engine


def _goal_view(index: int, goal: Goal) -> GoalView:
    return GoalView(
        index=index,
        kind=goal.kind,
        name=goal.name,
        description=goal.description,
        points=goal.points,
        status=goal.status_text(),
        complete=goal.is_complete,
        progress={f.name: getattr(goal, f.name) for f in fields(goal) if f.name not in _IDENTITY},
    )


def _notification_views(notes: list[Notification]) -> list[NotificationView]:
    return [
        NotificationView(kind=n.kind, message=n.message, level=n.level, badge=n.badge, threshold=n.threshold)
        for n in notes
    ]


def _save_path(path: str | None) -> str | None:
    """Resolve a caller-supplied save file under settings.save_dir.

    None falls through to the engine default. Absolute paths and `..`
    components are rejected with 422.
    """
    if path is None:
        return None
    requested = PurePath(path)
    if not path.strip() or requested.is_absolute() or ".." in requested.parts:
        raise HTTPException(status_code=422, detail=f"Save path must be relative to the save directory: {path!r}")
    return str(Path(settings.save_dir) / requested)


# ---------------------------------------------------------------------------
# /quest/goals
# ---------------------------------------------------------------------------


@router.get("/goals", response_model=list[GoalView])
async def goals_list(engine: QuestEngine = Depends(get_engine)) -> list[GoalView]:
    return [_goal_view(i, g) for i, g in enumerate(engine.goals, start=1)]


@router.post("/goals", response_model=GoalView, status_code=201)
async def goal_create(
    body: GoalCreate,
    engine: QuestEngine = Depends(get_engine),
    _: str = Depends(verify_api_key),
) -> GoalView:
    try:
        goal = engine.create_goal(
            body.kind.value, body.name, body.description, body.points, target=body.target, bonus=body.bonus
        )
    except InvalidGoalError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _goal_view(len(engine.goals), goal)


@router.post("/goals/{index}/events", response_model=EventResult)
async def goal_record_event(
    index: int,
    engine: QuestEngine = Depends(get_engine),
    _: str = Depends(verify_api_key),
) -> EventResult:
    try:
        outcome = engine.record_event(index)
    except InvalidGoalIndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return EventResult(
        index=outcome.index,
        earned=outcome.earned,
        goal=_goal_view(outcome.index, outcome.goal),
        notifications=_notification_views(outcome.notifications),
    )


# ---------------------------------------------------------------------------
# /quest/score
# ---------------------------------------------------------------------------


@router.get("/score", response_model=ScoreView)
async def score(engine: QuestEngine = Depends(get_engine)) -> ScoreView:
    summary = engine.score_summary()
    return ScoreView(score=summary.score, level=summary.level, badges=summary.badges)


# ---------------------------------------------------------------------------
# /quest/save, /quest/load
# ---------------------------------------------------------------------------


@router.post("/save", response_model=SaveResult)
async def save(
    engine: QuestEngine = Depends(get_engine),
    path: str | None = Query(default=None, description="Save file relative to settings.save_dir (default: settings.save_path)"),
    _: str = Depends(verify_api_key),
) -> SaveResult:
    target = engine.save(_save_path(path))
    return SaveResult(path=target, goals_saved=len(engine.goals))


@router.post("/load", response_model=LoadResult)
async def load(
    engine: QuestEngine = Depends(get_engine),
    path: str | None = Query(default=None, description="Save file relative to settings.save_dir (default: settings.save_path)"),
    _: str = Depends(verify_api_key),
) -> LoadResult:
    try:
        summary = engine.load(_save_path(path))
    except SaveFileNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return LoadResult(
        path=summary.path,
        goals_loaded=summary.goals_loaded,
        lines_skipped=summary.lines_skipped,
        score=summary.score,
        notifications=_notification_views(summary.notifications),
    )


# ---------------------------------------------------------------------------
# /quest/presets
# ---------------------------------------------------------------------------


@router.get("/presets", response_model=list[PresetView])
async def presets_list() -> list[PresetView]:
    return [
        PresetView(kind=p.kind, name=p.name, description=p.description, points=p.points, target=p.target, bonus=p.bonus)
        for p in list_presets()
    ]

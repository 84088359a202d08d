"""Quest API contract: Pydantic v2 models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class GoalKind(str, Enum):
    simple = "simple"
    eternal = "eternal"
    checklist = "checklist"


class GoalCreate(BaseModel):
    kind: GoalKind
    name: str = Field(min_length=1)
    description: str = ""
    points: int
    target: int | None = Field(default=None, ge=1)  # Checklist only
    bonus: int | None = None  # Checklist only


class GoalView(BaseModel):
    index: int  # 1-based
    kind: str
    name: str
    description: str
    points: int
    status: str
    complete: bool
    progress: dict[str, int | bool] = Field(default_factory=dict)


class NotificationView(BaseModel):
    kind: str  # "level_up" | "badge"
    message: str
    level: int | None = None
    badge: str | None = None
    threshold: int | None = None


class EventResult(BaseModel):
    index: int
    earned: int
    goal: GoalView
    notifications: list[NotificationView] = Field(default_factory=list)


class ScoreView(BaseModel):
    score: int
    level: int
    badges: list[str] = Field(default_factory=list)


class SaveResult(BaseModel):
    path: str
    goals_saved: int


class LoadResult(BaseModel):
    path: str
    goals_loaded: int
    lines_skipped: int = 0
    score: int
    notifications: list[NotificationView] = Field(default_factory=list)


class PresetView(BaseModel):
    kind: str
    name: str
    description: str
    points: int
    target: int | None = None
    bonus: int | None = None

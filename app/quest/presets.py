"""Hardcoded demo goals: configuration only."""

from __future__ import annotations

from dataclasses import dataclass

from app.quest.goals import ChecklistGoal, EternalGoal, Goal, SimpleGoal


@dataclass(frozen=True, slots=True)
class GoalPreset:
    kind: str
    name: str
    description: str
    points: int
    target: int | None = None
    bonus: int | None = None

    def build(self) -> Goal:
        """Fresh goal with no progress recorded."""
        if self.kind == ChecklistGoal.kind:
            return ChecklistGoal(
                self.name, self.description, self.points,
                target=self.target or 1, bonus=self.bonus or 0,
            )
        if self.kind == EternalGoal.kind:
            return EternalGoal(self.name, self.description, self.points)
        return SimpleGoal(self.name, self.description, self.points)


DEMO_GOALS: tuple[GoalPreset, ...] = (
    GoalPreset(kind="Simple", name="Run a marathon", description="Complete a full marathon", points=1000),
    GoalPreset(kind="Eternal", name="Read scriptures", description="Daily scripture study", points=100),
    # 50 per visit, 10 visits, 500 bonus
    GoalPreset(
        kind="Checklist",
        name="Temple visits",
        description="Go to the temple",
        points=50,
        target=10,
        bonus=500,
    ),
)


def list_presets() -> list[GoalPreset]:
    return list(DEMO_GOALS)

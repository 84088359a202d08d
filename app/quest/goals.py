"""Goal contract and its three variants: Simple, Eternal, Checklist.

A goal never touches the Player: `record_event` returns the points earned
and the caller decides what to do with them. Identity fields (name,
description, points) are write-once; only progress fields change, and
only through `record_event`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

DELIMITER = "|"

_IDENTITY_FIELDS = frozenset({"name", "description", "points"})


@dataclass(slots=True)
class Goal(ABC):
    name: str
    description: str
    points: int  # awarded per event (or once, for Simple)

    kind: ClassVar[str] = ""

    def __setattr__(self, key: str, value) -> None:
        if key in _IDENTITY_FIELDS and hasattr(self, key):
            raise AttributeError(f"Goal.{key} is immutable")
        object.__setattr__(self, key, value)

    @abstractmethod
    def record_event(self) -> int:
        """Mark one unit of progress and return the points it earned."""

    @property
    @abstractmethod
    def is_complete(self) -> bool: ...

    @abstractmethod
    def status_text(self) -> str: ...

    @abstractmethod
    def progress_fields(self) -> list[str]:
        """Variant-specific trailing fields of the persisted line, in order."""

    def serialize(self) -> str:
        fields = [self.kind, self.name, self.description, str(self.points), *self.progress_fields()]
        return DELIMITER.join(fields)


@dataclass(slots=True)
class SimpleGoal(Goal):
    """Completed once, awards its points once."""

    completed: bool = False

    kind: ClassVar[str] = "Simple"

    def record_event(self) -> int:
        if self.completed:
            return 0
        self.completed = True
        return self.points

    @property
    def is_complete(self) -> bool:
        return self.completed

    def status_text(self) -> str:
        return "[X]" if self.completed else "[ ]"

    def progress_fields(self) -> list[str]:
        return [str(self.completed)]


@dataclass(slots=True)
class EternalGoal(Goal):
    """Never completes; every event awards points."""

    times_recorded: int = 0

    kind: ClassVar[str] = "Eternal"

    def record_event(self) -> int:
        self.times_recorded += 1
        return self.points

    @property
    def is_complete(self) -> bool:
        return False

    def status_text(self) -> str:
        return f"(Eternal) Recorded {self.times_recorded} times"

    def progress_fields(self) -> list[str]:
        return [str(self.times_recorded)]


@dataclass(slots=True)
class ChecklistGoal(Goal):
    """Needs `target` events; pays `points` each time and `bonus` on the last one."""

    target: int = 1
    bonus: int = 0
    times_completed: int = 0

    kind: ClassVar[str] = "Checklist"

    def record_event(self) -> int:
        if self.times_completed >= self.target:
            return 0

        self.times_completed += 1
        earned = self.points
        if self.times_completed == self.target:
            earned += self.bonus
        return earned

    @property
    def is_complete(self) -> bool:
        return self.times_completed >= self.target

    def status_text(self) -> str:
        text = f"Completed {self.times_completed}/{self.target}"
        if self.is_complete:
            text += " (Complete)"
        return text

    def progress_fields(self) -> list[str]:
        # Persisted order is target, bonus, then progress
        return [str(self.target), str(self.bonus), str(self.times_completed)]


GOAL_TYPES: dict[str, type[Goal]] = {
    SimpleGoal.kind: SimpleGoal,
    EternalGoal.kind: EternalGoal,
    ChecklistGoal.kind: ChecklistGoal,
}


def get_goal_type(kind: str) -> type[Goal] | None:
    """Look up a variant by tag, case-insensitively ("simple" → SimpleGoal)."""
    for tag, cls in GOAL_TYPES.items():
        if tag.lower() == kind.strip().lower():
            return cls
    return None

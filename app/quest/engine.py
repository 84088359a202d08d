"""Quest engine: owns the Player and the ordered goal list.

One instance per run. Callers (the HTTP router, a CLI) go through the
engine for every operation; it forwards earned points to the Player and
delegates save/load to the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from app.quest.badges_config import POINTS_PER_LEVEL, list_badges
from app.quest.codec import LINE_BREAKS, parse_int
from app.quest.goals import ChecklistGoal, EternalGoal, Goal, SimpleGoal, get_goal_type
from app.quest.player import Notification, Player
from app.quest.presets import list_presets
from app.quest.store import load_state, save_state

logger = logging.getLogger(__name__)

DEFAULT_SAVE_PATH = "goals.txt"


class QuestError(ValueError):
    """Base class for rejected engine operations."""


class InvalidGoalError(QuestError):
    pass


class InvalidGoalIndexError(QuestError):
    pass


@dataclass(frozen=True, slots=True)
class GoalListing:
    index: int  # 1-based
    status: str
    name: str
    description: str
    kind: str
    complete: bool


@dataclass(frozen=True, slots=True)
class EventOutcome:
    index: int
    earned: int
    goal: Goal
    notifications: list[Notification] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ScoreSummary:
    score: int
    level: int
    badges: list[str]  # in threshold order


@dataclass(frozen=True, slots=True)
class LoadSummary:
    path: str
    goals_loaded: int
    lines_skipped: int
    score: int
    notifications: list[Notification] = field(default_factory=list)


def _coerce_int(value: int | str | None, name: str, default: int | None = None) -> int:
    """Accept ints or integer strings; anything else is rejected."""
    if value is None:
        if default is None:
            raise InvalidGoalError(f"Missing value for '{name}'")
        return default
    if isinstance(value, bool):
        raise InvalidGoalError(f"Invalid integer for '{name}': {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        parsed = parse_int(value)
        if parsed is not None:
            return parsed
    raise InvalidGoalError(f"Invalid integer for '{name}': {value!r}")


class QuestEngine:
    def __init__(
        self,
        points_per_level: int = POINTS_PER_LEVEL,
        seed_demo_goals: bool = False,
        default_path: str = DEFAULT_SAVE_PATH,
        replay_on_load: bool = False,
    ):
        self.points_per_level = points_per_level
        self.default_path = default_path
        self.replay_on_load = replay_on_load
        self.player = Player(points_per_level)
        self._goals: list[Goal] = []
        if seed_demo_goals:
            self.seed()

    @property
    def goals(self) -> list[Goal]:
        """Snapshot of the goal list in insertion order."""
        return list(self._goals)

    def seed(self) -> list[Goal]:
        added = [preset.build() for preset in list_presets()]
        self._goals.extend(added)
        return added

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def create_goal(
        self,
        kind: str,
        name: str,
        description: str,
        points: int | str,
        target: int | str | None = None,
        bonus: int | str | None = None,
    ) -> Goal:
        """Append a new goal.

        Args:
            kind: "simple", "eternal" or "checklist" (case-insensitive)
            name: Non-empty goal name
            description: Free text
            points: Points per event
            target: Checklist only, events required (default 1)
            bonus: Checklist only, completion bonus (default 0)

        Raises:
            InvalidGoalError: Unknown kind, empty name, line breaks in text
                or non-integer numbers
        """
        goal_type = get_goal_type(kind or "")
        if goal_type is None:
            raise InvalidGoalError(f"Unknown goal type: {kind}")
        if not name or not name.strip():
            raise InvalidGoalError("Goal name must not be empty")
        if any(ch in text for text in (name, description or "") for ch in LINE_BREAKS):
            raise InvalidGoalError("Goal name and description must be a single line")

        pts = _coerce_int(points, "points")
        if goal_type is ChecklistGoal:
            tgt = _coerce_int(target, "target", default=1)
            if tgt < 1:
                raise InvalidGoalError("Checklist target must be at least 1")
            goal: Goal = ChecklistGoal(
                name, description or "", pts, target=tgt, bonus=_coerce_int(bonus, "bonus", default=0)
            )
        elif goal_type is EternalGoal:
            goal = EternalGoal(name, description or "", pts)
        else:
            goal = SimpleGoal(name, description or "", pts)

        self._goals.append(goal)
        logger.info("Created %s goal %r (%d points)", goal.kind, goal.name, goal.points)
        return goal

    def list_goals(self) -> list[GoalListing]:
        return [
            GoalListing(
                index=i,
                status=g.status_text(),
                name=g.name,
                description=g.description,
                kind=g.kind,
                complete=g.is_complete,
            )
            for i, g in enumerate(self._goals, start=1)
        ]

    def _resolve_index(self, index: int | str) -> int:
        try:
            idx = _coerce_int(index, "index")
        except InvalidGoalError:
            raise InvalidGoalIndexError(f"Invalid goal index: {index!r}") from None
        if not 1 <= idx <= len(self._goals):
            raise InvalidGoalIndexError(f"Invalid goal index: {idx}")
        return idx

    def get_goal(self, index: int | str) -> Goal:
        return self._goals[self._resolve_index(index) - 1]

    def record_event(self, index: int | str) -> EventOutcome:
        """Record one event against the goal at 1-based `index`.

        Only positive earnings reach the Player.

        Raises:
            InvalidGoalIndexError: If index is not an integer in [1, len(goals)]
        """
        idx = self._resolve_index(index)
        goal = self._goals[idx - 1]
        earned = goal.record_event()

        notifications: list[Notification] = []
        if earned > 0:
            notifications = self.player.add_points(earned)
            logger.info("Recorded event on %r: +%d points", goal.name, earned)
        else:
            logger.info("Recorded event on %r: no points earned", goal.name)

        return EventOutcome(index=idx, earned=earned, goal=goal, notifications=notifications)

    # ------------------------------------------------------------------
    # Player
    # ------------------------------------------------------------------

    def score_summary(self) -> ScoreSummary:
        earned = self.player.badges
        return ScoreSummary(
            score=self.player.score,
            level=self.player.level,
            badges=[b.label for b in list_badges() if b.label in earned],
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, path: str | Path | None = None) -> str:
        target = str(path or self.default_path)
        save_state(target, self.player.score, self._goals)
        return target

    def load(self, path: str | Path | None = None) -> LoadSummary:
        """Replace the goal list (and Player, if saved) with the file's contents.

        Raises:
            SaveFileNotFound: If the file is missing; state is left untouched
        """
        source = str(path or self.default_path)
        state = load_state(source)

        self._goals.clear()
        self._goals.extend(state.goals)

        notifications: list[Notification] = []
        if state.score is not None:
            self.player, notifications = Player.from_score(
                state.score, self.points_per_level, replay=self.replay_on_load
            )

        return LoadSummary(
            path=source,
            goals_loaded=len(state.goals),
            lines_skipped=len(state.skipped),
            score=self.player.score,
            notifications=notifications,
        )

"""Player: cumulative score with derived level and badges.

Level and badges are never set directly: every score change recomputes
them from `score`, so they cannot drift apart. Each change that crosses
a level or badge boundary yields a Notification for the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.quest.badges_config import POINTS_PER_LEVEL, badges_for_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Notification:
    kind: str  # "level_up" | "badge"
    message: str
    level: int | None = None
    badge: str | None = None
    threshold: int | None = None


def level_for_score(score: int, points_per_level: int = POINTS_PER_LEVEL) -> int:
    """1 for a fresh player, +1 for every full `points_per_level` earned."""
    return max(score, 0) // points_per_level + 1


class Player:
    def __init__(self, points_per_level: int = POINTS_PER_LEVEL):
        if points_per_level <= 0:
            raise ValueError("points_per_level must be positive")
        self.points_per_level = points_per_level
        self._score = 0
        self._level = 1
        self._badges: set[str] = set()

    @classmethod
    def from_score(
        cls,
        score: int,
        points_per_level: int = POINTS_PER_LEVEL,
        replay: bool = False,
    ) -> tuple[Player, list[Notification]]:
        """Rebuild a Player holding `score`.

        replay=False sets the score and recomputes level/badges silently.
        replay=True applies the score as one cumulative add_points call and
        returns the notifications that produced.
        """
        player = cls(points_per_level)
        if replay:
            return player, player.add_points(score)

        player._score = max(score, 0)
        player._level = level_for_score(player._score, points_per_level)
        player._badges = {b.label for b in badges_for_score(player._score)}
        return player, []

    @property
    def score(self) -> int:
        return self._score

    @property
    def level(self) -> int:
        return self._level

    @property
    def badges(self) -> frozenset[str]:
        return frozenset(self._badges)

    def add_points(self, amount: int) -> list[Notification]:
        if amount == 0:
            return []

        self._score = max(self._score + amount, 0)
        return self._update_level() + self._update_badges()

    def _update_level(self) -> list[Notification]:
        old_level = self._level
        self._level = level_for_score(self._score, self.points_per_level)
        if self._level <= old_level:
            return []

        logger.info("Level up: reached level %d (score=%d)", self._level, self._score)
        return [
            Notification(
                kind="level_up",
                message=f"Level Up! You reached level {self._level}.",
                level=self._level,
            )
        ]

    def _update_badges(self) -> list[Notification]:
        # Earned badges only accumulate; a lower score never revokes one
        notes: list[Notification] = []
        for badge in badges_for_score(self._score):
            if badge.label in self._badges:
                continue
            self._badges.add(badge.label)
            logger.info("Badge earned: %s (score >= %d)", badge.label, badge.threshold)
            notes.append(
                Notification(
                    kind="badge",
                    message=f"Badge earned: {badge.label} (score >= {badge.threshold})",
                    badge=badge.label,
                    threshold=badge.threshold,
                )
            )
        return notes

"""Static badge thresholds: config only.

A badge is granted the first time a Player's cumulative score reaches
its threshold. Thresholds are kept in ascending order so notifications
come out lowest-first when one award crosses several of them.
"""

from __future__ import annotations

from dataclasses import dataclass

POINTS_PER_LEVEL = 1000


@dataclass(frozen=True, slots=True)
class BadgeDefinition:
    threshold: int
    label: str


BADGES: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(threshold=500, label="Getting Started"),
    BadgeDefinition(threshold=2000, label="Committed"),
    BadgeDefinition(threshold=5000, label="Dedicated"),
    BadgeDefinition(threshold=10000, label="Legend"),
)


def list_badges() -> list[BadgeDefinition]:
    return list(BADGES)


def badges_for_score(score: int) -> list[BadgeDefinition]:
    """Every badge whose threshold is at or below `score`."""
    return [b for b in BADGES if score >= b.threshold]

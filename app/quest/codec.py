"""Line-oriented save format for the Player score and the goal list.

    Player|<score>
    Simple|<name>|<description>|<points>|<completed: True/False>
    Eternal|<name>|<description>|<points>|<times_recorded>
    Checklist|<name>|<description>|<points>|<target>|<bonus>|<times_completed>

Fields are not escaped: a name or description containing the delimiter
is written as-is and will not load back intact. Decoding never raises:
every line yields a ParsedLine, and malformed lines or unknown tags are
skipped by `decode_lines`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from app.quest.goals import DELIMITER, ChecklistGoal, EternalGoal, Goal, SimpleGoal

logger = logging.getLogger(__name__)

PLAYER_TAG = "Player"

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")

LINE_BREAKS = ("\r", "\n")


def has_reserved_chars(text: str) -> bool:
    """True when `text` would split a record: the delimiter or a line break."""
    return DELIMITER in text or any(ch in text for ch in LINE_BREAKS)


@dataclass(frozen=True, slots=True)
class ParsedLine:
    score: int | None = None
    goal: Goal | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class DecodedState:
    score: int | None = None  # None when no Player line was present
    goals: list[Goal] = field(default_factory=list)
    skipped: list[tuple[int, str]] = field(default_factory=list)  # (line number, reason)


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


def encode_state(score: int, goals: Iterable[Goal]) -> list[str]:
    """Player line first, then one line per goal in collection order."""
    lines = [f"{PLAYER_TAG}{DELIMITER}{score}"]
    for goal in goals:
        if has_reserved_chars(goal.name) or has_reserved_chars(goal.description):
            logger.warning("Goal %r contains a delimiter or line break; it will not load back intact", goal.name)
        lines.append(goal.serialize())
    return lines


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------


def parse_int(raw: str) -> int | None:
    if not _INT_RE.match(raw):
        return None
    try:
        return int(raw)
    except ValueError:
        # Past the interpreter's int string conversion limit
        return None


def _parse_bool(raw: str) -> bool | None:
    value = raw.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def _parse_ints(parts: Sequence[str]) -> list[int] | None:
    values = [parse_int(p) for p in parts]
    if any(v is None for v in values):
        return None
    return values  # type: ignore[return-value]


def _parse_player(parts: list[str]) -> ParsedLine:
    if len(parts) < 2:
        return ParsedLine(error="Player line has no score")
    score = parse_int(parts[1])
    if score is None:
        return ParsedLine(error=f"Invalid score: {parts[1]!r}")
    return ParsedLine(score=score)


def _parse_simple(parts: list[str]) -> ParsedLine:
    if len(parts) < 5:
        return ParsedLine(error="Simple line needs 5 fields")
    points = parse_int(parts[3])
    completed = _parse_bool(parts[4])
    if points is None or completed is None:
        return ParsedLine(error="Simple line has invalid points or completed flag")
    return ParsedLine(goal=SimpleGoal(parts[1], parts[2], points, completed=completed))


def _parse_eternal(parts: list[str]) -> ParsedLine:
    if len(parts) < 5:
        return ParsedLine(error="Eternal line needs 5 fields")
    values = _parse_ints(parts[3:5])
    if values is None:
        return ParsedLine(error="Eternal line has non-integer fields")
    points, times = values
    return ParsedLine(goal=EternalGoal(parts[1], parts[2], points, times_recorded=times))


def _parse_checklist(parts: list[str]) -> ParsedLine:
    if len(parts) < 7:
        return ParsedLine(error="Checklist line needs 7 fields")
    values = _parse_ints(parts[3:7])
    if values is None:
        return ParsedLine(error="Checklist line has non-integer fields")
    points, target, bonus, times = values
    return ParsedLine(
        goal=ChecklistGoal(parts[1], parts[2], points, target=target, bonus=bonus, times_completed=times)
    )


_PARSERS = {
    PLAYER_TAG: _parse_player,
    SimpleGoal.kind: _parse_simple,
    EternalGoal.kind: _parse_eternal,
    ChecklistGoal.kind: _parse_checklist,
}


def parse_line(line: str) -> ParsedLine:
    """Parse one persisted record. Extra trailing fields are ignored."""
    parts = line.rstrip("\r\n").split(DELIMITER)
    parser = _PARSERS.get(parts[0])
    if parser is None:
        return ParsedLine(error=f"Unknown tag: {parts[0]!r}")
    return parser(parts)


def decode_lines(lines: Iterable[str | bytes]) -> DecodedState:
    """Rebuild state from persisted lines, skipping blank and malformed ones.

    Byte lines are decoded as UTF-8 one at a time; a line that does not
    decode is skipped like any other malformed line. When several Player
    lines are present the last one wins.
    """
    state = DecodedState()
    for lineno, raw in enumerate(lines, start=1):
        if isinstance(raw, bytes):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("Skipping line %d: not valid UTF-8", lineno)
                state.skipped.append((lineno, "Line is not valid UTF-8"))
                continue
        else:
            line = raw

        if not line.strip():
            continue

        parsed = parse_line(line)
        if not parsed.ok:
            logger.debug("Skipping line %d: %s", lineno, parsed.error)
            state.skipped.append((lineno, parsed.error or ""))
            continue

        if parsed.goal is not None:
            state.goals.append(parsed.goal)
        else:
            state.score = parsed.score
    return state

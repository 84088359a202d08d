"""File access for saved quests: one record per line, UTF-8."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from app.quest.codec import DecodedState, decode_lines, encode_state
from app.quest.goals import Goal

logger = logging.getLogger(__name__)


class SaveFileNotFound(FileNotFoundError):
    """Raised by load_state when the save file does not exist."""


def save_state(path: str | Path, score: int, goals: Iterable[Goal]) -> int:
    """Write the Player line and every goal to `path`. Returns the goal count."""
    lines = encode_state(score, goals)
    target = Path(path)
    with target.open("w", encoding="utf-8", newline="\n") as fh:
        for line in lines:
            fh.write(line + "\n")

    logger.info("Saved %d goals (score=%d) to %s", len(lines) - 1, score, target)
    return len(lines) - 1


def load_state(path: str | Path) -> DecodedState:
    """Read and decode `path`. Malformed lines are skipped, never raised."""
    source = Path(path)
    if not source.is_file():
        raise SaveFileNotFound(f"Save file not found: {source}")

    # Decoded line by line in decode_lines; an undecodable line is skipped
    with source.open("rb") as fh:
        state = decode_lines(fh)

    if state.skipped:
        logger.info("Skipped %d malformed line(s) in %s", len(state.skipped), source)
    logger.info("Loaded %d goals from %s", len(state.goals), source)
    return state

"""Question-budget progress tracking for interview turns."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_QUESTION_COUNT = 8
NEAR_END_REMAINING = 2


class Phase(str, Enum):
    IN_PROGRESS = "in_progress"
    NEAR_END = "near_end"
    CONCLUDE = "conclude"


@dataclass(frozen=True)
class Progress:
    current: int
    total: int
    remaining: int
    phase: Phase

    @property
    def concluded(self) -> bool:
        return self.phase is Phase.CONCLUDE


def compute_progress(question_budget: int, current: int) -> Progress:
    """Return the progress snapshot for the turn being answered.

    ``current`` counts user messages including the one being processed. A
    budget below one is clamped to one so a bad setting cannot conclude
    every interview before it starts.
    """

    total = max(1, int(question_budget))
    current = max(0, int(current))
    remaining = max(0, total - current)
    if remaining == 0:
        phase = Phase.CONCLUDE
    elif remaining <= NEAR_END_REMAINING:
        phase = Phase.NEAR_END
    else:
        phase = Phase.IN_PROGRESS
    return Progress(current=current, total=total, remaining=remaining, phase=phase)


def parse_question_budget(raw: Optional[str], default: int = DEFAULT_QUESTION_COUNT) -> int:
    """Interpret a stored ``question_count`` value."""

    if raw is None:
        return max(1, default)
    try:
        value = int(str(raw).strip())
    except ValueError:
        return max(1, default)
    return max(1, value)


__all__ = ["DEFAULT_QUESTION_COUNT", "Phase", "Progress", "compute_progress", "parse_question_budget"]

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List

from ..errors import TimelineError


def _as_whole_age(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TimelineError(f"{label} must be a number (got {value!r}).")
    if not math.isfinite(value):
        raise TimelineError(f"{label} must be finite.")
    if isinstance(value, float):
        if not value.is_integer():
            raise TimelineError(f"{label} must be an integer (got {value}).")
        return int(value)
    return value


@dataclass(frozen=True)
class Timeline:
    """Inclusive age range; index 0 is start_age."""

    start_age: int
    end_age: int

    @property
    def length(self) -> int:
        return self.end_age - self.start_age + 1

    def ages(self) -> List[int]:
        return list(range(self.start_age, self.end_age + 1))

    def age_at(self, index: int) -> int:
        return self.start_age + index


def make_timeline(start_age: Any, end_age: Any) -> Timeline:
    start = _as_whole_age(start_age, "Timeline start age")
    end = _as_whole_age(end_age, "Timeline end age")
    if end < start:
        raise TimelineError(f"Timeline end age ({end}) must be >= start age ({start}).")
    return Timeline(start_age=start, end_age=end)


def year_index_from_age(timeline: Timeline, age: Any) -> int:
    idx = _as_whole_age(age, "Age") - timeline.start_age
    if idx < 0 or idx >= timeline.length:
        raise TimelineError(
            f"Age {age} out of bounds (timeline {timeline.start_age}..{timeline.end_age})."
        )
    return idx

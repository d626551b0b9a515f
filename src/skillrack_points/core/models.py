from __future__ import annotations

import math
from dataclasses import dataclass, field
from fractions import Fraction
from numbers import Integral, Real
from typing import Any, Dict, Mapping, Optional, Tuple

from skillrack_points.core.errors import GoalValidationError
from skillrack_points.taxonomy import CATEGORY_FIELDS, CATEGORY_ORDER


def _coerce_count(value: Any) -> int:
    """Lenient count used when building statistics from loose mappings."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, Integral):
        return max(0, int(value))
    if isinstance(value, Real):
        if not math.isfinite(value):
            return 0
        return max(0, int(value))
    if isinstance(value, str):
        digits = "".join(ch for ch in value if ch.isdigit() and ch.isascii())
        return int(digits) if digits else 0
    return 0


def _coerce_whole(value: Any, name: str) -> int:
    """Strict integer used by goal requests: finite and integral, never bool."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise GoalValidationError(name, f"must be an integer, got {value!r}")
    if isinstance(value, Integral):
        return int(value)
    if not math.isfinite(value):
        raise GoalValidationError(name, f"must be a finite integer, got {value!r}")
    if value != int(value):
        raise GoalValidationError(name, f"must be a whole number, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class RawStatistics:
    """Per-category activity counts extracted from a profile page."""

    code_tutor: int = 0
    code_track: int = 0
    code_test: int = 0
    daily_test: int = 0
    daily_challenge: int = 0

    def get(self, category: str) -> int:
        return getattr(self, CATEGORY_FIELDS[category])

    def as_dict(self) -> Dict[str, int]:
        return {cat: self.get(cat) for cat in CATEGORY_ORDER}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RawStatistics":
        """camelCase mapping -> record. Missing/unparsable -> 0, negatives clamp to 0."""
        return cls(**{CATEGORY_FIELDS[cat]: _coerce_count(data.get(cat)) for cat in CATEGORY_ORDER})


@dataclass(frozen=True)
class ScoredProfile:
    """RawStatistics plus derived points. Built by scoring.score only."""

    stats: RawStatistics
    category_points: Dict[str, int]
    total_points: int

    def as_json(self) -> Dict[str, int]:
        out = self.stats.as_dict()
        out["totalPoints"] = self.total_points
        return out


@dataclass(frozen=True)
class PipelineResult:
    """Return type for run_pipeline."""

    profile: Optional[ScoredProfile]
    status: str
    ok: bool
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class GoalRequest:
    """
    Validated on construction: every field is a finite integer (whole floats
    are normalized to int), current >= 0 and timeline >= 1.
    """

    current_points: int
    target_points: int
    timeline_days: int

    def __post_init__(self) -> None:
        current = _coerce_whole(self.current_points, "currentPoints")
        target = _coerce_whole(self.target_points, "targetPoints")
        days = _coerce_whole(self.timeline_days, "timelineDays")

        if current < 0:
            raise GoalValidationError("currentPoints", "must not be negative")
        if days <= 0:
            raise GoalValidationError("timelineDays", "must be a positive number of days")

        object.__setattr__(self, "current_points", current)
        object.__setattr__(self, "target_points", target)
        object.__setattr__(self, "timeline_days", days)

    @classmethod
    def create(cls, current_points: Any, target_points: Any, timeline_days: Any) -> "GoalRequest":
        """Loose inputs (form/CLI values) -> GoalRequest. Raises GoalValidationError."""
        return cls(current_points=current_points, target_points=target_points, timeline_days=timeline_days)


@dataclass(frozen=True)
class GoalPlan:
    """
    Output of goal planning.

    Invariants
    ----------
    * ``already_achieved`` implies ``points_needed == 0`` and an empty breakdown.
    * ``planned_points == points_needed + overshoot`` when feasible.
    """

    points_needed: int
    daily_points_required: Fraction
    category_breakdown: Dict[str, int] = field(default_factory=dict)
    feasible: bool = True
    already_achieved: bool = False
    planned_points: int = 0
    overshoot: int = 0
    timeline_days: Optional[int] = None

    def as_json(self) -> Dict[str, Any]:
        daily = self.daily_points_required
        return {
            "pointsNeeded": self.points_needed,
            "dailyPointsRequired": float(daily),
            "dailyPointsExact": {"numerator": daily.numerator, "denominator": daily.denominator},
            "categoryBreakdown": dict(self.category_breakdown),
            "feasible": self.feasible,
            "alreadyAchieved": self.already_achieved,
            "plannedPoints": self.planned_points,
            "overshoot": self.overshoot,
            "timelineDays": self.timeline_days,
        }

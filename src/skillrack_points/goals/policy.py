from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from skillrack_points.taxonomy import CATEGORY_WEIGHTS, DEFAULT_PLAN_ORDER, scoring_categories


@dataclass(frozen=True)
class PlannerPolicy:
    """
    How the greedy breakdown is built.

    order:
        Categories tried first to last. The last uncapped one absorbs any
        residual that no category expresses exactly.
    daily_capped:
        Categories limited to one unit per day of the timeline.
    """

    order: Tuple[str, ...] = tuple(DEFAULT_PLAN_ORDER)
    daily_capped: FrozenSet[str] = frozenset()

    def cap_for(self, category: str, timeline_days: int) -> Optional[int]:
        return timeline_days if category in self.daily_capped else None


DEFAULT_POLICY = PlannerPolicy()

# `planner.daily_capped` shorthand for taxonomy.ONCE_PER_DAY
PLATFORM_CAPS = "platform"


def validate_policy(policy: PlannerPolicy) -> List[str]:
    """
    Returns issues (strings). Does not raise.
    Checks:
      - categories exist and score points
      - no duplicates in order
      - at least one category to plan with
    """
    issues: List[str] = []

    unknown = sorted({c for c in policy.order if c not in CATEGORY_WEIGHTS})
    if unknown:
        issues.append(f"planner order references unknown categories: {unknown}")

    zero = sorted({c for c in policy.order if CATEGORY_WEIGHTS.get(c) == 0})
    if zero:
        issues.append(f"planner order includes categories worth 0 points: {zero}")

    dupes = sorted({c for c in policy.order if policy.order.count(c) > 1})
    if dupes:
        issues.append(f"planner order lists categories more than once: {dupes}")

    scoring = set(scoring_categories())
    if not any(c in scoring for c in policy.order):
        issues.append("planner order has no scoring category")

    unknown_caps = sorted(c for c in policy.daily_capped if c not in CATEGORY_WEIGHTS)
    if unknown_caps:
        issues.append(f"daily_capped references unknown categories: {unknown_caps}")

    return issues

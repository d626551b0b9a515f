from __future__ import annotations

from fractions import Fraction
from typing import Dict, Optional, Tuple

from skillrack_points.core import GoalPlan, GoalRequest, GoalValidationError
from skillrack_points.taxonomy import CATEGORY_WEIGHTS, weight_of

from .policy import DEFAULT_POLICY, PlannerPolicy, validate_policy


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def _absorber(policy: PlannerPolicy) -> Optional[str]:
    for cat in reversed(policy.order):
        if CATEGORY_WEIGHTS.get(cat, 0) > 0 and cat not in policy.daily_capped:
            return cat
    return None


def allocate(points_needed: int, timeline_days: int, policy: PlannerPolicy = DEFAULT_POLICY) -> Tuple[Dict[str, int], int]:
    """
    Greedy breakdown of `points_needed` over policy.order.

    Each category takes remaining // weight units (bounded by its daily cap).
    A leftover residual goes to the last uncapped category as
    ceil(residual / weight) units, overshooting by at most weight - 1 points.
    When every category is capped the residual is spread over spare capacity
    from the end of the order; what cannot be placed is returned as unmet.

    Returns (breakdown in policy order without zero entries, unmet points).
    """
    remaining = points_needed
    units: Dict[str, int] = {}

    for cat in policy.order:
        weight = CATEGORY_WEIGHTS.get(cat, 0)
        if weight <= 0 or remaining <= 0:
            continue
        n = remaining // weight
        cap = policy.cap_for(cat, timeline_days)
        if cap is not None:
            n = min(n, cap)
        units[cat] = units.get(cat, 0) + n
        remaining -= n * weight

    if remaining > 0:
        absorber = _absorber(policy)
        if absorber is not None:
            extra = _ceil_div(remaining, weight_of(absorber))
            units[absorber] = units.get(absorber, 0) + extra
            remaining -= extra * weight_of(absorber)
        else:
            for cat in reversed(policy.order):
                weight = CATEGORY_WEIGHTS.get(cat, 0)
                if weight <= 0 or remaining <= 0:
                    continue
                spare = timeline_days - units.get(cat, 0)
                extra = min(spare, _ceil_div(remaining, weight))
                if extra > 0:
                    units[cat] = units.get(cat, 0) + extra
                    remaining -= extra * weight

    ordered = {cat: units[cat] for cat in policy.order if units.get(cat)}
    return ordered, max(0, remaining)


def plan_goal(request: GoalRequest, *, policy: PlannerPolicy = DEFAULT_POLICY) -> GoalPlan:
    """
    GoalRequest -> GoalPlan. Pure; same request and policy give the same plan.

    Raises GoalValidationError for a non-integral or non-finite field, a
    non-positive timeline or a bad policy.
    A target at or below the current points is "already achieved", not an error.
    """
    # re-run field validation; request may be any object with these attributes
    request = GoalRequest(
        current_points=request.current_points,
        target_points=request.target_points,
        timeline_days=request.timeline_days,
    )
    days = request.timeline_days

    issues = validate_policy(policy)
    if issues:
        raise GoalValidationError("policy", "; ".join(issues))

    points_needed = max(0, request.target_points - request.current_points)
    if points_needed == 0:
        return GoalPlan(
            points_needed=0,
            daily_points_required=Fraction(0),
            category_breakdown={},
            feasible=True,
            already_achieved=True,
            planned_points=0,
            overshoot=0,
            timeline_days=days,
        )

    breakdown, unmet = allocate(points_needed, days, policy)
    planned = sum(n * weight_of(cat) for cat, n in breakdown.items())

    return GoalPlan(
        points_needed=points_needed,
        daily_points_required=Fraction(points_needed, days),
        category_breakdown=breakdown,
        feasible=unmet == 0,
        already_achieved=False,
        planned_points=planned,
        overshoot=max(0, planned - points_needed),
        timeline_days=days,
    )


def plan_goal_for(current_points, target_points, timeline_days, *, policy: PlannerPolicy = DEFAULT_POLICY) -> GoalPlan:
    """Validate loose inputs (form/CLI values) and plan."""
    return plan_goal(GoalRequest.create(current_points, target_points, timeline_days), policy=policy)

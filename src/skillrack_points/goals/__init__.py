from .planner import allocate, plan_goal, plan_goal_for
from .policy import DEFAULT_POLICY, PLATFORM_CAPS, PlannerPolicy, validate_policy

__all__ = [
    "DEFAULT_POLICY",
    "PLATFORM_CAPS",
    "PlannerPolicy",
    "allocate",
    "plan_goal",
    "plan_goal_for",
    "validate_policy",
]

from skillrack_points.core.errors import (  # noqa: F401
    ERROR_CODES,
    GoalValidationError,
)
from skillrack_points.core.models import (  # noqa: F401
    GoalPlan,
    GoalRequest,
    PipelineResult,
    RawStatistics,
    ScoredProfile,
)

__all__ = [
    "ERROR_CODES",
    "GoalPlan",
    "GoalRequest",
    "PipelineResult",
    "GoalValidationError",
    "RawStatistics",
    "ScoredProfile",
]

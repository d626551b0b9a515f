from __future__ import annotations

from typing import Tuple

INVALID_URL = "INVALID_URL"
VALIDATION_ERROR = "VALIDATION_ERROR"
NETWORK_ERROR = "NETWORK_ERROR"
NOT_FOUND = "NOT_FOUND"
PARSE_ERROR = "PARSE_ERROR"
RATE_LIMITED = "RATE_LIMITED"

ERROR_CODES: Tuple[str, ...] = (
    INVALID_URL,
    VALIDATION_ERROR,
    NETWORK_ERROR,
    NOT_FOUND,
    PARSE_ERROR,
    RATE_LIMITED,
)


class GoalValidationError(ValueError):
    """Raised when a goal request cannot be planned (bad timeline/target)."""

    code = VALIDATION_ERROR

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")

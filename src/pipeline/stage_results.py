from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from skillrack_points.core.errors import INVALID_URL, PARSE_ERROR


class PipelineStageError(RuntimeError):
    """Structured pipeline failure used to short-circuit `run_pipeline`.

    Attributes
    ----------
    stage:
        Machine-readable stage identifier (e.g. "url-validation").
    reason:
        Failure summary suitable for a status string.
    code:
        Error code (``skillrack_points.core.errors``) that callers map to a response.
    context:
        Optional extra context that should accompany the reason when
        constructing status messages.
    """

    def __init__(self, stage: str, reason: str, *, code: str = PARSE_ERROR, context: Optional[str] = None) -> None:
        self.stage = stage
        self.reason = reason
        self.code = code
        self.context = context
        super().__init__(self.status)

    @property
    def status(self) -> str:
        if self.context:
            return f"{self.stage}: {self.reason} ({self.context})"
        return f"{self.stage}: {self.reason}"


class InvalidProfileUrl(PipelineStageError):
    def __init__(self, reason: str, *, context: Optional[str] = None) -> None:
        super().__init__("url-validation", reason, code=INVALID_URL, context=context)


@dataclass(frozen=True)
class UrlCheck:
    """Outcome of URL normalization + validation.

    Invariants
    ----------
    * When ``ok`` is True, ``url`` is the canonical profile URL and ``code`` is None.
    * When ``ok`` is False, ``url`` is None and ``code`` is ``INVALID_URL``;
      the partially normalized text is only kept in ``raw`` for messages.
    """

    url: Optional[str]
    raw: str
    reason: str
    code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.url is not None and self.code is None

    @classmethod
    def accepted(cls, url: str, *, raw: str) -> "UrlCheck":
        return cls(url=url, raw=raw, reason="ok")

    @classmethod
    def rejected(cls, reason: str, *, raw: str) -> "UrlCheck":
        return cls(url=None, raw=raw, reason=reason, code=INVALID_URL)

    def require_ok(self) -> str:
        if not self.ok or self.url is None:
            raise InvalidProfileUrl(self.reason, context=f"input={self.raw!r}")
        return self.url


@dataclass(frozen=True)
class ExtractionReport:
    """Which expected labels were found while extracting statistics.

    Extraction never fails; this is informational only (surfaced as warnings).
    """

    found: Tuple[str, ...]
    missing: Tuple[str, ...]
    pairs_seen: int

    @property
    def empty(self) -> bool:
        return not self.found

from __future__ import annotations

import time
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from skillrack_points.config import AppConfig, load_app_config
from skillrack_points.core import GoalPlan, GoalValidationError, PipelineResult, ScoredProfile
from skillrack_points.core.errors import INVALID_URL, PARSE_ERROR, RATE_LIMITED
from skillrack_points.fetch import FetchError, fetch_profile_html
from skillrack_points.goals import plan_goal_for
from skillrack_points.rate_limit import RateLimiter
from pipeline import normalize_and_validate, run_pipeline
from pipeline.timing import timing_log

Fetcher = Callable[[str], str]

_HTTP_STATUS = {
    None: 200,
    INVALID_URL: 400,
    RATE_LIMITED: 429,
}


@dataclass(frozen=True)
class AnalysisResult:
    url: Optional[str]
    ok: bool
    code: Optional[str]
    message: Optional[str]
    profile: Optional[ScoredProfile]
    warnings: Tuple[str, ...] = ()
    logs: Tuple[str, ...] = ()

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS.get(self.code, 500)

    def as_json(self) -> dict:
        out: Dict[str, Any] = {"success": self.ok}
        if self.ok and self.profile is not None:
            out["data"] = self.profile.as_json()
        else:
            out["error"] = self.message
            out["code"] = self.code
        return out


@dataclass(frozen=True)
class PlanResult:
    ok: bool
    plan: Optional[GoalPlan]
    code: Optional[str] = None
    message: Optional[str] = None
    field: Optional[str] = None

    def as_json(self) -> dict:
        if self.ok and self.plan is not None:
            return {"success": True, "data": self.plan.as_json()}
        return {"success": False, "error": self.message, "code": self.code, "field": self.field}


def _failure(code: str, message: str, *, url: Optional[str], logs) -> AnalysisResult:
    return AnalysisResult(url=url, ok=False, code=code, message=message, profile=None, logs=tuple(logs))


def _default_fetcher(app_cfg: AppConfig) -> Fetcher:
    def fetch(url: str) -> str:
        return fetch_profile_html(url, timeout_s=app_cfg.http_timeout_s, user_agent=app_cfg.user_agent)

    return fetch


def analyze_profile(
    raw_url: object,
    *,
    app_config: Optional[AppConfig] = None,
    config_path: Optional[Path] = None,
    client_id: str = "unknown",
    rate_limiter: Optional[RateLimiter] = None,
    fetch: Optional[Fetcher] = None,
) -> AnalysisResult:
    """
    rate limit -> normalize/validate -> fetch -> extract -> score.

    Request failures come back as an AnalysisResult with an error code. An
    unexpected fetcher exception is reported as PARSE_ERROR.
    Raises ValueError only for an invalid configuration (`AppConfig.validate`).
    """
    app_cfg = app_config or load_app_config(override_path=Path(config_path) if config_path else None)
    app_cfg.validate()

    logs = []

    def logger(msg: str) -> None:
        logs.append(msg)

    if rate_limiter is not None and not rate_limiter.allow(client_id):
        logger(f"rate limited: {client_id}")
        return _failure(
            RATE_LIMITED,
            "Too many requests. Please wait a moment before trying again.",
            url=None,
            logs=logs,
        )

    check = normalize_and_validate(raw_url)
    if not check.ok:
        logger(f"rejected url: {check.raw!r}")
        return _failure(INVALID_URL, check.reason, url=None, logs=logs)
    url = check.url

    fetcher = fetch or _default_fetcher(app_cfg)

    logger(f"fetching {url}")
    started = time.perf_counter()
    try:
        html = fetcher(url)
    except FetchError as e:
        logger(f"fetch failed: {e.code} (status={e.status_code})")
        return _failure(e.code, e.message, url=url, logs=logs)
    except Exception as e:
        logger(f"fetch failed: {type(e).__name__}: {e}")
        return _failure(
            PARSE_ERROR,
            "Failed to parse profile data. Please verify the profile URL is correct.",
            url=url,
            logs=logs,
        )
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    logger(f"fetched {len(html)} chars in {elapsed_ms} ms")
    if app_cfg.timing_log:
        timing_log(f"fetch {url} {elapsed_ms}ms")

    try:
        result = run_pipeline(app_cfg.pipeline_config, html, logger=logger)
    except Exception as e:  # pragma: no cover
        result = PipelineResult(profile=None, status=f"error:exception:{e}", ok=False)

    if not result.ok or result.profile is None:
        return _failure(
            PARSE_ERROR,
            f"Failed to parse profile data: {result.status}",
            url=url,
            logs=logs,
        )

    for w in result.warnings:
        logger(f"warning: {w}")
    logger(result.status)

    return AnalysisResult(
        url=url,
        ok=True,
        code=None,
        message=None,
        profile=result.profile,
        warnings=result.warnings,
        logs=tuple(logs),
    )


def plan_for_points(
    current_points: Any,
    target_points: Any,
    timeline_days: Any,
    *,
    app_config: Optional[AppConfig] = None,
) -> PlanResult:
    app_cfg = app_config or AppConfig()
    try:
        plan = plan_goal_for(current_points, target_points, timeline_days, policy=app_cfg.planner_policy)
    except GoalValidationError as e:
        return PlanResult(ok=False, plan=None, code=e.code, message=e.message, field=e.field)
    return PlanResult(ok=True, plan=plan)


def plan_for_profile(
    profile: ScoredProfile,
    target_points: Any,
    timeline_days: Any,
    *,
    app_config: Optional[AppConfig] = None,
) -> PlanResult:
    return plan_for_points(profile.total_points, target_points, timeline_days, app_config=app_config)

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple

try:  # Python <3.11 fallback
    import tomllib  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - fallback path
    import tomli as tomllib  # type: ignore

from skillrack_points.goals import PLATFORM_CAPS, PlannerPolicy, validate_policy
from skillrack_points.rate_limit import RateLimiter
from skillrack_points.taxonomy import DEFAULT_PLAN_ORDER, ONCE_PER_DAY, validate_mappings

try:
    import yaml  # type: ignore
except Exception:  # pragma: no cover - import guard
    yaml = None


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
DEFAULT_HTTP_TIMEOUT_S = 10.0
DEFAULT_RATE_LIMIT_WINDOW_S = 60.0
DEFAULT_RATE_LIMIT_MAX_REQUESTS = 10

if TYPE_CHECKING:
    from pipeline.run_pipeline import PipelineConfig


_SECTIONS = ("http", "rate_limit", "planner", "pipeline")


def _load_pyproject_config(project_root: Path) -> Dict[str, Any]:
    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        return {}

    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("skillrack_points", {}) or {}


def _ensure_mapping(obj: Any, ctx: str) -> Dict[str, Any]:
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"{ctx} must be a mapping/object")
    return obj


def _load_override_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config override not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        return _ensure_mapping(json.loads(path.read_text(encoding="utf-8")), "JSON config")
    if suffix in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("PyYAML is required for YAML config overrides")
        return _ensure_mapping(yaml.safe_load(path.read_text(encoding="utf-8")), "YAML config")
    if suffix == ".toml":
        with path.open("rb") as f:
            data = tomllib.load(f)
        # accept both a bare file and a copy of the pyproject table
        nested = data.get("tool", {}).get("skillrack_points")
        return _ensure_mapping(nested if nested is not None else data, "TOML config")

    raise ValueError(f"Unsupported config override format: {path}")


def _merge_section(base: Mapping[str, Any], override: Mapping[str, Any], key: str) -> Dict[str, Any]:
    merged = dict(_ensure_mapping(base.get(key), f"{key} section"))
    merged.update(_ensure_mapping(override.get(key), f"{key} section"))
    return merged


def _merge_top(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    merged.update(override)
    for key in _SECTIONS:
        merged.pop(key, None)
    return merged


def _names(value: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValueError(f"expected a list of category names, got {value!r}")
    return tuple(str(v).strip() for v in value)


def _daily_capped(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str) and value.strip() == PLATFORM_CAPS:
        return tuple(ONCE_PER_DAY)
    return _names(value, ())


@dataclass(frozen=True)
class AppConfig:
    user_agent: str = DEFAULT_USER_AGENT
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    rate_limit_window_s: float = DEFAULT_RATE_LIMIT_WINDOW_S
    rate_limit_max_requests: int = DEFAULT_RATE_LIMIT_MAX_REQUESTS
    planner_order: Tuple[str, ...] = tuple(DEFAULT_PLAN_ORDER)
    planner_daily_capped: Tuple[str, ...] = ()
    pipeline_statistic_selector: str = ".statistic"
    pipeline_label_selector: str = ".label"
    pipeline_value_selector: str = ".value"
    timing_log: bool = False

    @property
    def planner_policy(self) -> PlannerPolicy:
        return PlannerPolicy(order=tuple(self.planner_order), daily_capped=frozenset(self.planner_daily_capped))

    @property
    def pipeline_config(self) -> "PipelineConfig":
        from pipeline.run_pipeline import PipelineConfig  # type: ignore

        return PipelineConfig(
            statistic_selector=self.pipeline_statistic_selector,
            label_selector=self.pipeline_label_selector,
            value_selector=self.pipeline_value_selector,
        )

    def rate_limiter(self) -> RateLimiter:
        return RateLimiter(window_s=self.rate_limit_window_s, max_requests=self.rate_limit_max_requests)

    def validate(self, *, strict: bool = True) -> Dict[str, str]:
        issues: Dict[str, str] = {}

        if not self.user_agent.strip():
            issues["user_agent"] = "user_agent must not be empty"
        if self.http_timeout_s <= 0:
            issues["http_timeout_s"] = f"must be positive, got {self.http_timeout_s}"
        if self.rate_limit_window_s <= 0:
            issues["rate_limit_window_s"] = f"must be positive, got {self.rate_limit_window_s}"
        if self.rate_limit_max_requests < 1:
            issues["rate_limit_max_requests"] = f"must be at least 1, got {self.rate_limit_max_requests}"

        for idx, msg in enumerate(validate_policy(self.planner_policy)):
            issues[f"planner_{idx}"] = msg

        for idx, msg in enumerate(validate_mappings(strict=False)):
            issues[f"taxonomy_{idx}"] = msg

        if not isinstance(self.timing_log, bool):
            issues["timing_log"] = "timing_log must be a bool"

        if strict and issues:
            details = "\n- ".join(f"{k}: {v}" for k, v in issues.items())
            raise ValueError("Config validation failed:\n- " + details)
        return issues

    @classmethod
    def _from_maps(
        cls,
        *,
        top: Mapping[str, Any],
        http: Mapping[str, Any],
        rate_limit: Mapping[str, Any],
        planner: Mapping[str, Any],
        pipeline: Mapping[str, Any],
    ) -> "AppConfig":
        defaults = cls()
        timing = top.get("timing_log")

        return cls(
            user_agent=str(http.get("user_agent") or top.get("user_agent") or DEFAULT_USER_AGENT),
            http_timeout_s=float(http.get("timeout_s", DEFAULT_HTTP_TIMEOUT_S)),
            rate_limit_window_s=float(rate_limit.get("window_s", DEFAULT_RATE_LIMIT_WINDOW_S)),
            rate_limit_max_requests=int(rate_limit.get("max_requests", DEFAULT_RATE_LIMIT_MAX_REQUESTS)),
            planner_order=_names(planner.get("order"), defaults.planner_order),
            planner_daily_capped=_daily_capped(planner.get("daily_capped")),
            pipeline_statistic_selector=str(pipeline.get("statistic_selector", defaults.pipeline_statistic_selector)),
            pipeline_label_selector=str(pipeline.get("label_selector", defaults.pipeline_label_selector)),
            pipeline_value_selector=str(pipeline.get("value_selector", defaults.pipeline_value_selector)),
            timing_log=bool(False if timing is None else timing),
        )


def load_app_config(*, project_root: Optional[Path] = None, override_path: Optional[Path] = None) -> AppConfig:
    root = Path(project_root) if project_root else Path.cwd()

    base = _load_pyproject_config(root)
    override = _load_override_file(override_path) if override_path else {}

    top = _merge_top(base, override)
    sections = {key: _merge_section(base, override, key) for key in _SECTIONS}

    return AppConfig._from_maps(top=top, **sections)

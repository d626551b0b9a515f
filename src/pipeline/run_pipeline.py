# src/pipeline/run_pipeline.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from skillrack_points.core import PipelineResult
from skillrack_points.scoring import score

from .extract_statistics import (
    LABEL_SELECTOR,
    STATISTIC_SELECTOR,
    VALUE_SELECTOR,
    extract_statistics_report,
    soup_labeled_values,
)


@dataclass(frozen=True)
class PipelineConfig:
    statistic_selector: str = STATISTIC_SELECTOR
    label_selector: str = LABEL_SELECTOR
    value_selector: str = VALUE_SELECTOR


def run_pipeline(
    cfg: PipelineConfig,
    html: str,
    *,
    logger: Optional[Callable[[str], None]] = None,
) -> PipelineResult:
    warnings: List[str] = []

    def log(msg: str) -> None:
        if logger:
            logger(msg)

    # ---- 1) Labeled values ----
    log("collecting labeled values")
    pairs = soup_labeled_values(
        html,
        statistic_selector=cfg.statistic_selector,
        label_selector=cfg.label_selector,
        value_selector=cfg.value_selector,
    )

    # ---- 2) Statistics ----
    log(f"extracting statistics ({len(pairs)} labeled values)")
    stats, report = extract_statistics_report(pairs)
    if report.empty:
        warnings.append("no statistics found on page (all counts 0)")
    elif report.missing:
        warnings.append(f"labels not found (counted as 0): {', '.join(report.missing)}")

    # ---- 3) Score ----
    log("scoring")
    profile = score(stats)

    status = f"done ({len(report.found)}/{len(report.found) + len(report.missing)} labels, {profile.total_points} points)"
    return PipelineResult(profile=profile, status=status, ok=True, warnings=tuple(warnings))

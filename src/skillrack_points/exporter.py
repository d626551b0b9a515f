# exporter.py
from __future__ import annotations

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Optional, Tuple

from .core import GoalPlan, ScoredProfile
from .taxonomy import DISPLAY_ORDER, display_name, validate_mappings, weight_of


@dataclass(frozen=True)
class ExportCategory:
    category: str
    name: str
    count: int
    weight: int
    points: int

    @property
    def calculation(self) -> str:
        return f"{self.count} × {self.weight} = {self.points}"


@dataclass(frozen=True)
class ExportPlanItem:
    category: str
    name: str
    count: int
    points: int


@dataclass(frozen=True)
class ExportResult:
    categories: List[ExportCategory]
    total_points: int
    plan: Optional[GoalPlan] = None
    plan_items: List[ExportPlanItem] = field(default_factory=list)
    warnings: Tuple[str, ...] = ()


class ExportError(Exception):
    """Raised when export preconditions fail (e.g., inconsistent totals)."""


def _category_rows(profile: ScoredProfile) -> List[ExportCategory]:
    rows: List[ExportCategory] = []
    for cat in DISPLAY_ORDER:
        count = profile.stats.get(cat)
        weight = weight_of(cat)
        rows.append(
            ExportCategory(
                category=cat,
                name=display_name(cat),
                count=count,
                weight=weight,
                points=profile.category_points.get(cat, 0),
            )
        )
    return rows


def _plan_items(plan: GoalPlan) -> List[ExportPlanItem]:
    return [
        ExportPlanItem(
            category=cat,
            name=display_name(cat),
            count=n,
            points=n * weight_of(cat),
        )
        for cat, n in plan.category_breakdown.items()
    ]


def build_export(profile: ScoredProfile, plan: Optional[GoalPlan] = None) -> ExportResult:
    # Surface taxonomy errors early (export time).
    validate_mappings(strict=True)

    rows = _category_rows(profile)
    total = sum(r.points for r in rows)
    if total != profile.total_points:
        raise ExportError(f"category points sum to {total}, profile total is {profile.total_points}")

    warnings: List[str] = []
    if total == 0:
        warnings.append("NO_POINTS")
    if plan is not None:
        if plan.already_achieved:
            warnings.append("GOAL_ALREADY_ACHIEVED")
        if not plan.feasible:
            warnings.append("GOAL_NOT_FEASIBLE")
        if plan.overshoot:
            warnings.append(f"PLAN_OVERSHOOT:{plan.overshoot}")

    return ExportResult(
        categories=rows,
        total_points=total,
        plan=plan,
        plan_items=_plan_items(plan) if plan is not None else [],
        warnings=tuple(warnings),
    )


def _write_rows(result: ExportResult, f: IO[str]) -> None:
    w = csv.writer(f)

    w.writerow(["[Statistics]"])
    w.writerow(["Category", "Count", "Calculation", "Points"])
    for r in result.categories:
        w.writerow([r.name, r.count, r.calculation, r.points])
    w.writerow([])

    w.writerow(["[Totals]"])
    w.writerow(["Total Points", result.total_points])

    plan = result.plan
    if plan is not None:
        w.writerow([])
        w.writerow(["[Plan]"])
        w.writerow(["Points Needed", plan.points_needed])
        w.writerow(["Daily Points Required", format(float(plan.daily_points_required), ".2f")])
        w.writerow(["Feasible", "yes" if plan.feasible else "no"])
        w.writerow(["Already Achieved", "yes" if plan.already_achieved else "no"])
        for item in result.plan_items:
            w.writerow([item.name, item.count, item.points])


def write_csv(result: ExportResult, path: Path) -> None:
    path = Path(path)
    with path.open("w", newline="", encoding="utf-8") as f:
        _write_rows(result, f)


def write_csv_stream(result: ExportResult, f: IO[str]) -> None:
    _write_rows(result, f)


def export_to_json(result: ExportResult) -> dict:
    out = {
        "statistics": [
            {
                "category": r.category,
                "name": r.name,
                "count": r.count,
                "weight": r.weight,
                "points": r.points,
                "calculation": r.calculation,
            }
            for r in result.categories
        ],
        "totalPoints": result.total_points,
        "warnings": list(result.warnings),
    }
    if result.plan is not None:
        out["plan"] = result.plan.as_json()
    return out

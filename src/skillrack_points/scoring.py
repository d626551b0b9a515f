from __future__ import annotations

from typing import Dict, Mapping

from skillrack_points.core import RawStatistics, ScoredProfile
from skillrack_points.taxonomy import CATEGORY_ORDER, CATEGORY_WEIGHTS


def category_points(
    stats: RawStatistics,
    *,
    weights: Mapping[str, int] = CATEGORY_WEIGHTS,
) -> Dict[str, int]:
    """
    points[c] = count[c] * weight[c]
    Categories without a weight score 0.
    """
    return {cat: stats.get(cat) * weights.get(cat, 0) for cat in CATEGORY_ORDER}


def score(stats: RawStatistics) -> ScoredProfile:
    """
    total = Σ count * weight, in integers (no rounding anywhere).
    Counts are >= 0 by construction (extractor clamps), not re-checked here.
    """
    points = category_points(stats)
    return ScoredProfile(
        stats=stats,
        category_points=points,
        total_points=sum(points.values()),
    )

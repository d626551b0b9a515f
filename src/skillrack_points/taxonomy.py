from __future__ import annotations

from typing import Dict, List, Mapping, Set


# ---------------------------------------------------------------------------
# Canonical taxonomy (single source of truth)
#
# Categories use the platform's camelCase names. Everything else (labels on
# the profile page, display names, weights, attribute names on the models)
# is keyed by these.
# ---------------------------------------------------------------------------

CODE_TUTOR = "codeTutor"
CODE_TRACK = "codeTrack"
CODE_TEST = "codeTest"
DAILY_TEST = "dailyTest"
DAILY_CHALLENGE = "dailyChallenge"

CATEGORY_ORDER: List[str] = [
    CODE_TUTOR,
    CODE_TRACK,
    CODE_TEST,
    DAILY_TEST,
    DAILY_CHALLENGE,
]

# Points per unit. Code Tutor is display only.
CATEGORY_WEIGHTS: Mapping[str, int] = {
    CODE_TRACK: 2,
    CODE_TEST: 30,
    DAILY_TEST: 20,
    DAILY_CHALLENGE: 2,
    CODE_TUTOR: 0,
}

# Label text of the `.statistic` blocks on a profile page.
# NOTE: matched exactly (case-sensitive) after trimming.
LABEL_TO_CATEGORY: Mapping[str, str] = {
    "CODE TEST": CODE_TEST,
    "CODE TRACK": CODE_TRACK,
    "DC": DAILY_CHALLENGE,
    "DT": DAILY_TEST,
    "CODE TUTOR": CODE_TUTOR,
}

DISPLAY_NAMES: Mapping[str, str] = {
    CODE_TRACK: "Code Track",
    CODE_TEST: "Code Test",
    DAILY_TEST: "Daily Test",
    DAILY_CHALLENGE: "Daily Challenge",
    CODE_TUTOR: "Code Tutor",
}

# Order used by the statistics table (Code Tutor last, it scores nothing)
DISPLAY_ORDER: List[str] = [
    CODE_TRACK,
    CODE_TEST,
    DAILY_TEST,
    DAILY_CHALLENGE,
    CODE_TUTOR,
]

# Highest point density first; Code Tutor never helps reach a goal.
DEFAULT_PLAN_ORDER: List[str] = [
    CODE_TEST,
    DAILY_TEST,
    CODE_TRACK,
    DAILY_CHALLENGE,
]

# Documented by the platform as "max 1/day"; not enforced unless configured.
ONCE_PER_DAY: List[str] = [
    DAILY_TEST,
    DAILY_CHALLENGE,
]

# camelCase category -> snake_case attribute on RawStatistics
CATEGORY_FIELDS: Mapping[str, str] = {
    CODE_TUTOR: "code_tutor",
    CODE_TRACK: "code_track",
    CODE_TEST: "code_test",
    DAILY_TEST: "daily_test",
    DAILY_CHALLENGE: "daily_challenge",
}


def weight_of(category: str) -> int:
    try:
        return CATEGORY_WEIGHTS[category]
    except KeyError:
        raise KeyError(f"Unknown category '{category}'") from None


def display_name(category: str) -> str:
    return DISPLAY_NAMES.get(category, category)


def scoring_categories() -> List[str]:
    """Categories that earn points, in plan order."""
    return [c for c in DEFAULT_PLAN_ORDER if CATEGORY_WEIGHTS[c] > 0]


# ---------------------------------------------------------------------------
# Validation (run at startup / config load)
# ---------------------------------------------------------------------------

def validate_mappings(*, strict: bool = True) -> List[str]:
    """
    Validate that every lookup table covers exactly CATEGORY_ORDER.
    Returns a list of human-readable issues. If strict=True and issues exist, raises ValueError.
    """
    issues: List[str] = []
    canonical: Set[str] = set(CATEGORY_ORDER)

    tables: Dict[str, Set[str]] = {
        "CATEGORY_WEIGHTS": set(CATEGORY_WEIGHTS),
        "LABEL_TO_CATEGORY": set(LABEL_TO_CATEGORY.values()),
        "DISPLAY_NAMES": set(DISPLAY_NAMES),
        "DISPLAY_ORDER": set(DISPLAY_ORDER),
        "CATEGORY_FIELDS": set(CATEGORY_FIELDS),
    }
    for name, keys in tables.items():
        missing = sorted(canonical - keys)
        unknown = sorted(keys - canonical)
        if missing:
            issues.append(f"{name} is missing categories: {missing}")
        if unknown:
            issues.append(f"{name} uses unknown categories: {unknown}")

    for cat in DEFAULT_PLAN_ORDER + ONCE_PER_DAY:
        if cat not in canonical:
            issues.append(f"plan tables use unknown category '{cat}'")

    negative = sorted(c for c, w in CATEGORY_WEIGHTS.items() if w < 0)
    if negative:
        issues.append(f"negative weights: {negative}")

    if strict and issues:
        raise ValueError("Category mapping validation failed:\n- " + "\n- ".join(issues))
    return issues

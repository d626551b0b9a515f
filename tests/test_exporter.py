import io
from pathlib import Path

import pytest

from skillrack_points.core import RawStatistics, ScoredProfile
from skillrack_points.exporter import ExportError, build_export, export_to_json, write_csv, write_csv_stream
from skillrack_points.goals import plan_goal_for
from skillrack_points.scoring import score


def _profile():
    return score(RawStatistics(code_tutor=45, code_track=120, code_test=8, daily_test=25, daily_challenge=30))


def test_build_export_uses_display_order():
    result = build_export(_profile())

    assert [c.name for c in result.categories] == [
        "Code Track",
        "Code Test",
        "Daily Test",
        "Daily Challenge",
        "Code Tutor",
    ]
    assert result.total_points == 1040
    assert result.categories[0].calculation == "120 × 2 = 240"
    assert result.categories[-1].calculation == "45 × 0 = 0"
    assert result.warnings == ()


def test_build_export_fails_on_inconsistent_total():
    good = _profile()
    bad = ScoredProfile(stats=good.stats, category_points=good.category_points, total_points=1)
    with pytest.raises(ExportError):
        build_export(bad)


def test_warnings_for_empty_profile_and_plan():
    empty = score(RawStatistics())
    plan = plan_goal_for(0, 101, 5)

    result = build_export(empty, plan)
    assert result.warnings == ("NO_POINTS", "PLAN_OVERSHOOT:1")
    assert [(i.name, i.count, i.points) for i in result.plan_items] == [
        ("Code Test", 3, 90),
        ("Code Track", 5, 10),
        ("Daily Challenge", 1, 2),
    ]

    achieved = build_export(_profile(), plan_goal_for(1040, 900, 5))
    assert achieved.warnings == ("GOAL_ALREADY_ACHIEVED",)
    assert achieved.plan_items == []


def test_write_csv_sections(tmp_path: Path):
    out = tmp_path / "points.csv"
    write_csv(build_export(_profile(), plan_goal_for(1040, 1140, 5)), out)

    content = out.read_text(encoding="utf-8").splitlines()
    assert content[0] == "[Statistics]"
    assert content[1] == "Category,Count,Calculation,Points"
    assert content[2] == "Code Track,120,120 × 2 = 240,240"
    assert "[Totals]" in content
    assert "Total Points,1040" in content

    plan_at = content.index("[Plan]")
    assert content[plan_at + 1] == "Points Needed,100"
    assert content[plan_at + 2] == "Daily Points Required,20.00"
    assert content[plan_at + 3] == "Feasible,yes"
    assert content[plan_at + 4] == "Already Achieved,no"
    assert content[plan_at + 5:] == ["Code Test,3,90", "Code Track,5,10"]


def test_write_csv_without_plan_has_no_plan_section():
    buf = io.StringIO()
    write_csv_stream(build_export(_profile()), buf)
    assert "[Plan]" not in buf.getvalue()


def test_export_to_json():
    payload = export_to_json(build_export(_profile(), plan_goal_for(0, 100, 5)))

    assert payload["totalPoints"] == 1040
    assert payload["statistics"][1] == {
        "category": "codeTest",
        "name": "Code Test",
        "count": 8,
        "weight": 30,
        "points": 240,
        "calculation": "8 × 30 = 240",
    }
    assert payload["plan"]["categoryBreakdown"] == {"codeTest": 3, "codeTrack": 5}
    assert payload["warnings"] == []

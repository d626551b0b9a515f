from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from skillrack_points import api
from skillrack_points.config import AppConfig, load_app_config
from skillrack_points.core import GoalPlan, ScoredProfile
from skillrack_points.core.errors import INVALID_URL, VALIDATION_ERROR
from skillrack_points.exporter import build_export, export_to_json, write_csv, write_csv_stream
from pipeline import run_pipeline


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="skillrack-points",
        description="Score SkillRack profiles and plan how to reach a points target.",
    )
    subparsers = ap.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Fetch a profile URL, extract statistics and score them.")
    _add_analyze_args(analyze)
    analyze.set_defaults(func=_cmd_analyze)

    parse = subparsers.add_parser("parse", help="Score a saved profile HTML page (no network).")
    _add_parse_args(parse)
    parse.set_defaults(func=_cmd_parse)

    plan = subparsers.add_parser("plan", help="Plan the activities needed to reach a points target.")
    _add_plan_args(plan)
    plan.set_defaults(func=_cmd_plan)

    args = ap.parse_args(argv)
    return args.func(args)


# ---------------- CLI subcommands ----------------


def _add_output_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--config", default=None, help="Optional YAML/JSON/TOML config override (merged with pyproject.toml).")
    ap.add_argument("--json", action="store_true", help="Emit JSON instead of CSV.")
    ap.add_argument("--output", "-o", default=None, help="Output path (CSV). If omitted, CSV is printed to stdout.")
    ap.add_argument("--target", type=int, default=None, help="Also plan for this points target.")
    ap.add_argument("--days", type=int, default=None, help="Timeline in days for --target.")


def _add_analyze_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("url", help="Profile URL, e.g. https://www.skillrack.com/profile/123/abc")
    _add_output_args(ap)
    ap.add_argument("--verbose", "-v", action="store_true", help="Print pipeline logs to stderr.")
    ap.epilog = _ANALYZE_EPILOG


def _add_parse_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("html", help="Saved profile page. Use '-' for stdin.")
    _add_output_args(ap)


def _add_plan_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--current", type=int, required=True, help="Current total points.")
    ap.add_argument("--target", type=int, required=True, help="Target total points.")
    ap.add_argument("--days", type=int, required=True, help="Days available.")
    ap.add_argument("--config", default=None, help="Optional YAML/JSON/TOML config override (merged with pyproject.toml).")
    ap.add_argument("--json", action="store_true", help="Emit JSON.")


def _load_config(args: argparse.Namespace) -> AppConfig:
    app_cfg = load_app_config(override_path=Path(args.config) if args.config else None)
    app_cfg.validate()
    return app_cfg


def _cmd_analyze(args: argparse.Namespace) -> int:
    app_cfg = _load_config(args)
    result = api.analyze_profile(args.url, app_config=app_cfg)

    if args.verbose:
        for line in result.logs:
            print(line, file=sys.stderr)

    if not result.ok or result.profile is None:
        if args.json:
            print(json.dumps(result.as_json(), indent=2))
        else:
            print(f"{result.code}: {result.message}", file=sys.stderr)
        return 2 if result.code == INVALID_URL else 1

    return _emit_profile(args, app_cfg, result.profile)


def _cmd_parse(args: argparse.Namespace) -> int:
    app_cfg = _load_config(args)
    html = sys.stdin.read() if args.html == "-" else Path(args.html).read_text(encoding="utf-8", errors="replace")

    result = run_pipeline(app_cfg.pipeline_config, html)
    for w in result.warnings:
        print(f"warning: {w}", file=sys.stderr)
    if not result.ok or result.profile is None:
        print(result.status, file=sys.stderr)
        return 1

    return _emit_profile(args, app_cfg, result.profile)


def _cmd_plan(args: argparse.Namespace) -> int:
    app_cfg = _load_config(args)
    result = api.plan_for_points(args.current, args.target, args.days, app_config=app_cfg)

    if args.json:
        print(json.dumps(result.as_json(), indent=2))
    elif result.ok and result.plan is not None:
        _print_plan(result.plan)
    else:
        print(f"{result.code}: {result.field}: {result.message}", file=sys.stderr)

    if result.ok:
        return 0
    return 2 if result.code == VALIDATION_ERROR else 1


def _emit_profile(args: argparse.Namespace, app_cfg: AppConfig, profile: ScoredProfile) -> int:
    plan: Optional[GoalPlan] = None
    if args.target is not None:
        if args.days is None:
            print("--days is required with --target", file=sys.stderr)
            return 2
        planned = api.plan_for_profile(profile, args.target, args.days, app_config=app_cfg)
        if not planned.ok:
            print(f"{planned.code}: {planned.field}: {planned.message}", file=sys.stderr)
            return 2
        plan = planned.plan

    export = build_export(profile, plan)

    if args.json:
        print(json.dumps(export_to_json(export), indent=2))
        return 0

    out_path = Path(args.output) if args.output else None
    if out_path:
        write_csv(export, out_path)
    else:
        write_csv_stream(export, sys.stdout)
    return 0


def _print_plan(plan: GoalPlan) -> None:
    if plan.already_achieved:
        print("Goal already achieved.")
        return
    print(f"Points needed: {plan.points_needed}")
    print(f"Daily points required: {float(plan.daily_points_required):.2f}")
    for cat, n in plan.category_breakdown.items():
        print(f"  {cat}: {n}")
    if plan.overshoot:
        print(f"Plan overshoots by {plan.overshoot} points.")
    if not plan.feasible:
        print("Not feasible within the timeline under the configured daily caps.")


_ANALYZE_EPILOG = """examples:
  skillrack-points analyze https://www.skillrack.com/profile/123456/abcdef --json
  skillrack-points analyze skillrack.com/profile/123456/abcdef --target 5000 --days 30 -o stats.csv

exit codes:
  0 ok, 1 fetch/parse failure, 2 invalid URL or goal input
"""


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import pytest

from skillrack_points import api
from skillrack_points.config import AppConfig
from skillrack_points.core.errors import (
    INVALID_URL,
    NETWORK_ERROR,
    NOT_FOUND,
    PARSE_ERROR,
    RATE_LIMITED,
    VALIDATION_ERROR,
)
from skillrack_points.fetch import FetchError
from skillrack_points.rate_limit import RateLimiter


@pytest.fixture()
def app_cfg():
    return AppConfig()


def test_analyze_success(app_cfg, html_fetcher):
    result = api.analyze_profile(
        "skillrack.com/profile/123456/abcXYZ789",
        app_config=app_cfg,
        fetch=html_fetcher,
    )

    assert result.ok
    assert result.http_status == 200
    assert result.url == "https://www.skillrack.com/profile/123456/abcXYZ789"
    assert html_fetcher.calls == [result.url]
    assert result.as_json() == {
        "success": True,
        "data": {
            "codeTutor": 45,
            "codeTrack": 1204,
            "codeTest": 8,
            "dailyTest": 25,
            "dailyChallenge": 30,
            "totalPoints": 3208,
        },
    }
    assert any(line.startswith("fetching ") for line in result.logs)


def test_invalid_url_never_fetches(app_cfg, html_fetcher):
    result = api.analyze_profile("https://www.skillrack.com/profile/abc/xyz", app_config=app_cfg, fetch=html_fetcher)

    assert not result.ok
    assert result.code == INVALID_URL
    assert result.http_status == 400
    assert html_fetcher.calls == []
    assert result.as_json() == {
        "success": False,
        "error": "Invalid SkillRack profile URL format. Expected: https://www.skillrack.com/profile/[id]/[hash]",
        "code": INVALID_URL,
    }


def test_missing_url(app_cfg, html_fetcher):
    result = api.analyze_profile(None, app_config=app_cfg, fetch=html_fetcher)
    assert result.code == INVALID_URL
    assert result.message == "URL is required and must be a string"


@pytest.mark.parametrize("code", [NETWORK_ERROR, NOT_FOUND, PARSE_ERROR])
def test_fetch_errors_pass_through(app_cfg, profile_url, code):
    def failing(url):
        raise FetchError(code, f"boom {code}")

    result = api.analyze_profile(profile_url, app_config=app_cfg, fetch=failing)

    assert not result.ok
    assert result.code == code
    assert result.message == f"boom {code}"
    assert result.http_status == 500
    assert result.profile is None


def test_rate_limit_checked_before_validation(app_cfg, html_fetcher):
    limiter = RateLimiter(window_s=60, max_requests=1)

    first = api.analyze_profile("not a url", app_config=app_cfg, rate_limiter=limiter, client_id="1.2.3.4", fetch=html_fetcher)
    second = api.analyze_profile("not a url", app_config=app_cfg, rate_limiter=limiter, client_id="1.2.3.4", fetch=html_fetcher)
    other = api.analyze_profile("not a url", app_config=app_cfg, rate_limiter=limiter, client_id="5.6.7.8", fetch=html_fetcher)

    assert first.code == INVALID_URL
    assert second.code == RATE_LIMITED
    assert second.http_status == 429
    assert other.code == INVALID_URL


def test_timing_log_written_when_enabled(monkeypatch, profile_url, html_fetcher):
    lines = []
    monkeypatch.setattr(api, "timing_log", lambda msg: lines.append(msg))

    api.analyze_profile(profile_url, app_config=AppConfig(timing_log=True), fetch=html_fetcher)
    assert len(lines) == 1
    assert lines[0].startswith(f"fetch {profile_url} ")


def test_default_fetcher_uses_config(monkeypatch, profile_url, sample_profile_html):
    seen = {}

    def fake_fetch(url, *, timeout_s, user_agent):
        seen.update(url=url, timeout_s=timeout_s, user_agent=user_agent)
        return sample_profile_html

    monkeypatch.setattr(api, "fetch_profile_html", fake_fetch)

    cfg = AppConfig(http_timeout_s=3.0, user_agent="ua/2")
    result = api.analyze_profile(profile_url, app_config=cfg)

    assert result.ok
    assert seen == {"url": profile_url, "timeout_s": 3.0, "user_agent": "ua/2"}


def test_plan_for_points():
    ok = api.plan_for_points(0, 100, 5)
    assert ok.ok
    assert ok.as_json()["data"]["categoryBreakdown"] == {"codeTest": 3, "codeTrack": 5}

    bad = api.plan_for_points(0, 100, 0)
    assert not bad.ok
    assert bad.as_json() == {
        "success": False,
        "error": "must be a positive number of days",
        "code": VALIDATION_ERROR,
        "field": "timelineDays",
    }


def test_plan_for_profile_uses_total(app_cfg, profile_url, html_fetcher):
    profile = api.analyze_profile(profile_url, app_config=app_cfg, fetch=html_fetcher).profile

    result = api.plan_for_profile(profile, 3208 + 60, 3)
    assert result.plan.points_needed == 60
    assert result.plan.category_breakdown == {"codeTest": 2}


def test_unexpected_fetcher_error_is_parse_error(app_cfg, profile_url):
    def broken(url):
        raise RuntimeError("socket went away")

    result = api.analyze_profile(profile_url, app_config=app_cfg, fetch=broken)

    assert not result.ok
    assert result.code == PARSE_ERROR
    assert result.http_status == 500
    assert "fetch failed: RuntimeError: socket went away" in result.logs


def test_invalid_config_raises(profile_url, html_fetcher):
    with pytest.raises(ValueError):
        api.analyze_profile(profile_url, app_config=AppConfig(http_timeout_s=0), fetch=html_fetcher)
    assert html_fetcher.calls == []

from __future__ import annotations

import importlib

import pytest
from bs4 import BeautifulSoup, FeatureNotFound

from pipeline.extract_statistics import (
    extract_statistics,
    extract_statistics_from_html,
    extract_statistics_report,
    find_labeled_value,
    soup_labeled_values,
)
from pipeline.parse_count import parse_count, parse_count_text
from skillrack_points.core import RawStatistics
from skillrack_points.scoring import score

# The package re-exports a function named ``extract_statistics`` that shadows
# the submodule attribute, so fetch the module itself explicitly.
extract_statistics_module = importlib.import_module("pipeline.extract_statistics")


def test_sample_page_first_match_wins(sample_profile_html):
    stats = extract_statistics_from_html(sample_profile_html)

    assert stats == RawStatistics(
        code_tutor=45,
        code_track=1204,
        code_test=8,  # the later "CODE TEST 999" block is ignored
        daily_test=25,
        daily_challenge=30,
    )


def test_soup_labeled_values_document_order(sample_profile_html):
    pairs = soup_labeled_values(sample_profile_html)

    labels = [label.strip() for label, _ in pairs]
    assert labels == ["CODE TUTOR", "CODE TRACK", "CODE TEST", "DT", "DC", "RANK", "CODE TEST"]


def test_no_matching_labels_gives_zeros():
    stats = extract_statistics([("RANK", "12"), ("LEVEL", "3")])
    assert stats == RawStatistics()
    assert score(stats).total_points == 0


def test_empty_document_gives_zeros():
    assert extract_statistics_from_html("<html><body></body></html>") == RawStatistics()
    assert extract_statistics([]) == RawStatistics()


def test_label_match_is_exact_and_case_sensitive():
    pairs = [
        ("code test", "5"),
        ("CODE TESTS", "6"),
        ("  CODE TEST\n", "7"),
    ]
    stats = extract_statistics(pairs)
    assert stats.code_test == 7


def test_value_without_digits_is_zero_but_still_first_match():
    pairs = [("DT", "n/a"), ("DT", "14")]
    stats = extract_statistics(pairs)
    assert stats.daily_test == 0


def test_pairs_can_be_a_generator():
    pairs = ((label, value) for label, value in [("DC", "3"), ("DT", "2")])
    stats = extract_statistics(pairs)
    assert (stats.daily_challenge, stats.daily_test) == (3, 2)


def test_report_lists_found_and_missing():
    stats, report = extract_statistics_report([("DC", "3"), ("RANK", "1")])

    assert stats.daily_challenge == 3
    assert report.found == ("DC",)
    assert set(report.missing) == {"CODE TEST", "CODE TRACK", "DT", "CODE TUTOR"}
    assert report.pairs_seen == 2
    assert not report.empty


def test_find_labeled_value_returns_none_when_absent():
    assert find_labeled_value([("A", "1")], "B") is None
    assert find_labeled_value([("B", "1"), ("B", "2")], "B") == "1"


def test_nested_label_text_is_concatenated():
    html = """
    <div class="statistic">
      <div class="value">1<span>2</span>3</div>
      <div class="label"><span>CODE</span> <span>TRACK</span></div>
    </div>
    """
    assert extract_statistics_from_html(html).code_track == 123


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1,234", 1234),
        ("  56 ", 56),
        ("12 solved", 12),
        ("", 0),
        (None, 0),
        ("-", 0),
        ("-5", 5),
        ("٣", 0),
    ],
)
def test_parse_count(text, expected):
    assert parse_count(text) == expected


def test_parse_count_text_reason():
    assert parse_count_text("abc").reason == "no digits"
    res = parse_count_text("1 2 3")
    assert (res.value, res.text, res.reason) == (123, "123", "ok")


def test_soup_of_falls_back_when_lxml_missing(monkeypatch):
    features = []

    def fake_soup(markup, feature):
        features.append(feature)
        if feature == "lxml":
            raise FeatureNotFound("lxml not installed")
        return BeautifulSoup(markup, feature)

    monkeypatch.setattr(extract_statistics_module, "BeautifulSoup", fake_soup)

    soup = extract_statistics_module.soup_of('<div class="statistic"></div>')
    assert features == ["lxml", "html.parser"]
    assert len(soup.select(".statistic")) == 1


def test_soup_of_does_not_mask_parser_errors(monkeypatch):
    def broken_soup(markup, feature):
        raise ValueError("bad markup")

    monkeypatch.setattr(extract_statistics_module, "BeautifulSoup", broken_soup)

    with pytest.raises(ValueError):
        extract_statistics_module.soup_of("<html></html>")

# src/pipeline/extract_statistics.py
from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Tuple, Union

from bs4 import BeautifulSoup, FeatureNotFound

from skillrack_points.core import RawStatistics
from skillrack_points.taxonomy import CATEGORY_FIELDS, LABEL_TO_CATEGORY

from .parse_count import parse_count
from .stage_results import ExtractionReport

LabeledValue = Tuple[str, str]

STATISTIC_SELECTOR = ".statistic"
LABEL_SELECTOR = ".label"
VALUE_SELECTOR = ".value"


def soup_of(html: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(html, "lxml")
    except FeatureNotFound:
        return BeautifulSoup(html, "html.parser")


def soup_labeled_values(
    document: Union[str, BeautifulSoup],
    *,
    statistic_selector: str = STATISTIC_SELECTOR,
    label_selector: str = LABEL_SELECTOR,
    value_selector: str = VALUE_SELECTOR,
) -> List[LabeledValue]:
    """
    All (label text, value text) pairs of `.statistic` blocks, in document order.
    Text of several `.label` / `.value` descendants is concatenated.
    """
    soup = soup_of(document) if isinstance(document, str) else document
    pairs: List[LabeledValue] = []
    for block in soup.select(statistic_selector):
        label = "".join(node.get_text() for node in block.select(label_selector))
        value = "".join(node.get_text() for node in block.select(value_selector))
        pairs.append((label, value))
    return pairs


def find_labeled_value(pairs: Iterable[LabeledValue], label: str) -> Optional[str]:
    """Value of the first pair whose trimmed label equals `label` exactly."""
    return next((value for text, value in pairs if text.strip() == label), None)


def extract_statistics(
    pairs: Iterable[LabeledValue],
    *,
    labels: Mapping[str, str] = LABEL_TO_CATEGORY,
) -> RawStatistics:
    stats, _ = extract_statistics_report(pairs, labels=labels)
    return stats


def extract_statistics_report(
    pairs: Iterable[LabeledValue],
    *,
    labels: Mapping[str, str] = LABEL_TO_CATEGORY,
) -> Tuple[RawStatistics, ExtractionReport]:
    """
    labeled pairs -> RawStatistics (+ which labels were seen).

    First match wins per label; missing labels and values without digits are 0.
    Never raises: a valid page can legitimately show no activity.
    """
    seq = list(pairs)
    counts = {}
    found: List[str] = []
    missing: List[str] = []

    for label, category in labels.items():
        value = find_labeled_value(seq, label)
        if value is None:
            missing.append(label)
            counts[CATEGORY_FIELDS[category]] = 0
            continue
        found.append(label)
        counts[CATEGORY_FIELDS[category]] = parse_count(value)

    report = ExtractionReport(found=tuple(found), missing=tuple(missing), pairs_seen=len(seq))
    return RawStatistics(**counts), report


def extract_statistics_from_html(html: str) -> RawStatistics:
    return extract_statistics(soup_labeled_values(html))

# src/pipeline/parse_count.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CountResult:
    value: int
    text: str
    reason: str


def parse_count_text(text: Optional[str]) -> CountResult:
    """
    Parse an activity count from a statistic value ("1,234", " 56 ", "12 solved").
    Every non-digit character is dropped before int(); no digits -> 0.
    """
    raw = text or ""
    # isascii: int() would also accept other unicode digits
    digits = "".join(ch for ch in raw if ch.isdigit() and ch.isascii())

    if digits == "":
        return CountResult(0, raw, "no digits")

    try:
        val = int(digits)
    except ValueError:
        return CountResult(0, raw, "int conversion failed")

    return CountResult(val, digits, "ok")


def parse_count(text: Optional[str]) -> int:
    return parse_count_text(text).value

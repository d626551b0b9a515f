# src/pipeline/normalize_url.py
from __future__ import annotations

import re
from urllib.parse import urlsplit

from .stage_results import UrlCheck

PROFILE_HOST = "www.skillrack.com"
BARE_HOST = "skillrack.com"
ALLOWED_SCHEMES = ("http", "https")

_SCHEME_RE = re.compile(r"^https?://")
_KNOWN_HOST_PREFIX_RE = re.compile(r"^(www\.)?skillrack\.com")
_WHITESPACE_RE = re.compile(r"\s+")
# ASCII only: \d would also accept non-latin digits
_PROFILE_PATH_RE = re.compile(r"^/profile/[0-9]+/[A-Za-z0-9]+$")


def normalize_url(raw: str) -> str:
    """
    Clean a user-supplied profile URL.

    - strip surrounding and internal whitespace
    - add https:// when the text starts with the bare or www host
    - rewrite the bare host to the www host
    """
    cleaned = _WHITESPACE_RE.sub("", raw.strip())

    if cleaned and not _SCHEME_RE.match(cleaned) and _KNOWN_HOST_PREFIX_RE.match(cleaned):
        cleaned = f"https://{cleaned}"

    bare = f"://{BARE_HOST}"
    if bare in cleaned and f"://{PROFILE_HOST}" not in cleaned:
        cleaned = cleaned.replace(bare, f"://{PROFILE_HOST}")

    return cleaned


def validate_profile_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError:
        return False

    if parts.scheme not in ALLOWED_SCHEMES:
        return False
    if host != PROFILE_HOST:
        return False
    return bool(_PROFILE_PATH_RE.match(parts.path))


def normalize_and_validate(raw: object) -> UrlCheck:
    if not isinstance(raw, str):
        return UrlCheck.rejected("URL is required and must be a string", raw=repr(raw))

    cleaned = normalize_url(raw)
    if not cleaned:
        return UrlCheck.rejected("URL is required and must be a string", raw=raw)

    if not validate_profile_url(cleaned):
        return UrlCheck.rejected(
            f"Invalid SkillRack profile URL format. Expected: https://{PROFILE_HOST}/profile/[id]/[hash]",
            raw=raw,
        )
    return UrlCheck.accepted(cleaned, raw=raw)

from __future__ import annotations

from typing import Dict, Optional

import requests

from skillrack_points.config import DEFAULT_HTTP_TIMEOUT_S, DEFAULT_USER_AGENT
from skillrack_points.core.errors import NETWORK_ERROR, NOT_FOUND, PARSE_ERROR


def browser_headers(user_agent: str = DEFAULT_USER_AGENT) -> Dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Accept-Encoding": "gzip, deflate",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
    }


class FetchError(RuntimeError):
    """Profile page could not be retrieved. `code` is one of the core error codes."""

    def __init__(self, code: str, message: str, *, status_code: Optional[int] = None) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _http_error(resp: requests.Response) -> FetchError:
    status = resp.status_code
    if status == 404:
        return FetchError(
            NOT_FOUND,
            "Profile not found. Please check if the URL is correct and the profile is public.",
            status_code=status,
        )
    if status == 403:
        return FetchError(
            NOT_FOUND,
            "Access denied. The profile might be private or require login.",
            status_code=status,
        )
    return FetchError(
        PARSE_ERROR,
        "Failed to parse profile data. Please verify the profile URL is correct.",
        status_code=status,
    )


def fetch_profile_html(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout_s: float = DEFAULT_HTTP_TIMEOUT_S,
    user_agent: str = DEFAULT_USER_AGENT,
) -> str:
    """
    GET a (validated) profile URL and return the page HTML.
    Raises FetchError; never returns partial content.
    """
    s = session or requests.Session()
    try:
        resp = s.get(url, headers=browser_headers(user_agent), timeout=timeout_s)
        if resp.status_code >= 400:
            raise _http_error(resp)
        return resp.text
    except requests.Timeout as e:
        raise FetchError(NETWORK_ERROR, "Request timeout. Please try again.") from e
    except requests.ConnectionError as e:
        raise FetchError(
            NETWORK_ERROR,
            "Unable to connect to SkillRack. Please check your internet connection.",
        ) from e
    except requests.RequestException as e:
        raise FetchError(
            PARSE_ERROR,
            "Failed to parse profile data. Please verify the profile URL is correct.",
        ) from e
    finally:
        if session is None:
            s.close()

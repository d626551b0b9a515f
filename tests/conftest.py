import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

PROFILE_URL = "https://www.skillrack.com/profile/123456/abcXYZ789"


@pytest.fixture(scope="session")
def project_root() -> Path:
    return ROOT


@pytest.fixture(scope="session")
def data_dir() -> Path:
    return Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def sample_profile_path(data_dir: Path) -> Path:
    path = data_dir / "profile_sample.html"
    if not path.exists():
        pytest.skip("sample profile page missing")
    return path


@pytest.fixture(scope="session")
def sample_profile_html(sample_profile_path: Path) -> str:
    return sample_profile_path.read_text(encoding="utf-8")


@pytest.fixture()
def profile_url() -> str:
    return PROFILE_URL


@pytest.fixture()
def html_fetcher(sample_profile_html):
    """Stand-in for the network: records requested URLs, returns the sample page."""
    calls = []

    def fetch(url: str) -> str:
        calls.append(url)
        return sample_profile_html

    fetch.calls = calls
    return fetch

import os
import sys

import pytest

# Ensure project root is on sys.path so the top-level modules and 'tests.support' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from config import Config
from tests.support import factories as test_factories


@pytest.fixture
def make_video():
    return test_factories.build_video


@pytest.fixture
def config() -> Config:
    return Config(API_KEY="test-key", API_BASE_URL="https://yt.test/youtube/v3", SEARCH_RESULT_LIMIT=5)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep the developer's real API settings out of the tests."""
    for name in ("YOUTUBE_API_KEY", "YOUTUBE_API_BASE_URL", "YOUTUBE_MAX_RESULTS", "YOUTUBE_REGION_CODE", "YTMB_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield

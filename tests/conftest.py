import pytest

from wikiguide.cache import TTLCache
from wikiguide.config import get_config, reset_config

CONFIG_ENV_VARS = (
    "DEFAULT_LANGUAGE", "FALLBACK_LANGUAGE", "ENCYCLOPEDIA_LANGUAGE",
    "TRAVEL_WIKI_DOMAIN", "ENCYCLOPEDIA_DOMAIN", "MEDIA_REPOSITORY_API",
    "GUIDE_IMAGE_LIMIT", "IMAGE_MIN_WIDTH", "IMAGE_MIN_HEIGHT", "IMAGE_THUMB_WIDTH",
    "TIMEOUT_FETCH", "TIMEOUT_API", "LOG_FILE", "DEBUG",
)


@pytest.fixture(autouse=True)
def testing_env(monkeypatch):
    """Run every test against default settings in the testing environment."""
    for key in CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ENVIRONMENT", "testing")
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config():
    return get_config()


@pytest.fixture
def cache():
    return TTLCache()


class FakeWikiHttp:
    """Stand-in for WikiHttpClient.

    ``handler(url, params)`` returns the decoded body; returning an exception
    instance makes the call raise it instead. Every call is recorded.
    """

    def __init__(self, handler):
        self.handler = handler
        self.calls = []

    async def get_json(self, url, params=None):
        params = dict(params or {})
        self.calls.append((url, params))
        result = self.handler(url, params)
        if isinstance(result, BaseException):
            raise result
        return result

    def count(self, fragment, **params):
        """Number of calls whose URL contains ``fragment`` and whose params match."""
        return sum(
            1 for url, sent in self.calls
            if fragment in url and all(sent.get(k) == v for k, v in params.items())
        )


@pytest.fixture
def fake_http():
    return FakeWikiHttp

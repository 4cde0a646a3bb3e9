import pytest

from wikiguide.config import Config, Environment, get_config, reset_config
from wikiguide.services.session_manager import SessionManager


def test_defaults(config):
    assert config.environment is Environment.TESTING
    assert config.get_timeout("fetch") == 5.0
    assert config.get_timeout("unknown") == config.timeout_config.api
    assert config.language_config.default == "pt"
    assert config.language_config.fallback == "en"
    assert config.language_config.encyclopedia == "pt"
    assert config.image_config.guide_limit == 6

    dumped = config.to_dict()
    assert dumped["environment"] == "testing"
    assert dumped["source_config"]["travel_wiki_domain"] == "{lang}.wikivoyage.org"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DEFAULT_LANGUAGE", "EN")
    monkeypatch.setenv("TIMEOUT_FETCH", "2.5")
    monkeypatch.setenv("IMAGE_MIN_WIDTH", "640")
    reset_config()

    config = get_config()
    assert config.language_config.default == "en"
    # encyclopedia follows the default language unless set
    assert config.language_config.encyclopedia == "en"
    assert config.get_timeout("fetch") == 2.5
    assert config.image_config.min_width == 640
    assert get_config() is config


@pytest.mark.parametrize("key,value", [
    ("TIMEOUT_FETCH", "0"),
    ("TIMEOUT_FETCH", "soon"),
    ("GUIDE_IMAGE_LIMIT", "-1"),
    ("TRAVEL_WIKI_DOMAIN", "pt.wikivoyage.org"),
    ("MEDIA_REPOSITORY_API", "commons.wikimedia.org/w/api.php"),
    ("ENVIRONMENT", "moon"),
    ("ENVIRONMENT", "staging"),
])
def test_invalid_values_are_rejected(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError):
        Config()


@pytest.mark.asyncio
async def test_session_is_shared_and_closed():
    manager = SessionManager(user_agent="wikiguide-tests")
    first = await manager.get_session()
    second = await manager.get_session()

    assert first is second
    assert first.headers["User-Agent"] == "wikiguide-tests"

    await manager.close()
    assert first.closed

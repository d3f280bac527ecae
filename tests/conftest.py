"""Shared test fixtures and configuration."""

import os

import pytest


# Pin every setting so a developer's .env or shell cannot leak into tests
TEST_ENV = {
    "VECTOR_SEARCH_STOP_WORDS_LANGUAGE": "en",
    "VECTOR_SEARCH_EXTRA_STOP_WORDS": "",
    "VECTOR_SEARCH_MAX_RESULTS": "20",
    "VECTOR_SEARCH_ENGINE_NAME": "test",
    "VECTOR_SEARCH_LOG_LEVEL": "info",
    "VECTOR_SEARCH_LOG_JSON": "false",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value

from vector_search.config import get_settings
from vector_search.search.stopwords import STOP_WORDS


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Set test defaults and drop settings-file overrides before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("VECTOR_SEARCH_STOP_WORDS_FILE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_stop_words():
    """Restore the process-wide stop words to the lazily loaded default."""
    STOP_WORDS.reset()
    yield
    STOP_WORDS.reset()


@pytest.fixture
def scenario_stop_words():
    """Small explicit stop-word set used by the ranking scenarios."""
    STOP_WORDS.replace({"the", "in", "on", ""})
    return STOP_WORDS


@pytest.fixture
def tweets():
    """Record documents shaped like the scraped feed items the engine was built for."""
    return [
        {
            "link": "https://example.com/status/1",
            "displayname": "Ada Lovelace",
            "username": "@ada",
            "content": "Programming the analytical engine",
            "medias": ["https://img.example.com/engine.png"],
        },
        {
            "link": "https://example.com/status/2",
            "displayname": "Grace Hopper",
            "username": "@grace",
            "content": "A compiler is a program that writes programs",
            "medias": [],
        },
        {
            "link": "https://example.com/status/3",
            "displayname": "Alan Turing",
            "username": "@alan",
            "content": "Can machines think?",
            "medias": ["https://img.example.com/machine.png", None],
        },
    ]

"""
Shared pytest fixtures for Books Proxy backend tests.
"""
from unittest.mock import MagicMock

import pytest
import requests
from pydantic import SecretStr

from app.config import Settings
from app.data.cache import TTLCache

API_KEY = "keySuperSecret123"

BOOKS_V1 = {"records": [{"id": "1"}]}
BOOKS_V2 = {"records": [{"id": "2"}]}


class FakeClock:
    """Manually advanced clock so TTL tests never sleep."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TTLCache(default_ttl=600, clock=clock)


@pytest.fixture
def upstream():
    """
    A mock UpstreamClient. Set `upstream.fetch.return_value` or
    `upstream.fetch.side_effect` per test.
    """
    client = MagicMock()
    client.fetch.return_value = BOOKS_V1
    return client


def mock_settings(**overrides) -> Settings:
    """
    Return a real Settings object that ignores the environment and .env.
    Pass keyword args to override specific settings.
    """
    values = {
        "api_key": SecretStr(API_KEY),
        "upstream_url": "https://upstream.test/v0/base/books",
        "allowed_origin": "https://books.example.com",
        "cache_ttl_seconds": 600,
        "upstream_timeout_seconds": 5.0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def raw_response(content: bytes, status: int = 200) -> requests.Response:
    """A real requests.Response, so .json() runs the actual decoder."""
    resp = requests.Response()
    resp.status_code = status
    resp._content = content
    resp.encoding = "utf-8"
    return resp

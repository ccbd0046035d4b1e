"""Shared fixtures for client tests."""

import pytest
import respx

from sonub.settings import ClientSettings
from sonub.storage import MemoryStore

BASE_URL = "https://www.abc.com"
PROFILE_PATH = "/wp-json/sonub/v2019/profile"
SYSTEM_SETTINGS_PATH = "/wp-json/sonub/v2019/system-settings"
CATEGORIES_PATH = "/wp-json/wp/v2/categories"

USER_RESPONSE = {
    "id": 7,
    "security_code": "sc-123",
    "email": "alice@abc.com",
    "username": "alice",
    "nickname": "Al",
    "roles": ["subscriber"],
}

SYSTEM_SETTINGS = {
    "default_domains": ["abc.com"],
    "max_sites": 3,
    "max_domains": 5,
    "categories": [],
}


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(base_url=BASE_URL)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def mock_api() -> respx.MockRouter:
    """Context manager for mocking API responses."""
    with respx.mock(base_url=BASE_URL) as respx_mock:
        yield respx_mock

"""Tests for client settings."""

import pytest
from pydantic import ValidationError

from sonub.settings import ClientSettings


def test__from_env__reads_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SONUB_BASE_URL", "https://blog.abc.co.kr")
    monkeypatch.setenv("SONUB_SESSION_STORAGE", "cookie")
    monkeypatch.setenv("SONUB_DEDUPE_REQUESTS", "true")

    settings = ClientSettings.from_env()

    assert settings.base_url == "https://blog.abc.co.kr"
    assert settings.session_storage == "cookie"
    assert settings.dedupe_requests is True
    assert settings.host == "blog.abc.co.kr"


def test__host__explicit_domain_wins() -> None:
    settings = ClientSettings(base_url="http://127.0.0.1:8080", domain="www.abc.com")
    assert settings.host == "www.abc.com"


def test__session_storage__only_cookie_or_local() -> None:
    with pytest.raises(ValidationError):
        ClientSettings(base_url="https://abc.com", session_storage="session")

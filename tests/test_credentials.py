"""Tests for the credential stores."""

import base64
from pathlib import Path

import pytest

from sonub.models import SessionIdentity
from sonub.session.credentials import (
    FIELDS,
    CookieCredentialStore,
    CredentialStore,
    LocalCredentialStore,
    basic_auth,
    create_credential_store,
)
from sonub.settings import ClientSettings
from sonub.storage import CookieJar, MemoryStore

IDENTITY = SessionIdentity(
    id="7",
    security_code="sc-123",
    email="alice@abc.com",
    username="alice",
    nickname="Al",
)


@pytest.fixture(params=["local", "cookie"])
def credentials(request: pytest.FixtureRequest) -> CredentialStore:
    if request.param == "local":
        return LocalCredentialStore(MemoryStore())
    return CookieCredentialStore(CookieJar("www.abc.co.kr"))


def test__save__every_field_reads_back(credentials: CredentialStore) -> None:
    credentials.save(IDENTITY)

    for field in FIELDS:
        assert credentials.read(field) == getattr(IDENTITY, field)
    assert credentials.is_authenticated
    assert credentials.identity() == IDENTITY


def test__save__overwrites_previous_identity(credentials: CredentialStore) -> None:
    credentials.save(IDENTITY)
    other = SessionIdentity(id="8", security_code="x", email="b@abc.com")
    credentials.save(other)

    assert credentials.identity() == other
    assert credentials.read("username") == ""


def test__clear__removes_every_field(credentials: CredentialStore) -> None:
    credentials.save(IDENTITY)
    credentials.clear()

    assert not credentials.is_authenticated
    assert credentials.identity() is None
    for field in FIELDS:
        assert not credentials.read(field)


def test__read__absent_field_is_none(credentials: CredentialStore) -> None:
    assert credentials.read("id") is None
    assert credentials.authorization() is None


def test__authorization__basic_id_and_security_code(
    credentials: CredentialStore,
) -> None:
    credentials.save(IDENTITY)

    value = credentials.authorization()

    assert value == "Basic " + base64.b64encode(b"7:sc-123").decode()
    assert value == basic_auth("7", "sc-123")


def test__local_store__uses_user_prefixed_keys() -> None:
    store = MemoryStore()
    LocalCredentialStore(store).save(IDENTITY)

    assert store.get("user_id") == "7"
    assert store.get("user_security_code") == "sc-123"


def test__cookie_store__scoped_to_root_domain(tmp_path: Path) -> None:
    path = tmp_path / "cookies.json"
    credentials = CookieCredentialStore(CookieJar("www.abc.co.kr", path=path))
    assert credentials.domain == "abc.co.kr"

    credentials.save(IDENTITY)

    # Another subdomain of the same site shares the session
    shared = CookieCredentialStore(CookieJar("shop.abc.co.kr", path=path))
    assert shared.read("id") == "7"
    other_site = CookieCredentialStore(CookieJar("www.xyz.co.kr", path=path))
    assert other_site.read("id") is None


def test__cookie_store__clear_from_subdomain_logs_out_everywhere(
    tmp_path: Path,
) -> None:
    path = tmp_path / "cookies.json"
    CookieCredentialStore(CookieJar("www.abc.com", path=path)).save(IDENTITY)

    CookieCredentialStore(CookieJar("blog.abc.com", path=path)).clear()

    assert not CookieCredentialStore(CookieJar("www.abc.com", path=path)).is_authenticated


def test__create_credential_store__selects_backend() -> None:
    local = create_credential_store(ClientSettings(base_url="https://www.abc.com"))
    cookie = create_credential_store(
        ClientSettings(base_url="https://www.abc.com", session_storage="cookie")
    )

    assert isinstance(local, LocalCredentialStore)
    assert isinstance(cookie, CookieCredentialStore)
    assert cookie.domain == "abc.com"


def test__create_credential_store__uses_given_store() -> None:
    store = MemoryStore({"user_id": "7"})
    credentials = create_credential_store(
        ClientSettings(base_url="https://www.abc.com"), store=store
    )
    assert credentials.is_authenticated

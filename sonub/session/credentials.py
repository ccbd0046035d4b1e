"""
Credential stores - where the session identity lives.

Two interchangeable backends, picked once when the client is built:
- LocalCredentialStore: key/value store, no domain scoping
- CookieCredentialStore: cookies valid for a year, scoped to the root domain
  so every subdomain of a site shares the session
"""

import base64
from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from loguru import logger

from sonub.models import SessionIdentity
from sonub.session.domain import root_domain
from sonub.settings import ClientSettings
from sonub.storage import CookieJar, FileStore, KeyValueStore, MemoryStore

FIELDS = ("id", "security_code", "email", "username", "nickname")
KEY_PREFIX = "user_"
COOKIE_LIFETIME = timedelta(days=365)


class CredentialStore(ABC):
    """Read/write/delete the five session identity fields."""

    @abstractmethod
    def read(self, field: str) -> str | None:
        """Return the stored value or None when absent."""
        ...

    @abstractmethod
    def _write(self, field: str, value: str) -> None: ...

    @abstractmethod
    def _delete(self, field: str) -> None: ...

    def save(self, identity: SessionIdentity) -> None:
        """Overwrite every field with the new identity."""
        for field in FIELDS:
            self._write(field, getattr(identity, field))
        logger.debug(f"Saved session for user {identity.id}")

    def clear(self) -> None:
        for field in FIELDS:
            self._delete(field)
        logger.debug("Cleared session")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.read("id"))

    def identity(self) -> SessionIdentity | None:
        if not self.is_authenticated:
            return None
        return SessionIdentity(**{f: self.read(f) or "" for f in FIELDS})

    def authorization(self) -> str | None:
        """Basic authorization header value for the current session."""
        if not self.is_authenticated:
            return None
        return basic_auth(self.read("id") or "", self.read("security_code") or "")


def basic_auth(login: str, password: str) -> str:
    token = base64.b64encode(f"{login}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


class LocalCredentialStore(CredentialStore):
    def __init__(self, store: KeyValueStore):
        self._store = store

    def read(self, field: str) -> str | None:
        return self._store.get(KEY_PREFIX + field)

    def _write(self, field: str, value: str) -> None:
        self._store.set(KEY_PREFIX + field, value)

    def _delete(self, field: str) -> None:
        self._store.remove(KEY_PREFIX + field)


class CookieCredentialStore(CredentialStore):
    def __init__(self, jar: CookieJar, host: str | None = None):
        self._jar = jar
        self.domain = root_domain(host or jar.host)

    def read(self, field: str) -> str | None:
        return self._jar.get(KEY_PREFIX + field)

    def _write(self, field: str, value: str) -> None:
        self._jar.put(
            KEY_PREFIX + field,
            value,
            domain=self.domain,
            expires=datetime.now() + COOKIE_LIFETIME,
        )

    def _delete(self, field: str) -> None:
        # Same domain as the write, otherwise the cookie survives
        self._jar.remove(
            KEY_PREFIX + field,
            domain=self.domain,
            expires=datetime.now() - timedelta(days=1),
        )


def create_credential_store(
    settings: ClientSettings,
    store: KeyValueStore | None = None,
    jar: CookieJar | None = None,
) -> CredentialStore:
    """Pick the backend named by ``settings.session_storage``."""
    if settings.session_storage == "cookie":
        if jar is None:
            path = (
                f"{settings.storage_path}.cookies" if settings.storage_path else None
            )
            jar = CookieJar(settings.host, path=path)
        return CookieCredentialStore(jar, settings.host)

    if store is None:
        store = (
            FileStore(settings.storage_path) if settings.storage_path else MemoryStore()
        )
    return LocalCredentialStore(store)

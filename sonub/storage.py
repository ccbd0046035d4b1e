"""
Storage collaborators used by the credential store and the domain cache.

- KeyValueStore: synchronous string key/value store (MemoryStore, FileStore)
- CookieJar: name/value cookies scoped by domain with an expiry
"""

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Protocol

from loguru import logger


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


def _load_json_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable storage file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring storage file {path}: not a JSON object")
        return {}
    return data


def _write_json_file(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    tmp.replace(path)


class MemoryStore:
    """Key/value store that lives as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore(MemoryStore):
    """Key/value store persisted as a JSON object in a file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        data = _load_json_file(self._path)
        super().__init__({k: v for k, v in data.items() if isinstance(v, str)})

    def set(self, key: str, value: str) -> None:
        super().set(key, value)
        _write_json_file(self._path, self._data)

    def remove(self, key: str) -> None:
        if key in self._data:
            super().remove(key)
            _write_json_file(self._path, self._data)


class CookieJar:
    """
    Cookie storage for one host.

    Cookies are keyed by (name, domain), so removing a cookie only works with
    the domain it was written with. A cookie is visible to the host when it
    is host-only (domain None) or the host equals or is a subdomain of its
    domain.
    """

    def __init__(self, host: str, path: str | Path | None = None):
        self.host = host
        self._path = Path(path) if path else None
        self._cookies: dict[tuple[str, str | None], dict[str, Any]] = {}
        if self._path:
            for record in _load_json_file(self._path).get("cookies", []):
                key = (record["name"], record.get("domain"))
                self._cookies[key] = record

    def put(
        self,
        name: str,
        value: str,
        domain: str | None = None,
        expires: datetime | None = None,
    ) -> None:
        if expires and expires <= datetime.now():
            # Expired cookies are dropped, as a browser does
            self._cookies.pop((name, domain), None)
            self._save()
            return
        self._cookies[(name, domain)] = {
            "name": name,
            "value": value,
            "domain": domain,
            "expires": expires.isoformat() if expires else None,
        }
        self._save()

    def get(self, name: str) -> str | None:
        now = datetime.now()
        for (cookie_name, domain), record in self._cookies.items():
            if cookie_name != name or not self._matches(domain):
                continue
            expires = record["expires"]
            if expires and datetime.fromisoformat(expires) <= now:
                continue
            return record["value"]
        return None

    def remove(
        self,
        name: str,
        domain: str | None = None,
        expires: datetime | None = None,
    ) -> None:
        """Overwrite the cookie with an already expired one."""
        self.put(name, "", domain, expires or datetime.now() - timedelta(days=1))

    def _matches(self, domain: str | None) -> bool:
        if domain is None:
            return True
        domain = domain.lstrip(".")
        return self.host == domain or self.host.endswith("." + domain)

    def _save(self) -> None:
        if self._path:
            _write_json_file(self._path, {"cookies": list(self._cookies.values())})

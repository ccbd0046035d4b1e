"""
SonubClient - async client for the WordPress REST API and the sonub API.

Owns the session lifecycle and cached reads:
- credentials come from a CredentialStore, re-read on every request
- slow-changing data (system settings, categories) goes memory cache ->
  domain cache -> network
- every failure is normalized into an ApiError in ``request``
"""

from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from sonub.models import (
    Category,
    SessionIdentity,
    SystemSettings,
    UserCreate,
    UserUpdate,
)
from sonub.services.cache import DomainCache, MemoryCache
from sonub.services.deduplicator import RequestDeduplicator
from sonub.services.errors import NO_FILE_SELECTED, UNKNOWN_ERROR, ApiError, normalize
from sonub.session.credentials import (
    CredentialStore,
    basic_auth,
    create_credential_store,
)
from sonub.settings import ClientSettings
from sonub.storage import FileStore, KeyValueStore, MemoryStore

T = TypeVar("T")

SYSTEM_SETTINGS_KEY = "systemSettings"
CATEGORIES_KEY = "categories"

_categories_adapter = TypeAdapter(list[Category])


class SessionState(str, Enum):
    """Session states of a client."""

    ANONYMOUS = "ANONYMOUS"
    AUTHENTICATING = "AUTHENTICATING"
    AUTHENTICATED = "AUTHENTICATED"


class SonubClient:
    """
    Usage:
        async with SonubClient(ClientSettings(base_url="https://abc.com")) as wp:
            await wp.login("user@abc.com", "password")
            settings = await wp.system_settings()
            categories = await wp.categories()
            wp.logout()
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        store: KeyValueStore | None = None,
        credentials: CredentialStore | None = None,
        memory_cache: MemoryCache | None = None,
        domain_cache: DomainCache | None = None,
    ):
        self.settings = settings or ClientSettings.from_env()
        debug = self.settings.debug

        if store is None:
            store = (
                FileStore(self.settings.storage_path)
                if self.settings.storage_path
                else MemoryStore()
            )
        self.credentials = credentials or create_credential_store(
            self.settings, store=store
        )
        self.memory_cache = memory_cache or MemoryCache(debug=debug)
        self.domain_cache = domain_cache or DomainCache(store, debug=debug)
        self._deduplicator = (
            RequestDeduplicator(debug=debug) if self.settings.dedupe_requests else None
        )

        self._http_client = http_client
        self._owns_http_client = http_client is None

        self.state = (
            SessionState.AUTHENTICATED
            if self.credentials.is_authenticated
            else SessionState.ANONYMOUS
        )
        logger.debug(
            f"SonubClient for {self.settings.base_url} "
            f"(session storage: {self.settings.session_storage}, state: {self.state.value})"
        )

    # URLs

    @property
    def url(self) -> str:
        return self.settings.base_url.rstrip("/")

    @property
    def wp_api_url(self) -> str:
        return f"{self.url}/wp-json/wp/v2"

    @property
    def users_url(self) -> str:
        return f"{self.wp_api_url}/users"

    @property
    def categories_url(self) -> str:
        return f"{self.wp_api_url}/categories"

    @property
    def media_url(self) -> str:
        return f"{self.wp_api_url}/media"

    @property
    def sonub_api_url(self) -> str:
        return f"{self.url}/wp-json/sonub/v2019"

    # Transport

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.request_timeout),
                follow_redirects=True,
            )
        return self._http_client

    async def request(
        self,
        method: str,
        url: str,
        json_data: Any | None = None,
        params: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        auth: bool | str = True,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Args:
            auth: True sends the current session's credentials (if any),
                False sends none, a string is used as the Authorization header

        Raises:
            ApiError: for any failure, already normalized
        """
        headers: dict[str, str] = {}
        authorization = self.credentials.authorization() if auth is True else auth
        if authorization:
            headers["Authorization"] = authorization

        client = await self._get_http_client()
        try:
            response = await client.request(
                method,
                url,
                json=json_data,
                params=params,
                files=files,
                headers=headers,
            )
            response.raise_for_status()
            return response.json()
        except ApiError:
            raise
        except Exception as e:
            error = normalize(e)
            logger.debug(f"{method} {url} failed: {error.code}: {error.message}")
            raise error from e

    async def get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", url, params=params)

    async def post(self, url: str, data: Any | None = None) -> Any:
        return await self.request("POST", url, json_data=data)

    async def close(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._http_client and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug(f"SonubClient closed, cache: {self.get_cache_status()}")

    def get_cache_status(self) -> dict[str, Any]:
        """Memory cache statistics."""
        return self.memory_cache.get_stats().to_dict()

    async def __aenter__(self) -> "SonubClient":
        await self.warm_up()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # Session

    @property
    def is_logged(self) -> bool:
        return self.credentials.is_authenticated

    @property
    def my_id(self) -> str | None:
        return self.credentials.read("id")

    @property
    def my_security_code(self) -> str | None:
        return self.credentials.read("security_code")

    @property
    def my_email(self) -> str | None:
        return self.credentials.read("email")

    @property
    def my_username(self) -> str | None:
        return self.credentials.read("username")

    @property
    def my_nickname(self) -> str | None:
        return self.credentials.read("nickname")

    async def _authenticate(
        self, call: Awaitable[Any], replaces_session: bool = True
    ) -> dict[str, Any]:
        """
        Run a login-type call and save the identity it returns.

        On any failure a call that replaces the session (login, register)
        leaves no identity behind. A refresh of the stored session keeps it.
        The state always ends matching the credential store.
        """
        self.state = SessionState.AUTHENTICATING
        saved = False
        try:
            data = await call
            identity = SessionIdentity.from_response(data)
            self.credentials.save(identity)
            saved = True
        except ApiError:
            raise
        except (KeyError, TypeError, ValidationError) as e:
            raise ApiError(UNKNOWN_ERROR, f"Unexpected user response: {e}") from e
        except Exception as e:
            raise normalize(e) from e
        finally:
            if not saved and replaces_session:
                self.credentials.clear()
            self.state = (
                SessionState.AUTHENTICATED
                if self.credentials.is_authenticated
                else SessionState.ANONYMOUS
            )

        logger.info(f"Logged in as {identity.username or identity.email or identity.id}")
        return data

    async def register(self, user: UserCreate) -> dict[str, Any]:
        """Create an account and log in as it."""
        return await self._authenticate(
            self.request(
                "POST",
                self.users_url,
                json_data=user.model_dump(exclude_none=True),
                auth=False,
            )
        )

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in with email and password and return the user's profile."""
        return await self.profile(auth=basic_auth(email, password))

    async def profile(self, auth: str | None = None) -> dict[str, Any]:
        """
        Fetch the profile (including the security code) and save the session.

        Without ``auth`` the stored session is used.
        """
        return await self._authenticate(
            self.request("GET", f"{self.sonub_api_url}/profile", auth=auth or True),
            replaces_session=auth is not None,
        )

    async def update_profile(self, user: UserUpdate) -> dict[str, Any]:
        """Update the logged in user. The username cannot be changed."""
        return await self._authenticate(
            self.request(
                "POST", f"{self.users_url}/me", json_data=user.model_dump(exclude_none=True)
            ),
            replaces_session=False,
        )

    def logout(self) -> None:
        self.credentials.clear()
        self.state = SessionState.ANONYMOUS
        logger.info("Logged out")

    # Cached reads

    async def _cached_get(
        self,
        key: str,
        url: str,
        parse: Callable[[Any], T],
        fresh: bool = False,
        on_cached: Callable[[T], None] | None = None,
    ) -> T:
        if not fresh:
            data = self.memory_cache.get(key)
            if data is not None:
                logger.debug(f"(c) Already got {key}. Returning cached data")
                return parse(data)
            if on_cached is not None:
                self._seed_from_domain_cache(key, parse, on_cached)

        async def fetch() -> Any:
            return await self.request("GET", url)

        if self._deduplicator is not None:
            data = await self._deduplicator.dedupe(key, fetch)
        else:
            data = await fetch()

        try:
            result = parse(data)
        except ValidationError as e:
            raise ApiError(UNKNOWN_ERROR, f"Unexpected {key} response: {e}") from e

        logger.debug(f"(l) Got {key} from server")
        # First response in wins unless a fresh read was asked for
        if fresh or key not in self.memory_cache:
            self.memory_cache.set(key, data)
        self.domain_cache.set(self.settings.host, key, data)
        return result

    def _seed_from_domain_cache(
        self, key: str, parse: Callable[[Any], T], on_cached: Callable[[T], None]
    ) -> None:
        data = self.domain_cache.get(self.settings.host, key)
        if data is None:
            return
        try:
            seed = parse(data)
        except ValidationError as e:
            logger.warning(f"Ignoring cached {key} for {self.settings.host}: {e}")
            return
        on_cached(seed)

    async def system_settings(
        self,
        fresh: bool = False,
        on_cached: Callable[[SystemSettings], None] | None = None,
    ) -> SystemSettings:
        """
        System settings from memory, or from the server.

        Safe to call repeatedly; only the first call goes to the network.
        ``on_cached`` receives the last persisted value for this domain (if
        any) before the network fetch.
        """
        return await self._cached_get(
            SYSTEM_SETTINGS_KEY,
            f"{self.sonub_api_url}/system-settings",
            SystemSettings.model_validate,
            fresh=fresh,
            on_cached=on_cached,
        )

    async def categories(
        self,
        fresh: bool = False,
        on_cached: Callable[[list[Category]], None] | None = None,
    ) -> list[Category]:
        return await self._cached_get(
            CATEGORIES_KEY,
            self.categories_url,
            _categories_adapter.validate_python,
            fresh=fresh,
            on_cached=on_cached,
        )

    async def warm_up(self) -> None:
        """Prefetch system settings; failures are logged, not raised."""
        try:
            await self.system_settings()
        except ApiError as e:
            logger.error(f"Could not prefetch system settings: {e}")

    # Misc

    async def version(self) -> Any:
        return await self.get(f"{self.sonub_api_url}/version")

    async def upload_file(self, path: str | Path | None) -> dict[str, Any]:
        """Upload a file to the media library."""
        if not path or not Path(path).is_file():
            raise ApiError(NO_FILE_SELECTED, "No file selected.")
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise normalize(e) from e
        files = {"file": (path.name, content)}
        return await self.request("POST", self.media_url, files=files)

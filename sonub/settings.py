import os
from typing import Literal

import httpx
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()


class ClientSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Backend
    base_url: str = Field(default="http://localhost", alias="SONUB_BASE_URL")
    request_timeout: float = Field(default=30.0, alias="SONUB_REQUEST_TIMEOUT")

    # Session persistence: "cookie" scopes credentials to the root domain,
    # "local" keeps them in the key/value store
    session_storage: Literal["cookie", "local"] = Field(
        default="local", alias="SONUB_SESSION_STORAGE"
    )
    domain: str | None = Field(default=None, alias="SONUB_DOMAIN")
    storage_path: str | None = Field(default=None, alias="SONUB_STORAGE_PATH")

    # Behavior
    dedupe_requests: bool = Field(default=False, alias="SONUB_DEDUPE_REQUESTS")
    debug: bool = Field(default=False, alias="SONUB_DEBUG")

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Build settings from environment variables (and .env)."""
        return cls.model_validate(dict(os.environ))

    @property
    def host(self) -> str:
        """Hostname used for cookie scoping and the domain cache."""
        return self.domain or httpx.URL(self.base_url).host

"""
Data model for the WordPress REST API and the sonub companion API.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SessionIdentity(BaseModel):
    """The logged-in user's credentials as returned by the backend."""

    id: str
    security_code: str
    email: str = ""
    username: str = ""
    nickname: str = ""

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "SessionIdentity":
        """Pick the identity fields out of a user/profile response."""
        return cls(
            id=str(data["id"]),
            security_code=str(data.get("security_code") or ""),
            email=data.get("email") or "",
            username=data.get("username") or "",
            nickname=data.get("nickname") or "",
        )


class UserCreate(BaseModel):
    username: str
    email: str
    password: str
    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    nickname: str | None = None
    url: str | None = None
    description: str | None = None
    locale: str | None = None


class UserUpdate(BaseModel):
    """Profile update. The username cannot be changed."""

    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    nickname: str | None = None
    url: str | None = None
    description: str | None = None
    locale: str | None = None
    password: str | None = None


class Category(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    slug: str
    count: int = 0
    description: str = ""
    parent: int = 0
    taxonomy: str = "category"


class Domain(BaseModel):
    domain: str
    reason: str = ""
    status: str = ""


class Site(BaseModel):
    model_config = ConfigDict(extra="allow")

    idx: str | None = None
    domain: str | None = None
    domains: list[Domain] = Field(default_factory=list)
    name: str | None = None
    author: str | None = None
    description: str | None = None
    keywords: str | None = None


class SystemSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    default_domains: list[str] = Field(default_factory=list)
    max_sites: int | None = None
    max_domains: int | None = None
    categories: list[Category] = Field(default_factory=list)
    site: Site | None = None

"""
Async client for a WordPress REST API and the sonub companion API.
"""

from sonub.models import SessionIdentity, SystemSettings, UserCreate, UserUpdate
from sonub.services import ApiError, SessionState, SonubClient, is_same_error, normalize
from sonub.settings import ClientSettings

__all__ = [
    "ApiError",
    "ClientSettings",
    "SessionIdentity",
    "SessionState",
    "SonubClient",
    "SystemSettings",
    "UserCreate",
    "UserUpdate",
    "is_same_error",
    "normalize",
]

"""
Service layer - request orchestration for the WordPress/sonub backend.

Provides:
- ApiError / normalize / is_same_error: one error shape for every failure
- MemoryCache, DomainCache: caches for slow-changing server data
- RequestDeduplicator: optional sharing of in-flight fetches
- SonubClient: the client combining all of the above
"""

from sonub.services.errors import (
    ClientError,
    ApiError,
    normalize,
    is_same_error,
)
from sonub.services.cache import MemoryCache, DomainCache, CacheStats
from sonub.services.deduplicator import RequestDeduplicator
from sonub.services.client import SonubClient, SessionState

__all__ = [
    # Errors
    "ClientError",
    "ApiError",
    "normalize",
    "is_same_error",
    # Cache
    "MemoryCache",
    "DomainCache",
    "CacheStats",
    # Deduplicator
    "RequestDeduplicator",
    # Client
    "SonubClient",
    "SessionState",
]

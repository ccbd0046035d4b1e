"""
Client exceptions and error normalization.

Every failure that leaves the client is an ApiError carrying a stable
``code`` and a human readable ``message``. Raw failures (httpx exceptions,
decoded backend error bodies, anything else) go through ``normalize`` exactly
once, in the request wrapper.
"""

from collections.abc import Mapping
from typing import Any

import httpx

# Backend-defined codes the client checks for
INVALID_EMAIL = "invalid_email"
INVALID_USERNAME = "invalid_username"
INCORRECT_PASSWORD = "incorrect_password"

# Client-side codes
NO_FILE_SELECTED = "no_file_selected"
FALSY_ERROR = "falsy_error"
SERVER_DOWN_OR_NO_INTERNET = "server_down_or_no_internet"
UNKNOWN_ERROR = "unknown_error"


class ClientError(Exception):
    """Base exception for client errors."""


class ApiError(ClientError):
    """Canonical error: a machine readable code and a message."""

    def __init__(self, code: str, message: str = ""):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}" if message else code)

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return self.code == other.code and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.code, self.message))


def _backend_error(body: Any) -> ApiError | None:
    """Extract the backend's own {code, message} contract from a body."""
    if not isinstance(body, Mapping):
        return None
    embedded = body.get("error")
    if isinstance(embedded, Mapping) and embedded.get("code"):
        return ApiError(str(embedded["code"]), str(embedded.get("message") or ""))
    if body.get("code") and "message" in body:
        return ApiError(str(body["code"]), str(body.get("message") or ""))
    return None


def _is_transport_failure(raw: Any) -> bool:
    if isinstance(raw, httpx.TransportError):
        return True
    # Browser style error record: status 0 means the request never got a reply
    return (
        isinstance(raw, Mapping)
        and raw.get("name") == "HttpErrorResponse"
        and raw.get("status") == 0
    )


def normalize(raw: Any) -> ApiError:
    """
    Convert any failure into an ApiError. Never raises.

    Classification, first match wins:
    1. falsy input                    -> falsy_error
    2. no response (network/timeout)  -> server_down_or_no_internet
    3. backend {code, message} body   -> passed through verbatim
    4. anything else                  -> unknown_error
    """
    if isinstance(raw, ApiError):
        return raw
    if not raw:
        return ApiError(FALSY_ERROR, "Error object is empty.")
    if _is_transport_failure(raw):
        return ApiError(
            SERVER_DOWN_OR_NO_INTERNET,
            "Server is down or there is no internet connection.",
        )
    if isinstance(raw, httpx.HTTPStatusError):
        try:
            body = raw.response.json()
        except ValueError:
            body = None
        error = _backend_error(body)
        if error is not None:
            return error
        return ApiError(
            UNKNOWN_ERROR,
            f"HTTP {raw.response.status_code}: {raw.response.text[:200]}",
        )
    error = _backend_error(raw)
    if error is not None:
        return error
    return ApiError(UNKNOWN_ERROR, f"Unknown error: {raw!r}"[:300])


def is_same_error(error: Any, code: str) -> bool:
    """Check an error against a code; raw errors are normalized on the fly."""
    return normalize(error).code == code

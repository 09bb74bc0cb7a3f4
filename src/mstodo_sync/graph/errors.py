# src/mstodo_sync/graph/errors.py

from __future__ import annotations

"""
Error taxonomy for remote To Do operations.

Every failure of the Graph client is normalized into one of four classes so
callers can branch on the kind of failure instead of transport details:

- Unauthenticated: no token configured (raised before any request is sent)
- RemoteRejected:  the server answered with an error payload
- Unreachable:     a request was sent but no response came back
- Unexpected:      anything else while building/sending/decoding a request
"""

from typing import Any

GENERIC_API_ERROR = "Unknown API error"


class TodoSyncError(Exception):
    """Base class for all errors surfaced by the sync core."""

    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(TodoSyncError):
    default_message = "MS Graph API token not configured"


class RemoteRejected(TodoSyncError):
    default_message = GENERIC_API_ERROR

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @classmethod
    def from_payload(cls, payload: Any, *, status_code: int | None = None) -> RemoteRejected:
        return cls(extract_error_message(payload), status_code=status_code)


class Unreachable(TodoSyncError):
    default_message = "Unable to connect to Microsoft Graph API"


class Unexpected(TodoSyncError):
    pass


def extract_error_message(payload: Any) -> str:
    """
    Pull `error.message` out of a Graph error body.

    Graph errors look like {"error": {"code": "...", "message": "..."}}.
    Anything else (missing keys, non-dict, blank message) -> generic text.
    """
    if not isinstance(payload, dict):
        return GENERIC_API_ERROR
    err = payload.get("error")
    if not isinstance(err, dict):
        return GENERIC_API_ERROR
    msg = err.get("message")
    if not isinstance(msg, str) or not msg.strip():
        return GENERIC_API_ERROR
    return msg

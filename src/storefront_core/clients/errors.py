"""
storefront_core.clients.errors

Uniform error shape for every backend call.

Responsibilities:
- `ApiError` carrying a human-readable message and a numeric status.
- Classification helpers used by stores to decide whether to keep or drop state.
"""

from __future__ import annotations

from typing import Any

# Status used when no usable server response was received.
NETWORK_ERROR_STATUS = 0

DEFAULT_ERROR_MESSAGE = "Something went wrong"


class ApiError(Exception):
    def __init__(self, message: str, status: int, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, message={self.message!r})"


def is_network_error(err: ApiError) -> bool:
    return err.status == NETWORK_ERROR_STATUS


def is_auth_error(err: ApiError) -> bool:
    # 401 is the only status the backend uses to say the session is invalid.
    return err.status == 401


def is_not_found(err: ApiError) -> bool:
    return err.status == 404


def is_validation_error(err: ApiError) -> bool:
    return 400 <= err.status < 500 and not is_auth_error(err)


def message_from_payload(payload: Any, fallback: str) -> str:
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return fallback


# --- Module Notes -----------------------------------------------------------
# UI layers only display `ApiError.message`; classification belongs to the stores.

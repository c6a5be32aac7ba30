"""
storefront_core.auth.jwt

Client-side inspection of bearer tokens.

Responsibilities:
- Read the `exp` claim of a cached token so an expired session can be dropped
  without a round trip.

Note:
- Signatures are not verified here; the backend stays the authority on validity.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import jwt
from jwt import InvalidTokenError

_UNVERIFIED = {
    "verify_signature": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
}


def token_claims(token: str) -> dict[str, Any] | None:
    try:
        return jwt.decode(token, options=_UNVERIFIED)
    except InvalidTokenError:
        return None


def token_expired(token: str, *, now: datetime | None = None) -> bool:
    """
    True only for a well-formed JWT whose `exp` is in the past. Opaque tokens are
    left for the backend to judge.
    """

    claims = token_claims(token)
    if not claims:
        return False
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return False
    current = now or datetime.now(tz=UTC)
    return exp <= current.timestamp()


# --- Module Notes -----------------------------------------------------------
# Used by `auth.session.SessionStore.startup_validate` before the profile call.

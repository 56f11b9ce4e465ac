"""Issuing and checking the bearer tokens that identify users."""

from __future__ import annotations

import math

import jwt

HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]


class AuthError(Exception):
    """The request carries no usable credentials."""

    status_code = 401


def generate_jwt(user_id: int, secret: str) -> str:
    """Return an HS256 token carrying ``user_id`` in the ``userID`` claim."""
    return jwt.encode({"userID": user_id}, secret, algorithm="HS256")


def parse_authorization(header: str | None, secret: str) -> int:
    """Validate an ``Authorization`` header value and return the user id in it."""
    if not header:
        raise AuthError("Missing Authorization header")

    encoded = header.removeprefix("Bearer ")
    try:
        claims = jwt.decode(encoded, secret, algorithms=HMAC_ALGORITHMS)
    except jwt.PyJWTError as exc:
        raise AuthError("Invalid token") from exc

    user_id = claims.get("userID")
    if (
        isinstance(user_id, bool)
        or not isinstance(user_id, (int, float))
        or not math.isfinite(user_id)
    ):
        raise AuthError("Invalid user ID in token")
    return int(user_id)
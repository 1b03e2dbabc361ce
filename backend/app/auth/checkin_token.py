"""Signed QR check-in tokens.

A token binds a booking reference to the ``checkin`` purpose and expires
after ``settings.checkin_token_expire_days``. It is signed with its own
secret so staff access tokens can never be replayed as check-in tokens.
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from app.config import settings

CHECKIN_TOKEN_TYPE = "checkin"


def create_checkin_token(booking_ref: str, expires_delta: timedelta | None = None) -> str:
    """Mint a check-in token for ``booking_ref``."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.checkin_token_expire_days))
    payload = {
        "bookingRef": booking_ref,
        "type": CHECKIN_TOKEN_TYPE,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.checkin_jwt_secret, algorithm=settings.jwt_algorithm)


def decode_checkin_token(token: str) -> dict:
    """Verify signature and expiry of a check-in token.

    Tokens without an ``exp`` claim are rejected.

    Raises:
        jose.JWTError: If the token is forged, expired, or malformed.
    """
    return jwt.decode(
        token,
        settings.checkin_jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require_exp": True},
    )

"""FastAPI authentication dependencies for staff route protection."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import decode_token
from app.database import get_db
from app.models.staff import StaffMember

# Strict bearer: rejects the request if no token is provided
_bearer_scheme = HTTPBearer()

# Optional bearer: returns None if no token is provided
_bearer_scheme_optional = HTTPBearer(auto_error=False)


async def _resolve_staff(token: str, db: AsyncSession) -> StaffMember | None:
    """Return the active staff member a token belongs to, or ``None``."""
    try:
        payload = decode_token(token)
    except JWTError:
        return None

    # Only accept access tokens
    if payload.get("type") != "access":
        return None

    email: str | None = payload.get("sub")
    if not email:
        return None

    result = await db.execute(select(StaffMember).where(func.lower(StaffMember.email) == email.lower()))
    staff = result.scalar_one_or_none()

    if staff is None or not staff.is_active:
        return None
    return staff


async def get_current_staff(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> StaffMember:
    """Extract and validate the Bearer token, then return the staff member.

    Raises:
        HTTPException 401: If the token is invalid, expired, wrong type, or
            the email is not an active staff member.
    """
    staff = await _resolve_staff(credentials.credentials, db)
    if staff is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return staff


async def get_optional_staff(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme_optional),
    db: AsyncSession = Depends(get_db),
) -> StaffMember | None:
    """Optionally authenticate a staff member from a Bearer token.

    Returns ``None`` instead of raising when no valid token is provided, so
    the kiosk check-in can run with or without a staff session.
    """
    if credentials is None:
        return None
    return await _resolve_staff(credentials.credentials, db)

"""Shared API dependencies — single import point for all routers.

Re-exports database session and staff authentication dependencies so that
router modules can import everything they need from one place::

    from app.api.deps import get_db, get_current_staff
"""

from app.auth.dependencies import get_current_staff, get_optional_staff
from app.database import get_db

__all__ = [
    "get_db",
    "get_current_staff",
    "get_optional_staff",
]

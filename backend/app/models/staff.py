"""Staff allow-list — who may act on bookings from the dashboard."""

from datetime import datetime

from sqlalchemy import Boolean, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, UUIDPrimaryKeyMixin


class StaffMember(UUIDPrimaryKeyMixin, Base):
    """A dashboard user recognised by the email in their identity token."""

    __tablename__ = "staff_members"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    def __repr__(self) -> str:
        return f"<StaffMember email={self.email!r} active={self.is_active}>"

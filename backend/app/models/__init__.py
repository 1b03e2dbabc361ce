"""SQLAlchemy models for Luggage Desk.

All models are imported here so that ``Base.metadata`` knows every table
before ``create_all`` runs. If you add a new model, import it in this file.
"""

from app.models.booking import ArchivedBooking, Booking
from app.models.staff import StaffMember

__all__ = [
    "ArchivedBooking",
    "Booking",
    "StaffMember",
]

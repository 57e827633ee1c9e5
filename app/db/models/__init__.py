"""SQLAlchemy ORM models."""

from app.db.models.appointments import Appointment
from app.db.models.auth import User

__all__ = ["Appointment", "User"]

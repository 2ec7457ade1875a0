"""Database models."""

from app.models.booking import Booking, BookingEquipment
from app.models.campsite import Campsite, Equipment
from app.models.notification import Notification
from app.models.user import User

__all__ = [
    # User
    "User",
    # Inventory
    "Campsite",
    "Equipment",
    # Booking
    "Booking",
    "BookingEquipment",
    # Notification
    "Notification",
]

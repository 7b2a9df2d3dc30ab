"""Background jobs started from the application lifespan."""

from .watering_notifications import WateringNotificationsJob

__all__ = ["WateringNotificationsJob"]

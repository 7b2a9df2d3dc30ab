"""
Watering notification service.

Finds user plants whose next_watering is in the past and writes one
WATERING notification per plant. Driven by the periodic job in
planter/jobs/watering_notifications.py, which runs with the service_role
client because it sweeps every user's plants.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, cast

from supabase import Client

from planter.utils.constants import NOTIFICATION_TYPES

logger = logging.getLogger(__name__)

WATERING_MESSAGE_TEMPLATE = "Пора полить ваше растение {name}!"


class NotificationStore:
    """Persistence for notifications and the watering-due query over user_plants."""

    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    async def create(self, user_id: str, plant_id: str, message: str) -> Dict[str, Any]:
        """
        Insert an unread watering notification.

        Raises:
            Exception: If the insert returns no row
        """
        result = (
            self.client.table("notifications")
            .insert({
                "user_id": user_id,
                "plant_id": plant_id,
                "type": NOTIFICATION_TYPES['WATERING'],
                "message": message,
                "is_read": False,
            })
            .execute()
        )

        if not result.data:
            logger.error(f"Notification insert returned no data for user {user_id}, plant {plant_id}")
            raise Exception("Failed to create notification")

        return cast(Dict[str, Any], result.data[0])

    async def list_due_user_plants(self, now: datetime) -> List[Dict[str, Any]]:
        """User plants whose next_watering is before ``now``, with the plant name embedded."""
        result = (
            self.client.table("user_plants")
            .select("user_id, plant_id, next_watering, plants(name)")
            .lt("next_watering", now.isoformat())
            .execute()
        )

        return cast(List[Dict[str, Any]], result.data or [])


class NotificationService:
    """Creates watering reminders for plants that are due."""

    def __init__(self, store: NotificationStore):
        self.store = store

    async def check_and_create_watering_notifications(self, now: datetime) -> int:
        """
        Create one reminder per due user plant.

        Stops at the first persistence failure and propagates it.

        Returns:
            Number of notifications created
        """
        due = await self.store.list_due_user_plants(now)
        created = 0

        for row in due:
            plant = row.get("plants") or {}
            name = plant.get("name") or ""
            await self.store.create(
                user_id=str(row["user_id"]),
                plant_id=str(row["plant_id"]),
                message=WATERING_MESSAGE_TEMPLATE.format(name=name),
            )
            created += 1

        logger.info(f"Watering check created {created} notifications ({len(due)} plants due)")
        return created

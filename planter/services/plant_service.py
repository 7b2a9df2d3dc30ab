"""
Plant catalog service.

Read-only access to the plant catalog. Every plant is read together with
its care_instructions row (PostgREST embedded resource) and mapped to the
Plant schema the scorer and prompt builder consume.
"""

import logging
import re
from typing import Any, Dict, List, cast

from supabase import Client

from planter.schemas.plants import CareInstructions, Plant
from planter.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)

PLANT_SELECT = "*, care_instructions(*)"

# Characters with meaning in PostgREST filter expressions
_FILTER_UNSAFE = re.compile(r"[,()%*\\]")


def row_to_plant(row: Dict[str, Any]) -> Plant:
    """Map a plants row with embedded care_instructions to a Plant."""
    care: Dict[str, Any] = row.get("care_instructions") or {}

    return Plant(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        scientific_name=str(row.get("scientific_name") or ""),
        description=str(row.get("description") or ""),
        image_url=row.get("image_url"),
        price=float(row["price"]) if row.get("price") is not None else None,
        shop_id=str(row["shop_id"]) if row.get("shop_id") else None,
        care_instructions=CareInstructions(
            id=str(care["id"]) if care.get("id") else None,
            watering_frequency=int(care.get("watering_frequency") or 0),
            sunlight=care.get("sunlight") or "MEDIUM",
            min_temperature=care.get("min_temperature"),
            max_temperature=care.get("max_temperature"),
            humidity=care.get("humidity"),
            soil_type=care.get("soil_type"),
            fertilizer_frequency=int(care.get("fertilizer_frequency") or 0),
            additional_notes=str(care.get("additional_notes") or ""),
        ),
    )


class PlantCatalog:
    """Catalog queries over the plants / care_instructions tables."""

    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    async def list_all(self) -> List[Plant]:
        """
        Fetch the whole catalog, ordered by name.

        The order is stable between calls, which keeps prompt indexes and
        local-scorer tie-breaking reproducible.
        """
        result = (
            self.client.table("plants")
            .select(PLANT_SELECT)
            .order("name", desc=False)
            .execute()
        )

        rows = cast(List[Dict[str, Any]], result.data or [])
        logger.info(f"Loaded {len(rows)} catalog plants")

        return [row_to_plant(row) for row in rows]

    async def get(self, plant_id: str) -> Plant:
        """
        Fetch a single plant.

        Raises:
            NotFoundError: If the plant does not exist
        """
        result = (
            self.client.table("plants")
            .select(PLANT_SELECT)
            .eq("id", plant_id)
            .execute()
        )

        if not result.data:
            logger.warning(f"Plant {plant_id} not found")
            raise NotFoundError("Plant", plant_id)

        return row_to_plant(cast(Dict[str, Any], result.data[0]))

    async def search(self, query: str) -> List[Plant]:
        """Case-insensitive match on name or scientific name."""
        term = _FILTER_UNSAFE.sub(" ", query).strip()
        if not term:
            return await self.list_all()

        result = (
            self.client.table("plants")
            .select(PLANT_SELECT)
            .or_(f"name.ilike.%{term}%,scientific_name.ilike.%{term}%")
            .order("name", desc=False)
            .execute()
        )

        rows = cast(List[Dict[str, Any]], result.data or [])
        logger.info(f"Plant search matched {len(rows)} plants")

        return [row_to_plant(row) for row in rows]

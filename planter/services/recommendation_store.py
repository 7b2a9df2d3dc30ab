"""
Questionnaire and recommendation persistence.

Tables:
- plant_questionnaires: one row per submitted questionnaire (never updated)
- plant_recommendations: UNIQUE(questionnaire_id, plant_id); saving is an
  upsert on that pair so regenerating cannot violate the constraint
"""

import logging
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from planter.schemas.plants import RecommendedPlant
from planter.schemas.recommendations import Questionnaire, Recommendation
from planter.services.plant_service import PLANT_SELECT, row_to_plant
from planter.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def _row_to_questionnaire(row: Dict[str, Any]) -> Questionnaire:
    return Questionnaire(
        id=str(row["id"]),
        user_id=str(row["user_id"]) if row.get("user_id") else None,
        sunlight_preference=row["sunlight_preference"],
        pet_friendly=bool(row.get("pet_friendly")),
        care_level=int(row["care_level"]),
        preferred_location=row.get("preferred_location"),
        additional_preferences=row.get("additional_preferences"),
        created_at=str(row["created_at"]) if row.get("created_at") else None,
    )


def _row_to_recommendation(row: Dict[str, Any]) -> Recommendation:
    return Recommendation(
        questionnaire_id=str(row["questionnaire_id"]),
        plant_id=str(row["plant_id"]),
        score=float(row["score"]),
        reasoning=str(row.get("reasoning") or ""),
    )


class RecommendationStore:
    """Persistence for questionnaires and their scored recommendations."""

    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    async def save_questionnaire(
        self,
        user_id: Optional[str],
        sunlight_preference: str,
        pet_friendly: bool,
        care_level: int,
        preferred_location: Optional[str] = None,
        additional_preferences: Optional[str] = None,
    ) -> Questionnaire:
        """
        Insert a questionnaire and return the stored record.

        Raises:
            Exception: If the insert returns no row
        """
        payload = {
            "user_id": user_id,
            "sunlight_preference": sunlight_preference,
            "pet_friendly": pet_friendly,
            "care_level": care_level,
            "preferred_location": preferred_location,
            "additional_preferences": additional_preferences,
        }

        result = self.client.table("plant_questionnaires").insert(payload).execute()

        if not result.data:
            logger.error("Questionnaire insert returned no data")
            raise Exception("Failed to save questionnaire")

        questionnaire = _row_to_questionnaire(cast(Dict[str, Any], result.data[0]))
        logger.info(f"Questionnaire {questionnaire.id} saved (user_id={user_id or 'anonymous'})")

        return questionnaire

    async def get_questionnaire(self, questionnaire_id: str) -> Questionnaire:
        """
        Fetch a questionnaire.

        Raises:
            NotFoundError: If the questionnaire does not exist
        """
        result = (
            self.client.table("plant_questionnaires")
            .select("*")
            .eq("id", questionnaire_id)
            .execute()
        )

        if not result.data:
            logger.warning(f"Questionnaire {questionnaire_id} not found")
            raise NotFoundError("Questionnaire", questionnaire_id)

        return _row_to_questionnaire(cast(Dict[str, Any], result.data[0]))

    async def save_recommendation(self, recommendation: Recommendation) -> None:
        """Upsert one recommendation on (questionnaire_id, plant_id)."""
        (
            self.client.table("plant_recommendations")
            .upsert(
                {
                    "questionnaire_id": recommendation.questionnaire_id,
                    "plant_id": recommendation.plant_id,
                    "score": recommendation.score,
                    "reasoning": recommendation.reasoning,
                },
                on_conflict="questionnaire_id,plant_id",
            )
            .execute()
        )

    async def get_recommendations(self, questionnaire_id: str) -> List[Recommendation]:
        """Stored recommendations for a questionnaire, score descending."""
        result = (
            self.client.table("plant_recommendations")
            .select("*")
            .eq("questionnaire_id", questionnaire_id)
            .order("score", desc=True)
            .execute()
        )

        rows = cast(List[Dict[str, Any]], result.data or [])
        return [_row_to_recommendation(row) for row in rows]

    async def get_recommended_plants(self, questionnaire_id: str) -> List[RecommendedPlant]:
        """Recommended plants joined to their stored score, score descending."""
        result = (
            self.client.table("plant_recommendations")
            .select(f"score, reasoning, plants({PLANT_SELECT})")
            .eq("questionnaire_id", questionnaire_id)
            .order("score", desc=True)
            .execute()
        )

        rows = cast(List[Dict[str, Any]], result.data or [])
        plants: List[RecommendedPlant] = []

        for row in rows:
            plant_row = row.get("plants")
            if not plant_row:
                # Plant deleted from the catalog after generation
                logger.warning(f"Recommendation for questionnaire {questionnaire_id} references a missing plant")
                continue
            plant = row_to_plant(cast(Dict[str, Any], plant_row))
            plants.append(RecommendedPlant(
                **plant.model_dump(),
                score=float(row["score"]),
                reasoning=str(row.get("reasoning") or ""),
            ))

        return plants

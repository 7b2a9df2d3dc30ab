"""
Recommendation Service - completion pipeline with local fallback

Architecture:
- Two interchangeable strategies share one capability,
  ``score(questionnaire, plants) -> List[Recommendation]``:
  * CompletionScoringStrategy: prompt builder -> completion client -> parser
  * LocalScoringStrategy: deterministic heuristics (never fails)
- select_strategies() decides the order once per generation run:
  completion first when a client is configured and the catalog is not
  empty, then local. A GenerationError (transport, status, empty answer,
  parse) from one strategy moves on to the next.
- Results are de-duplicated per plant, ranked by score and truncated to
  MAX_RECOMMENDATIONS before being upserted.

get_or_generate() is idempotent: once recommendations are stored for a
questionnaire they are returned as-is without another completion call.
"""

import logging
from typing import Dict, List, Optional, Sequence

from planter.agents.recommendation.parser import parse_recommendations
from planter.agents.recommendation.prompts import build_recommendation_prompt
from planter.agents.recommendation.scoring import score_plants
from planter.schemas.plants import Plant, RecommendedPlant
from planter.schemas.recommendations import (
    DetailedQuestionnaireRequest,
    Questionnaire,
    QuestionnaireRequest,
    Recommendation,
)
from planter.services.completion_client import CompletionClient
from planter.services.plant_service import PlantCatalog
from planter.services.recommendation_store import RecommendationStore
from planter.utils.constants import MAX_RECOMMENDATIONS
from planter.utils.exceptions import GenerationError, ValidationError
from planter.utils.locks import KeyedLock

logger = logging.getLogger(__name__)

# Serializes generation per questionnaire within this process
_generation_locks = KeyedLock()


# =============================================================================
# STRATEGIES
# =============================================================================

class LocalScoringStrategy:
    """Deterministic local heuristics (planter/agents/recommendation/scoring.py)."""

    name = "local"

    async def score(self, questionnaire: Questionnaire, plants: Sequence[Plant]) -> List[Recommendation]:
        return score_plants(questionnaire, plants)


class CompletionScoringStrategy:
    """Ask the completion backend and parse its numbered answer."""

    name = "completion"

    def __init__(self, client: CompletionClient):
        self.client = client

    async def score(self, questionnaire: Questionnaire, plants: Sequence[Plant]) -> List[Recommendation]:
        prompt = build_recommendation_prompt(questionnaire, plants)
        text = await self.client.complete(prompt)
        return parse_recommendations(text, questionnaire.id, plants)


def select_strategies(completion_client: Optional[CompletionClient], plants: Sequence[Plant]) -> list:
    """Strategies to try in order; the last one is always the local scorer."""
    local = LocalScoringStrategy()
    if completion_client is None or not plants:
        return [local]
    return [CompletionScoringStrategy(completion_client), local]


def rank_recommendations(recommendations: Sequence[Recommendation]) -> List[Recommendation]:
    """
    Keep the best entry per plant, sort by score descending, keep the top N.

    Ties keep their input order.
    """
    best: Dict[str, Recommendation] = {}
    for recommendation in recommendations:
        current = best.get(recommendation.plant_id)
        if current is None or recommendation.score > current.score:
            best[recommendation.plant_id] = recommendation

    ranked = sorted(best.values(), key=lambda r: r.score, reverse=True)
    return ranked[:MAX_RECOMMENDATIONS]


# =============================================================================
# QUESTIONNAIRE HELPERS
# =============================================================================

def fold_detailed_preferences(request: DetailedQuestionnaireRequest) -> str:
    """
    Flatten the extended questionnaire answers into one description.

    Label order is fixed: size, flowering, air purifying, watering
    frequency, experience level, has children, then the user's free text.
    """
    folded = (
        f"Размер растения: {request.plant_size}, "
        f"Цветущее: {str(request.flowering_preference).lower()}, "
        f"Очищающее воздух: {str(request.air_purifying).lower()}, "
        f"Частота полива: {request.watering_frequency}, "
        f"Уровень опыта: {request.experience_level}, "
        f"Есть дети: {str(request.has_children).lower()}"
    )

    if request.additional_preferences:
        folded += f", {request.additional_preferences}"

    return folded


# =============================================================================
# SERVICE
# =============================================================================

class RecommendationService:
    """Questionnaire intake and recommendation get-or-generate."""

    def __init__(
        self,
        store: RecommendationStore,
        catalog: PlantCatalog,
        completion_client: Optional[CompletionClient] = None,
    ):
        self.store = store
        self.catalog = catalog
        self.completion_client = completion_client

    async def save_questionnaire(
        self,
        user_id: Optional[str],
        request: QuestionnaireRequest,
    ) -> Questionnaire:
        """
        Validate and persist a compact or detailed questionnaire.

        Raises:
            ValidationError: If the care level is outside 1-5
        """
        if not 1 <= request.care_level <= 5:
            raise ValidationError("care_level must be between 1 and 5", field="care_level")

        additional = request.additional_preferences
        if isinstance(request, DetailedQuestionnaireRequest):
            additional = fold_detailed_preferences(request)

        location = request.preferred_location.strip() if request.preferred_location else None

        return await self.store.save_questionnaire(
            user_id=user_id,
            sunlight_preference=request.sunlight_preference,
            pet_friendly=request.pet_friendly,
            care_level=request.care_level,
            preferred_location=location or None,
            additional_preferences=additional or None,
        )

    async def generate(self, questionnaire: Questionnaire, plants: Sequence[Plant]) -> List[Recommendation]:
        """
        Run the strategies in order and return the ranked result.

        Never raises GenerationError: the local scorer is always last.
        """
        strategies = select_strategies(self.completion_client, plants)

        for strategy in strategies:
            try:
                recommendations = await strategy.score(questionnaire, plants)
            except GenerationError as e:
                logger.warning(
                    f"Strategy '{strategy.name}' failed for questionnaire {questionnaire.id}: "
                    f"{type(e).__name__}: {e.message}. Falling back."
                )
                continue

            logger.info(
                f"Strategy '{strategy.name}' produced {len(recommendations)} recommendations "
                f"for questionnaire {questionnaire.id}"
            )
            return rank_recommendations(recommendations)

        return []

    async def get_or_generate(self, questionnaire_id: str) -> List[RecommendedPlant]:
        """
        Return ranked plants for a questionnaire, generating them once.

        Raises:
            NotFoundError: If the questionnaire does not exist
        """
        async with _generation_locks.hold(questionnaire_id):
            existing = await self.store.get_recommendations(questionnaire_id)
            if existing:
                logger.info(f"Returning {len(existing)} stored recommendations for questionnaire {questionnaire_id}")
                return await self.store.get_recommended_plants(questionnaire_id)

            questionnaire = await self.store.get_questionnaire(questionnaire_id)
            plants = await self.catalog.list_all()

            recommendations = await self.generate(questionnaire, plants)
            for recommendation in recommendations:
                await self.store.save_recommendation(recommendation)

            logger.info(f"Persisted {len(recommendations)} recommendations for questionnaire {questionnaire_id}")

            return await self.store.get_recommended_plants(questionnaire_id)

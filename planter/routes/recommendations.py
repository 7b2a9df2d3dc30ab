"""
FastAPI routes for the plant recommendation flow.

Endpoints:
- POST /recommendations/questionnaire: Submit a compact questionnaire
- POST /recommendations/questionnaire/detailed: Submit the extended questionnaire
- GET /recommendations/questionnaire/{questionnaire_id}: Ranked plants for a questionnaire

Questionnaires may be submitted anonymously. When a token is sent, the owner
is taken from it (never from the body) and the Supabase client runs as the
user.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from planter.auth.dependencies import AuthenticatedUser, get_optional_user
from planter.db.client import get_supabase_client
from planter.schemas.recommendations import (
    DetailedQuestionnaireRequest,
    QuestionnaireRequest,
    RecommendationsResponse,
)
from planter.services.completion_client import get_completion_client
from planter.services.plant_service import PlantCatalog
from planter.services.recommendation_service import RecommendationService
from planter.services.recommendation_store import RecommendationStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/recommendations",
    tags=["recommendations"]
)


def build_recommendation_service(supabase_client: Client) -> RecommendationService:
    return RecommendationService(
        store=RecommendationStore(supabase_client),
        catalog=PlantCatalog(supabase_client),
        completion_client=get_completion_client(),
    )


async def _submit(
    request: QuestionnaireRequest,
    auth_user: Optional[AuthenticatedUser],
) -> RecommendationsResponse:
    """
    Shared flow of both questionnaire endpoints.

    - Auth: optional, handled by get_optional_user
    - Parse/Validate: Pydantic request model (+ care level check in service)
    - Domain filter: N/A
    - Call service: save questionnaire, then get-or-generate
    - Map output: RecommendationsResponse
    - Persistence: questionnaire and recommendations saved by the service
    """
    user_id = auth_user.user_id if auth_user else None
    supabase_client = get_supabase_client(auth_user.access_token if auth_user else None)
    service = build_recommendation_service(supabase_client)

    questionnaire = await service.save_questionnaire(user_id, request)
    plants = await service.get_or_generate(questionnaire.id)

    if not plants:
        logger.info(f"No plants matched questionnaire {questionnaire.id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "no_matches",
                "details": "No suitable plants found for this questionnaire"
            }
        )

    return RecommendationsResponse(
        questionnaire_id=questionnaire.id,
        plants=plants,
        count=len(plants),
    )


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post(
    "/questionnaire",
    response_model=RecommendationsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit questionnaire and get recommendations",
    description="""
    Saves the questionnaire and returns up to 5 ranked plants.

    **Authentication:** Optional (Bearer token)

    **Generation:**
    - The completion backend is asked first when configured
    - Any failure (timeout, non-2xx, empty or unparsable answer) falls back
      to the deterministic local scorer
    - 404 `no_matches` when no plant clears the minimum match score
    """
)
async def submit_questionnaire(
    request: QuestionnaireRequest,
    auth_user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
) -> RecommendationsResponse:
    logger.info(
        f"POST /recommendations/questionnaire called "
        f"(user_id={auth_user.user_id if auth_user else 'anonymous'})"
    )
    return await _submit(request, auth_user)


@router.post(
    "/questionnaire/detailed",
    response_model=RecommendationsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit extended questionnaire and get recommendations",
    description="""
    Same as POST /recommendations/questionnaire with the extended form.

    Size, flowering, air purifying, watering frequency, experience level and
    children answers are folded into the stored additional preferences.
    """
)
async def submit_detailed_questionnaire(
    request: DetailedQuestionnaireRequest,
    auth_user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
) -> RecommendationsResponse:
    logger.info(
        f"POST /recommendations/questionnaire/detailed called "
        f"(user_id={auth_user.user_id if auth_user else 'anonymous'})"
    )
    return await _submit(request, auth_user)


@router.get(
    "/questionnaire/{questionnaire_id}",
    response_model=RecommendationsResponse,
    status_code=status.HTTP_200_OK,
    summary="Get recommendations for a questionnaire",
    description="""
    Returns stored recommendations, generating them first if none exist yet.
    Repeated calls return the stored result without another completion call.
    """
)
async def get_recommendations(
    questionnaire_id: str,
    auth_user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
) -> RecommendationsResponse:
    supabase_client = get_supabase_client(auth_user.access_token if auth_user else None)
    service = build_recommendation_service(supabase_client)

    plants = await service.get_or_generate(questionnaire_id)

    logger.info(f"Returning {len(plants)} plants for questionnaire {questionnaire_id}")
    return RecommendationsResponse(
        questionnaire_id=questionnaire_id,
        plants=plants,
        count=len(plants),
    )

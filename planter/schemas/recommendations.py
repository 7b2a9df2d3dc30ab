"""
Pydantic schemas for questionnaires and plant recommendations.

These models define the strict request/response contracts for the
recommendation flow and the domain records persisted by
RecommendationStore.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from planter.schemas.plants import RecommendedPlant, SunlightLevel

PlantSize = Literal["SMALL", "MEDIUM", "LARGE"]
WateringFrequency = Literal["RARE", "REGULAR", "FREQUENT"]
ExperienceLevel = Literal["BEGINNER", "INTERMEDIATE", "ADVANCED"]


# ============================================================================
# REQUEST MODELS
# ============================================================================

class QuestionnaireRequest(BaseModel):
    """
    Compact questionnaire submission.

    Anonymous submissions are allowed; the owner comes from the token when
    one is present, never from the body.
    """
    sunlight_preference: SunlightLevel = Field(
        ...,
        description="How much light the spot gets",
        examples=["MEDIUM"]
    )
    pet_friendly: bool = Field(
        False,
        description="Whether the plant must be safe for pets"
    )
    care_level: int = Field(
        ...,
        description="Care effort the user can give, 1 (minimal) to 5 (a lot)",
        ge=1,
        le=5,
        examples=[3]
    )
    preferred_location: Optional[str] = Field(
        None,
        description="Where the plant will live",
        max_length=255,
        examples=["bedroom", "спальня"]
    )
    additional_preferences: Optional[str] = Field(
        None,
        description="Free-text wishes passed to the completion prompt",
        max_length=2000
    )


class DetailedQuestionnaireRequest(QuestionnaireRequest):
    """
    Extended questionnaire submission.

    The extra answers are folded into ``additional_preferences`` of the
    stored questionnaire (see fold_detailed_preferences in
    planter/services/recommendation_service.py).
    """
    plant_size: PlantSize = Field(..., description="Desired plant size")
    flowering_preference: bool = Field(False, description="Prefers flowering plants")
    air_purifying: bool = Field(False, description="Prefers air-purifying plants")
    watering_frequency: WateringFrequency = Field(..., description="How often the user wants to water")
    experience_level: ExperienceLevel = Field(..., description="Gardening experience")
    has_children: bool = Field(False, description="Children live in the home")


# ============================================================================
# DOMAIN RECORDS
# ============================================================================

class Questionnaire(BaseModel):
    """Stored questionnaire. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: Optional[str] = None
    sunlight_preference: SunlightLevel
    pet_friendly: bool
    care_level: int = Field(..., ge=1, le=5)
    preferred_location: Optional[str] = None
    additional_preferences: Optional[str] = None
    created_at: Optional[str] = None


class Recommendation(BaseModel):
    """Scored pairing of one questionnaire with one catalog plant."""
    model_config = ConfigDict(frozen=True)

    questionnaire_id: str
    plant_id: str
    score: float = Field(..., ge=0, le=1)
    reasoning: str = ""


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class RecommendationsResponse(BaseModel):
    """Ranked plants for one questionnaire, best match first."""
    questionnaire_id: str = Field(..., description="Questionnaire UUID")
    plants: List[RecommendedPlant] = Field(..., description="Recommended plants, score descending")
    count: int = Field(..., description="Number of plants returned")

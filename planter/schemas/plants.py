"""
Pydantic schemas for the plant catalog.

Plants are read-only for the recommendation flow: the catalog supplies them
wholesale to the scorer and the prompt builder on every generation run.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

# Matches the sunlight_level / humidity_level enums in the database
SunlightLevel = Literal["LOW", "MEDIUM", "HIGH"]
HumidityLevel = Literal["LOW", "MEDIUM", "HIGH"]


class CareInstructions(BaseModel):
    """Care record attached to every catalog plant."""
    id: Optional[str] = Field(None, description="care_instructions UUID")
    watering_frequency: int = Field(..., description="Days between waterings", ge=0)
    sunlight: SunlightLevel = Field(..., description="Sunlight requirement")
    min_temperature: Optional[int] = Field(None, description="Minimum temperature (°C)")
    max_temperature: Optional[int] = Field(None, description="Maximum temperature (°C)")
    humidity: Optional[HumidityLevel] = Field(None, description="Humidity requirement")
    soil_type: Optional[str] = Field(None, description="Recommended soil")
    fertilizer_frequency: int = Field(
        ...,
        description="Care burden on the 1-5 scale compared against the questionnaire care level",
    )
    additional_notes: str = Field("", description="Free-text care notes")


class Plant(BaseModel):
    """
    Catalog plant with its care attributes.

    ``care_burden`` and ``care_notes`` are the two attributes the local
    scorer reads besides sunlight.
    """
    id: str = Field(..., description="Plant UUID")
    name: str = Field(..., description="Display name", examples=["Монстера"])
    scientific_name: str = Field(..., description="Scientific name", examples=["Monstera deliciosa"])
    description: str = Field("", description="Catalog description")
    image_url: Optional[str] = Field(None, description="Catalog image URL")
    price: Optional[float] = Field(None, description="Shop price, when sold")
    shop_id: Optional[str] = Field(None, description="Shop UUID, when sold")
    care_instructions: CareInstructions

    @property
    def sunlight(self) -> str:
        return self.care_instructions.sunlight

    @property
    def care_burden(self) -> int:
        return self.care_instructions.fertilizer_frequency

    @property
    def care_notes(self) -> str:
        return self.care_instructions.additional_notes or ""


class RecommendedPlant(Plant):
    """Catalog plant joined to its stored recommendation."""
    score: float = Field(..., description="Match score in [0, 1]", ge=0, le=1)
    reasoning: str = Field("", description="Why the plant matches the questionnaire")


class PlantListResponse(BaseModel):
    """Response for GET /plants."""
    plants: List[Plant] = Field(..., description="Catalog plants")
    count: int = Field(..., description="Number of plants returned")

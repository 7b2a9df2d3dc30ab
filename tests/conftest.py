"""
Pytest configuration for Planter backend tests.

Sets up test environment and global fixtures.
"""
import os
import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")
# No completion key: routes fall back to the local scorer unless a test patches the client
os.environ["YANDEX_GPT_API_KEY"] = ""
os.environ["COMPLETION_PROVIDER"] = "yandex"
# Keep the watering job out of app startup
os.environ["WATERING_CHECK_INTERVAL_SECONDS"] = "0"

from planter.schemas.plants import CareInstructions, Plant  # noqa: E402
from planter.schemas.recommendations import Questionnaire  # noqa: E402


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client for testing stores.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def make_plant():
    """Factory for catalog plants with the attributes the scorer reads."""
    def _make(
        plant_id: str = "plant-1",
        name: str = "Монстера",
        scientific_name: str = "Monstera deliciosa",
        sunlight: str = "MEDIUM",
        care_burden: int = 3,
        notes: str = "",
    ) -> Plant:
        return Plant(
            id=plant_id,
            name=name,
            scientific_name=scientific_name,
            care_instructions=CareInstructions(
                watering_frequency=7,
                sunlight=sunlight,
                fertilizer_frequency=care_burden,
                additional_notes=notes,
            ),
        )
    return _make


@pytest.fixture
def make_questionnaire():
    """Factory for stored questionnaires."""
    def _make(
        questionnaire_id: str = "q-1",
        sunlight: str = "MEDIUM",
        pet_friendly: bool = False,
        care_level: int = 3,
        location=None,
        additional=None,
    ) -> Questionnaire:
        return Questionnaire(
            id=questionnaire_id,
            user_id="user-1",
            sunlight_preference=sunlight,
            pet_friendly=pet_friendly,
            care_level=care_level,
            preferred_location=location,
            additional_preferences=additional,
        )
    return _make

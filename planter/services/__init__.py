"""
Service layer for Planter backend.

Contains the orchestration and persistence code that:
- Reads the plant catalog and writes questionnaires/recommendations under RLS
- Runs recommendation generation (completion backend first, local scorer as fallback)
- Manages chat sessions and their in-memory working sets
- Creates watering reminders for the background job

Services act as the glue between routes (HTTP layer) and agents/database.
"""

from .chat_service import ChatSessionManager, ChatWorkingSets, get_chat_working_sets
from .chat_store import ChatStore
from .completion_client import GeminiClient, YandexGPTClient, get_completion_client
from .notification_service import NotificationService, NotificationStore
from .plant_service import PlantCatalog
from .recommendation_service import RecommendationService, fold_detailed_preferences
from .recommendation_store import RecommendationStore

__all__ = [
    "ChatSessionManager",
    "ChatStore",
    "ChatWorkingSets",
    "GeminiClient",
    "NotificationService",
    "NotificationStore",
    "PlantCatalog",
    "RecommendationService",
    "RecommendationStore",
    "YandexGPTClient",
    "fold_detailed_preferences",
    "get_chat_working_sets",
    "get_completion_client",
]

"""
Recommendation System - pure building blocks

This package holds the I/O-free parts of the recommendation flow:
- prompts: recommendation prompt builder and chat system directive
- parser: free-text completion answer -> Recommendation records
- scoring: deterministic local scorer (also the fallback strategy)

The orchestration layer is in:
- planter/services/recommendation_service.py
"""

from planter.agents.recommendation.parser import parse_recommendations
from planter.agents.recommendation.prompts import (
    CHAT_SYSTEM_PROMPT,
    build_recommendation_prompt,
)
from planter.agents.recommendation.scoring import score_plant, score_plants

__all__ = [
    "CHAT_SYSTEM_PROMPT",
    "build_recommendation_prompt",
    "parse_recommendations",
    "score_plant",
    "score_plants",
]

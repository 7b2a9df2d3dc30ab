"""
AI Components for Planter Backend.

1. Recommendation System (prompt + parse, with local fallback)
   - Prompt builder, answer parser and local scorer live in
     planter/agents/recommendation/
   - The completion call itself goes through
     planter/services/completion_client.py

2. Chat assistant
   - Reuses the same completion client in message-history mode
   - System directive: planter.agents.recommendation.CHAT_SYSTEM_PROMPT
"""

from planter.agents.recommendation import (
    CHAT_SYSTEM_PROMPT,
    build_recommendation_prompt,
    parse_recommendations,
    score_plants,
)

__all__ = [
    "CHAT_SYSTEM_PROMPT",
    "build_recommendation_prompt",
    "parse_recommendations",
    "score_plants",
]

"""
Pydantic schemas for domain records and API request/response validation.

All FastAPI endpoints MUST use strict Pydantic models with explicit types.
Domain records (Questionnaire, Plant, Recommendation, ChatMessage) are the
same models the services pass around.
"""

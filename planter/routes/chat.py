"""
Plant-care chat assistant API endpoints.

Endpoints:
- POST /chat/sessions - Create a session
- GET /chat/sessions - List the user's sessions (most recently used first)
- GET /chat/sessions/{session_id} - Get one session
- POST /chat/sessions/{session_id}/messages - Send a message, get the assistant reply
- GET /chat/sessions/{session_id}/messages - Full history, oldest first

All endpoints require authentication. Ownership is enforced by
ChatSessionManager: another user's session answers 403 without saying
whether it exists.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, status
from supabase import Client

from planter.auth.dependencies import AuthenticatedUser, get_authenticated_user
from planter.db.client import get_supabase_client
from planter.schemas.chat import (
    ChatMessageListResponse,
    ChatMessageRequest,
    ChatMessageResponse,
    ChatSession,
    ChatSessionCreateRequest,
    ChatSessionListResponse,
)
from planter.services.chat_service import ChatSessionManager
from planter.services.chat_store import ChatStore
from planter.services.completion_client import get_completion_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def build_chat_manager(supabase_client: Client) -> ChatSessionManager:
    return ChatSessionManager(
        store=ChatStore(supabase_client),
        completion_client=get_completion_client(),
    )


@router.post(
    "/sessions",
    response_model=ChatSession,
    status_code=status.HTTP_201_CREATED,
    summary="Create chat session",
)
async def create_session(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    request: Optional[ChatSessionCreateRequest] = Body(None),
) -> ChatSession:
    manager = build_chat_manager(get_supabase_client(auth_user.access_token))
    return await manager.create_session(auth_user.user_id, request.title if request else None)


@router.get(
    "/sessions",
    response_model=ChatSessionListResponse,
    status_code=status.HTTP_200_OK,
    summary="List chat sessions",
)
async def list_sessions(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> ChatSessionListResponse:
    manager = build_chat_manager(get_supabase_client(auth_user.access_token))
    sessions = await manager.list_sessions(auth_user.user_id)

    logger.info(f"Returning {len(sessions)} chat sessions for user {auth_user.user_id}")
    return ChatSessionListResponse(sessions=sessions, count=len(sessions))


@router.get(
    "/sessions/{session_id}",
    response_model=ChatSession,
    status_code=status.HTTP_200_OK,
    summary="Get chat session",
)
async def get_session(
    session_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> ChatSession:
    manager = build_chat_manager(get_supabase_client(auth_user.access_token))
    return await manager.get_session(session_id, auth_user.user_id)


@router.post(
    "/sessions/{session_id}/messages",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a message to the plant assistant",
    description="""
    Persists the user message, asks the completion backend with the system
    directive and the last 10 turns, persists and returns the reply.

    **Errors:**
    - 403 when the session belongs to another user (nothing is persisted)
    - 502 when the completion backend fails; chat has no local fallback
    """
)
async def send_message(
    session_id: str,
    request: ChatMessageRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> ChatMessageResponse:
    logger.info(
        f"POST /chat/sessions/{session_id}/messages called by user_id={auth_user.user_id}, "
        f"message length {len(request.message)}"
    )

    manager = build_chat_manager(get_supabase_client(auth_user.access_token))
    reply = await manager.send_message(session_id, auth_user.user_id, request.message)

    return ChatMessageResponse(message=reply)


@router.get(
    "/sessions/{session_id}/messages",
    response_model=ChatMessageListResponse,
    status_code=status.HTTP_200_OK,
    summary="Get chat history",
)
async def get_messages(
    session_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> ChatMessageListResponse:
    manager = build_chat_manager(get_supabase_client(auth_user.access_token))
    messages = await manager.get_messages(session_id, auth_user.user_id)

    return ChatMessageListResponse(session_id=session_id, messages=messages, count=len(messages))

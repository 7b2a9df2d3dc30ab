"""
Pydantic schemas for the plant-care chat assistant.

ChatSession and ChatMessage mirror the chat_sessions / chat_messages
tables. CompletionMessage is the role-tagged entry sent to the completion
endpoint and kept in the per-session working set.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ChatRole = Literal["system", "user", "assistant"]


class CompletionMessage(BaseModel):
    """One entry of the message list sent to the completion endpoint."""
    model_config = ConfigDict(frozen=True)

    role: ChatRole
    text: str


class ChatSession(BaseModel):
    """Chat session owned by exactly one user."""
    id: str = Field(..., description="Session UUID")
    user_id: str = Field(..., description="Owner UUID")
    title: str = Field(..., description="Session title")
    created_at: str = Field(..., description="ISO-8601 creation timestamp")
    updated_at: str = Field(..., description="ISO-8601 update timestamp")
    last_used: str = Field(..., description="ISO-8601 timestamp of the latest turn")


class ChatMessage(BaseModel):
    """Persisted chat turn. Append-only."""
    id: str = Field(..., description="Message UUID")
    session_id: str = Field(..., description="Parent session UUID")
    user_id: str = Field(..., description="Session owner UUID")
    role: Literal["user", "assistant"] = Field(..., description="Turn author")
    content: str = Field(..., description="Turn text")
    created_at: str = Field(..., description="ISO-8601 creation timestamp")


class ChatSessionCreateRequest(BaseModel):
    """Optional body for POST /chat/sessions."""
    title: Optional[str] = Field(
        None,
        description="Session title; a default is used when omitted",
        max_length=255
    )


class ChatMessageRequest(BaseModel):
    """Request body for POST /chat/sessions/{session_id}/messages."""
    message: str = Field(
        ...,
        description="User question for the plant assistant",
        min_length=1,
        max_length=4000,
        examples=["Как часто поливать монстеру зимой?"]
    )


class ChatMessageResponse(BaseModel):
    """Assistant reply to a user message."""
    message: ChatMessage


class ChatSessionListResponse(BaseModel):
    """Response for GET /chat/sessions."""
    sessions: List[ChatSession]
    count: int


class ChatMessageListResponse(BaseModel):
    """Response for GET /chat/sessions/{session_id}/messages."""
    session_id: str
    messages: List[ChatMessage]
    count: int

"""
Chat session and message persistence.

chat_messages is append-only and read back in creation order; it is the
authoritative history the chat working set is rebuilt from.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, cast

from supabase import Client

from planter.schemas.chat import ChatMessage, ChatSession
from planter.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def _as_str(v: Any) -> str:
    """Helper to coerce DB values to strings."""
    return str(v) if v is not None else ""


def _row_to_session(row: Dict[str, Any]) -> ChatSession:
    return ChatSession(
        id=_as_str(row.get("id")),
        user_id=_as_str(row.get("user_id")),
        title=_as_str(row.get("title")),
        created_at=_as_str(row.get("created_at")),
        updated_at=_as_str(row.get("updated_at")),
        last_used=_as_str(row.get("last_used")),
    )


def _row_to_message(row: Dict[str, Any]) -> ChatMessage:
    return ChatMessage(
        id=_as_str(row.get("id")),
        session_id=_as_str(row.get("session_id")),
        user_id=_as_str(row.get("user_id")),
        role=row["role"],
        content=_as_str(row.get("content")),
        created_at=_as_str(row.get("created_at")),
    )


class ChatStore:
    """Persistence for chat_sessions and chat_messages."""

    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    async def create_session(self, user_id: str, title: str) -> ChatSession:
        """
        Insert a new chat session.

        Raises:
            Exception: If the insert returns no row
        """
        result = (
            self.client.table("chat_sessions")
            .insert({"user_id": user_id, "title": title})
            .execute()
        )

        if not result.data:
            logger.error(f"Chat session insert returned no data for user {user_id}")
            raise Exception("Failed to create chat session")

        return _row_to_session(cast(Dict[str, Any], result.data[0]))

    async def get_session(self, session_id: str) -> ChatSession:
        """
        Fetch a chat session by ID.

        Raises:
            NotFoundError: If the session does not exist
        """
        result = (
            self.client.table("chat_sessions")
            .select("*")
            .eq("id", session_id)
            .execute()
        )

        if not result.data:
            logger.warning(f"Chat session {session_id} not found")
            raise NotFoundError("Chat session", session_id)

        return _row_to_session(cast(Dict[str, Any], result.data[0]))

    async def list_sessions(self, user_id: str) -> List[ChatSession]:
        """Sessions owned by the user, most recently used first."""
        result = (
            self.client.table("chat_sessions")
            .select("*")
            .eq("user_id", user_id)
            .order("last_used", desc=True)
            .execute()
        )

        rows = cast(List[Dict[str, Any]], result.data or [])
        return [_row_to_session(row) for row in rows]

    async def save_message(self, session_id: str, user_id: str, role: str, content: str) -> ChatMessage:
        """
        Append a turn to a session.

        Raises:
            Exception: If the insert returns no row
        """
        result = (
            self.client.table("chat_messages")
            .insert({
                "session_id": session_id,
                "user_id": user_id,
                "role": role,
                "content": content,
            })
            .execute()
        )

        if not result.data:
            logger.error(f"Chat message insert returned no data for session {session_id}")
            raise Exception("Failed to save chat message")

        return _row_to_message(cast(Dict[str, Any], result.data[0]))

    async def list_messages(self, session_id: str) -> List[ChatMessage]:
        """All persisted turns of a session in creation order."""
        result = (
            self.client.table("chat_messages")
            .select("*")
            .eq("session_id", session_id)
            .order("created_at", desc=False)
            .execute()
        )

        rows = cast(List[Dict[str, Any]], result.data or [])
        return [_row_to_message(row) for row in rows]

    async def touch_session(self, session_id: str) -> None:
        """Bump last_used (and updated_at) to now."""
        now = datetime.now(timezone.utc).isoformat()
        (
            self.client.table("chat_sessions")
            .update({"last_used": now, "updated_at": now})
            .eq("id", session_id)
            .execute()
        )

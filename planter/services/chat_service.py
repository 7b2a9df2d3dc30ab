"""
Chat Service - plant-care assistant sessions

Two pieces:
- ChatWorkingSets: in-memory, per-session message lists (system directive +
  recent turns) with a per-session lock. A cache only: any entry can be
  dropped and is rebuilt from CHAT_SYSTEM_PROMPT and the persisted turns.
- ChatSessionManager: ownership checks, turn persistence and the completion
  call in message-history mode.

Context sent per request:
    [system directive] + last CHAT_CONTEXT_WINDOW persisted turns + [new user message]

The new user message is also among the persisted turns; it is appended
explicitly so it is present regardless of read-after-write timing.

Chat has no local fallback: GenerationError subclasses reach the caller.
"""

import logging
from collections import OrderedDict
from typing import List, Optional, Sequence

from planter.agents.recommendation.prompts import CHAT_SYSTEM_PROMPT
from planter.schemas.chat import ChatMessage, ChatSession, CompletionMessage
from planter.services.chat_store import ChatStore
from planter.services.completion_client import CompletionClient
from planter.utils.constants import (
    CHAT_CONTEXT_WINDOW,
    CHAT_ROLES,
    DEFAULT_CHAT_TITLE,
    MAX_CACHED_CHAT_SESSIONS,
)
from planter.utils.exceptions import (
    AuthorizationError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from planter.utils.locks import KeyedLock

logger = logging.getLogger(__name__)


class ChatWorkingSets:
    """Bounded LRU map of session id -> message list, plus per-session locks."""

    def __init__(self, max_sessions: int = MAX_CACHED_CHAT_SESSIONS):
        self.max_sessions = max_sessions
        self.locks = KeyedLock()
        self._sets: "OrderedDict[str, List[CompletionMessage]]" = OrderedDict()

    def seed(self, session_id: str, system_prompt: str = CHAT_SYSTEM_PROMPT) -> None:
        """Start a session's working set with only the system directive."""
        self.put(session_id, [CompletionMessage(role="system", text=system_prompt)])

    def get(self, session_id: str) -> Optional[List[CompletionMessage]]:
        messages = self._sets.get(session_id)
        if messages is None:
            return None
        self._sets.move_to_end(session_id)
        return list(messages)

    def put(self, session_id: str, messages: Sequence[CompletionMessage]) -> None:
        self._sets[session_id] = list(messages)
        self._sets.move_to_end(session_id)
        while len(self._sets) > self.max_sessions:
            evicted, _ = self._sets.popitem(last=False)
            logger.debug(f"Evicted chat working set for session {evicted}")

    def discard(self, session_id: str) -> None:
        self._sets.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sets

    def __len__(self) -> int:
        return len(self._sets)


# Process-wide working sets shared by all requests
_working_sets: Optional[ChatWorkingSets] = None


def get_chat_working_sets() -> ChatWorkingSets:
    global _working_sets

    if _working_sets is None:
        _working_sets = ChatWorkingSets()

    return _working_sets


def _to_completion_messages(turns: Sequence[ChatMessage]) -> List[CompletionMessage]:
    return [CompletionMessage(role=turn.role, text=turn.content) for turn in turns]


class ChatSessionManager:
    """Session lifecycle and message exchange with the completion backend."""

    def __init__(
        self,
        store: ChatStore,
        completion_client: Optional[CompletionClient],
        working_sets: Optional[ChatWorkingSets] = None,
    ):
        self.store = store
        self.completion_client = completion_client
        self.working_sets = working_sets if working_sets is not None else get_chat_working_sets()

    async def create_session(self, user_id: str, title: Optional[str] = None) -> ChatSession:
        """Persist a new session and seed its working set."""
        session = await self.store.create_session(user_id, (title or "").strip() or DEFAULT_CHAT_TITLE)
        self.working_sets.seed(session.id)

        logger.info(f"Chat session {session.id} created for user {user_id}")
        return session

    async def get_session(self, session_id: str, user_id: str) -> ChatSession:
        """
        Fetch a session owned by the user.

        An unknown session and another user's session fail the same way, so
        the response does not reveal which session ids exist.

        Raises:
            AuthorizationError: If the session does not exist or belongs to
                someone else
        """
        try:
            session = await self.store.get_session(session_id)
        except NotFoundError as e:
            logger.warning(f"User {user_id} attempted to access unknown chat session {session_id}")
            raise AuthorizationError() from e

        if session.user_id != user_id:
            logger.warning(f"User {user_id} attempted to access chat session {session_id} of another user")
            raise AuthorizationError()

        return session

    async def list_sessions(self, user_id: str) -> List[ChatSession]:
        return await self.store.list_sessions(user_id)

    async def get_messages(self, session_id: str, user_id: str) -> List[ChatMessage]:
        """All persisted turns of an owned session, oldest first."""
        await self.get_session(session_id, user_id)
        return await self.store.list_messages(session_id)

    def build_context(
        self,
        session_id: str,
        turns: Sequence[ChatMessage],
        text: str,
    ) -> List[CompletionMessage]:
        """System directive, the last CHAT_CONTEXT_WINDOW turns, then the new message."""
        cached = self.working_sets.get(session_id)
        if cached and cached[0].role == CHAT_ROLES['SYSTEM']:
            system = cached[0]
        else:
            system = CompletionMessage(role="system", text=CHAT_SYSTEM_PROMPT)

        recent = list(turns)[-CHAT_CONTEXT_WINDOW:]

        return (
            [system]
            + _to_completion_messages(recent)
            + [CompletionMessage(role="user", text=text)]
        )

    async def send_message(self, session_id: str, user_id: str, text: str) -> ChatMessage:
        """
        Exchange one user message for an assistant reply.

        Turns of one session are processed one at a time; different
        sessions proceed concurrently.

        Raises:
            ValidationError: If the message is blank
            AuthorizationError: If the session is unknown or belongs to someone else
            GenerationError: If the completion call fails (no fallback)
        """
        text = text.strip()
        if not text:
            raise ValidationError("Message must not be empty", field="message")

        await self.get_session(session_id, user_id)

        if self.completion_client is None:
            raise ExternalServiceError("Chat assistant is not configured")

        async with self.working_sets.locks.hold(session_id):
            await self.store.save_message(session_id, user_id, CHAT_ROLES['USER'], text)

            turns = await self.store.list_messages(session_id)
            messages = self.build_context(session_id, turns, text)

            logger.info(
                f"Sending chat context for session {session_id}: "
                f"{len(messages)} messages, new message length {len(text)}"
            )

            reply = await self.completion_client.complete(messages)

            assistant_turn = await self.store.save_message(
                session_id, user_id, CHAT_ROLES['ASSISTANT'], reply
            )

            history = list(turns) + [assistant_turn]
            self.working_sets.put(
                session_id,
                [messages[0]] + _to_completion_messages(history[-CHAT_CONTEXT_WINDOW:]),
            )

            await self.store.touch_session(session_id)

        logger.info(f"Chat session {session_id}: assistant reply persisted (length {len(reply)})")
        return assistant_turn

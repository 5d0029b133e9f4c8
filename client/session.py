"""
Coaching session: conversation state, system prompt construction and streamed replies.
"""
from typing import Callable, Optional
from urllib.parse import quote

from client.chat_client import ChatClient
from client.history_store import ChatHistoryStore
from models.api_models import Message, UserContext
from utils.constants import (
    COACH_SYSTEM_PROMPT,
    CONNECTION_ERROR_MESSAGE,
    CV_CONTEXT_TEMPLATE,
    EMPTY_DOCUMENT_SENTINEL,
    USER_CONTEXT_TEMPLATE,
    ProfileDefaults
)
from utils.logger import client_logger

DocumentExtractor = Callable[[bytes], str]


def build_system_prompt(context: Optional[UserContext], cv_text: Optional[str] = None) -> str:
    """Career coach system prompt embedding the user's profile and CV text."""
    context = context or UserContext()

    user_context = USER_CONTEXT_TEMPLATE.format(
        name=context.name or ProfileDefaults.NAME,
        role=context.role or ProfileDefaults.ROLE,
        goal=context.goal or ProfileDefaults.GOAL,
        experience=context.experience or ProfileDefaults.EXPERIENCE
    )
    if cv_text:
        user_context += CV_CONTEXT_TEMPLATE.format(cv_text=cv_text)

    return COACH_SYSTEM_PROMPT.format(
        user_context=user_context,
        role=context.role or ProfileDefaults.ROLE,
        role_query=quote(context.role or ProfileDefaults.ROLE_QUERY, safe="")
    )


def build_api_messages(history: list[Message], user_message: str, system_prompt: str) -> list[Message]:
    """
    Messages to send upstream: system prompt first, then the history.

    The user message is appended unless it already ends the history.
    Empty and whitespace-only entries are dropped, the upstream rejects them.
    """
    history_messages = [Message(role=m.role, content=m.content) for m in history]

    last = history_messages[-1] if history_messages else None
    if not (last and last.role == "user" and last.content == user_message):
        history_messages.append(Message(role="user", content=user_message))

    return [Message(role="system", content=system_prompt)] + [
        m for m in history_messages if m.has_content()
    ]


class CoachSession:
    """One user's coaching conversation, persisted through a ChatHistoryStore."""

    def __init__(self, client: ChatClient, store: ChatHistoryStore):
        self.client = client
        self.store = store
        self.messages = store.load_messages()
        self.user_context = store.load_user_context()
        self.cv_text: Optional[str] = None

    @property
    def needs_onboarding(self) -> bool:
        return self.user_context is None

    def set_user_context(self, context: Optional[UserContext]) -> None:
        self.user_context = context
        self.store.save_user_context(context)

    def attach_document(self, name: str, data: bytes, extractor: DocumentExtractor) -> str:
        """
        Extract text from an uploaded document and keep it as CV context.

        Args:
            name: File name, used in the empty-content sentinel
            data: Raw document bytes
            extractor: External text extraction capability

        Returns:
            The text that will be sent as CV content
        """
        text = (extractor(data) or "").strip()
        self.cv_text = text or EMPTY_DOCUMENT_SENTINEL.format(name=name)
        client_logger.info(f"Attached document '{name}' ({len(text)} characters extracted)")
        return self.cv_text

    async def send(self, user_message: str, on_chunk: Optional[Callable[[str], None]] = None) -> Optional[str]:
        """
        Send a user message and stream the assistant reply into the transcript.

        Returns:
            The full reply, or None when the request failed
        """
        user_message = user_message.strip()
        if not user_message:
            return None

        history = self.messages + [Message(role="user", content=user_message)]
        api_messages = build_api_messages(
            history,
            user_message,
            build_system_prompt(self.user_context, self.cv_text)
        )

        placeholder = Message(role="assistant", content="")
        self.messages = history + [placeholder]

        def handle_chunk(chunk: str) -> None:
            placeholder.content += chunk
            if on_chunk is not None:
                on_chunk(chunk)

        try:
            reply = await self.client.stream_chat(api_messages, handle_chunk)
        except Exception as e:
            client_logger.error(f"Coach reply failed: {e}")
            self.messages[-1] = Message(
                role="assistant",
                content=CONNECTION_ERROR_MESSAGE.format(detail=str(e) or type(e).__name__)
            )
            return None
        finally:
            self.store.save_messages(self.messages)

        return reply

    def reset(self) -> None:
        """Wipe persisted state and start over with the greeting."""
        self.messages = self.store.reset()
        self.user_context = None
        self.cv_text = None

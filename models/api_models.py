"""
Pydantic data models for API requests and responses.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field
from config import Config


class Message(BaseModel):
    """Chat message model."""
    role: Literal["system", "user", "assistant"]
    content: str

    def has_content(self) -> bool:
        """True when the content is not empty or whitespace-only."""
        return bool(self.content and self.content.strip())


class ChatRequest(BaseModel):
    """Inbound proxy request. `stream` selects the response mode per request."""
    messages: List[Message] = Field(..., min_length=1)
    model: Optional[str] = None
    stream: Optional[bool] = None

    def wants_stream(self) -> bool:
        return Config.DEFAULT_STREAM if self.stream is None else self.stream


class CompletionRequest(BaseModel):
    """Body sent to the upstream chat completions endpoint."""
    model: str = Field(default_factory=lambda: Config.DEFAULT_MODEL)
    messages: List[Message]
    temperature: float = Config.TEMPERATURE
    max_tokens: int = Config.MAX_TOKENS
    stream: bool = False

    @classmethod
    def from_chat_request(cls, request: ChatRequest, stream: bool) -> "CompletionRequest":
        """Build the upstream body, defaulting the model when the caller omits it."""
        return cls(
            model=request.model or Config.DEFAULT_MODEL,
            messages=request.messages,
            stream=stream
        )

    def to_payload(self) -> dict:
        return self.model_dump()


class UserContext(BaseModel):
    """Profile captured during onboarding."""
    name: Optional[str] = None
    role: Optional[str] = None
    experience: Optional[str] = None
    goal: Optional[str] = None

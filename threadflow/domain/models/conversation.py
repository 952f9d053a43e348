from typing import Annotated, Awaitable, Callable, List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, timezone
from enum import Enum


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    """Chat message roles"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class TextPart(BaseModel):
    """Text segment of a multimodal message"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel):
    """Image segment of a multimodal message"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["image"] = "image"
    image_ref: str = Field(description="Image URL or data URL")
    mime_type: Optional[str] = None


ContentPart = Annotated[Union[TextPart, ImagePart], Field(discriminator="kind")]
MessageContent = Union[str, Tuple[ContentPart, ...]]


class ChatMessage(BaseModel):
    """A single conversation turn. Replace, don't edit."""
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: MessageContent

    @classmethod
    def system(cls, content: MessageContent) -> "ChatMessage":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: MessageContent) -> "ChatMessage":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: MessageContent) -> "ChatMessage":
        return cls(role=MessageRole.ASSISTANT, content=content)

    @property
    def is_system(self) -> bool:
        return self.role == MessageRole.SYSTEM

    @property
    def text(self) -> str:
        """Plain-text rendering of the content"""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(part.text for part in self.content if isinstance(part, TextPart))


class ConversationContext(BaseModel):
    """Snapshot of conversation history passed between nodes"""
    model_config = ConfigDict(frozen=True)

    messages: List[ChatMessage] = Field(default_factory=list)
    thread_id: Optional[str] = Field(None, description="Authoritative thread this context belongs to")
    session_id: Optional[str] = Field(None, description="Grouping identifier, not load-bearing")

    @classmethod
    def empty(cls) -> "ConversationContext":
        return cls()

    def with_thread(self, thread_id: Optional[str]) -> "ConversationContext":
        return self.model_copy(update={"thread_id": thread_id})

    @property
    def system_message_count(self) -> int:
        return sum(1 for message in self.messages if message.is_system)


class Thread(BaseModel):
    """Authoritative conversation record owned by the thread store"""
    thread_id: str
    session_id: str
    created_at: datetime = Field(default_factory=utc_now)
    last_message_at: datetime = Field(default_factory=utc_now)
    messages: List[ChatMessage] = Field(default_factory=list)
    brand_voice_injected: bool = Field(False, frozen=True)

    def to_context(self) -> ConversationContext:
        return ConversationContext(
            messages=list(self.messages),
            thread_id=self.thread_id,
            session_id=self.session_id
        )

    def to_info(self) -> "ThreadInfo":
        return ThreadInfo(
            thread_id=self.thread_id,
            session_id=self.session_id,
            created_at=self.created_at,
            last_message_at=self.last_message_at,
            message_count=len(self.messages),
            brand_voice_injected=self.brand_voice_injected
        )


class ThreadInfo(BaseModel):
    """Read-only thread summary"""
    model_config = ConfigDict(frozen=True)

    thread_id: str
    session_id: str
    created_at: datetime
    last_message_at: datetime
    message_count: int
    brand_voice_injected: bool


class GeneratedResponse(BaseModel):
    """Result of an AI provider call"""
    content: str
    context: ConversationContext = Field(default_factory=ConversationContext)


class NodeOutput(BaseModel):
    """What a prompt node emits to its downstream connections"""
    node_id: str
    content: str
    context: ConversationContext
    type: Literal["text"] = "text"


# generate_response(prompt, system_prompt, context)
ResponseGenerator = Callable[
    [str, Optional[str], ConversationContext],
    Awaitable[GeneratedResponse]
]

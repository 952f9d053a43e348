from .conversation import (
    MessageRole,
    TextPart,
    ImagePart,
    ContentPart,
    MessageContent,
    ChatMessage,
    ConversationContext,
    Thread,
    ThreadInfo,
    GeneratedResponse,
    NodeOutput,
    ResponseGenerator,
)
from .file_context import FileContext

__all__ = [
    "MessageRole",
    "TextPart",
    "ImagePart",
    "ContentPart",
    "MessageContent",
    "ChatMessage",
    "ConversationContext",
    "Thread",
    "ThreadInfo",
    "GeneratedResponse",
    "NodeOutput",
    "ResponseGenerator",
    "FileContext",
]

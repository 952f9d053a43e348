"""Conversation thread and context management for chained AI-prompt nodes."""

from threadflow.domain.models import (
    MessageRole,
    TextPart,
    ImagePart,
    ChatMessage,
    ConversationContext,
    Thread,
    ThreadInfo,
    GeneratedResponse,
    NodeOutput,
    FileContext,
)
from threadflow.domain.exceptions import (
    ThreadEngineError,
    SystemMessageInjectionError,
    EmptyPromptError,
)
from threadflow.domain.context import (
    window_messages,
    PersonaInjector,
    ThreadStore,
    ContextMergeEngine,
    NodeStateManager,
)
from threadflow.domain.orchestration.thread_lifecycle import ThreadLifecycleController
from threadflow.domain.orchestration.node_executor import NodeExecutor
from threadflow.infrastructure.config import EngineSettings
from threadflow.application.engine import ThreadEngine, build_engine

__version__ = "0.1.0"

__all__ = [
    "MessageRole",
    "TextPart",
    "ImagePart",
    "ChatMessage",
    "ConversationContext",
    "Thread",
    "ThreadInfo",
    "GeneratedResponse",
    "NodeOutput",
    "FileContext",
    "ThreadEngineError",
    "SystemMessageInjectionError",
    "EmptyPromptError",
    "window_messages",
    "PersonaInjector",
    "ThreadStore",
    "ContextMergeEngine",
    "NodeStateManager",
    "ThreadLifecycleController",
    "NodeExecutor",
    "EngineSettings",
    "ThreadEngine",
    "build_engine",
]

"""
Pytest configuration and fixtures for all tests.

Provides isolated engine components per test and a scripted response generator.
"""

from typing import List, Optional, Tuple

import pytest

from threadflow.domain.context.context_merger import ContextMergeEngine
from threadflow.domain.context.memory.thread_store import ThreadStore
from threadflow.domain.models.conversation import ConversationContext, GeneratedResponse
from threadflow.domain.orchestration.node_executor import NodeExecutor
from threadflow.domain.orchestration.thread_lifecycle import ThreadLifecycleController


class ScriptedGenerator:
    """Stands in for the AI provider; records every call."""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.replies = list(replies or [])
        self.error = error
        self.calls: List[Tuple[str, Optional[str], ConversationContext]] = []

    async def __call__(self, prompt, system_prompt, context):
        self.calls.append((prompt, system_prompt, context))
        if self.error is not None:
            raise self.error
        content = self.replies.pop(0) if self.replies else f"reply {len(self.calls)}"
        return GeneratedResponse(content=content, context=context)


@pytest.fixture
def store():
    return ThreadStore(max_messages=20)


@pytest.fixture
def lifecycle(store):
    return ThreadLifecycleController(store=store)


@pytest.fixture
def merger():
    return ContextMergeEngine()


@pytest.fixture
def executor(lifecycle, merger):
    return NodeExecutor(lifecycle, merger=merger)


@pytest.fixture
def generator():
    return ScriptedGenerator()


@pytest.fixture
def scripted():
    return ScriptedGenerator

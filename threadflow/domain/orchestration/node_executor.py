from typing import List, Optional, Sequence
import structlog

from threadflow.domain.models.conversation import (
    ChatMessage, ConversationContext, NodeOutput, ResponseGenerator
)
from threadflow.domain.models.file_context import FileContext
from threadflow.domain.context.context_merger import ContextMergeEngine
from threadflow.domain.context.file_context_builder import (
    build_enhanced_prompt, file_contexts_to_messages
)
from threadflow.domain.context.state.node_state_manager import NodeStateManager
from threadflow.domain.context.windowing import window_messages
from threadflow.domain.exceptions import EmptyPromptError
from threadflow.domain.orchestration.thread_lifecycle import ThreadLifecycleController

logger = structlog.get_logger(__name__)


class NodeExecutor:
    """Runs one conversational turn for a prompt node.

    Entry nodes always open a new thread (with the persona). Continuation
    nodes write to the thread resolved from their own previous run or from
    upstream. The persona lives in thread history, so the AI capability is
    always called with ``system_prompt=None``.
    """

    def __init__(
        self,
        lifecycle: ThreadLifecycleController,
        merger: Optional[ContextMergeEngine] = None,
        node_states: Optional[NodeStateManager] = None,
        max_prompt_length: int = 50000
    ):
        self.lifecycle = lifecycle
        self.merger = merger or ContextMergeEngine()
        self.node_states = node_states or NodeStateManager(self.merger)
        self.max_prompt_length = max_prompt_length

    def sanitize_prompt(self, prompt: Optional[str]) -> str:
        if not prompt:
            return ""
        return prompt.strip()[:self.max_prompt_length]

    async def execute_prompt(
        self,
        node_id: str,
        prompt: str,
        generate_response: ResponseGenerator,
        *,
        upstream: Optional[Sequence[Optional[ConversationContext]]] = None,
        is_entry: bool = False,
        persona: Optional[str] = None,
        file_contexts: Sequence[FileContext] = ()
    ) -> NodeOutput:
        """Execute a prompt node and return what it emits downstream.

        ``upstream`` defaults to the input the node accumulated through
        ``NodeStateManager.receive_input``. If ``generate_response`` raises,
        nothing is appended and the error propagates.
        """

        with structlog.contextvars.bound_contextvars(node_id=node_id):
            sanitized = self.sanitize_prompt(prompt)
            if not sanitized:
                raise EmptyPromptError(node_id)

            state = await self.node_states.get_state(node_id)
            if upstream is None:
                upstream = [state.input_context] if state.input_context else []
            sources = [context for context in upstream if context is not None]

            thread_id = await self._resolve_thread(sources, state.thread_id, is_entry, persona)
            thread_context = await self.lifecycle.get_thread_context(thread_id)
            if thread_context is None:
                logger.warning("Resolved thread is gone, next append starts a new one", thread_id=thread_id)
                thread_context = ConversationContext.empty()

            cap = self.lifecycle.store.max_messages
            messages: List[ChatMessage] = list(thread_context.messages)
            messages.extend(self.merger.foreign_messages(sources, thread_id))
            messages.extend(file_contexts_to_messages(file_contexts))
            call_context = ConversationContext(
                messages=window_messages(messages, cap),
                thread_id=thread_id,
                session_id=thread_context.session_id
            )

            call_prompt = build_enhanced_prompt(sanitized, file_contexts) if file_contexts else sanitized
            logger.info(
                "Calling response generator",
                thread_id=thread_id,
                context_messages=len(call_context.messages),
                is_entry=is_entry
            )
            response = await generate_response(call_prompt, None, call_context)

            user_message = ChatMessage.user(sanitized)
            assistant_message = ChatMessage.assistant(response.content)
            written = await self.lifecycle.append_message(thread_id, user_message)
            written = await self.lifecycle.append_message(written.thread_id, assistant_message)
            thread_id = written.thread_id
            await self.node_states.adopt_thread(node_id, thread_id)

            output_context = ConversationContext(
                messages=window_messages(
                    list(call_context.messages) + [user_message, assistant_message], cap
                ),
                thread_id=thread_id,
                session_id=written.session_id
            )
            return NodeOutput(node_id=node_id, content=response.content, context=output_context)

    async def _resolve_thread(
        self,
        sources: Sequence[ConversationContext],
        adopted_thread_id: Optional[str],
        is_entry: bool,
        persona: Optional[str]
    ) -> str:
        if is_entry:
            thread_id = await self.lifecycle.create_thread(persona)
            logger.debug("Entry node opened thread", thread_id=thread_id)
            return thread_id

        merged = self.merger.merge(sources, adopted_thread_id=adopted_thread_id)
        if merged.thread_id:
            logger.debug("Continuing thread", thread_id=merged.thread_id)
            return merged.thread_id

        thread_id = await self.lifecycle.create_thread(persona)
        logger.debug("No upstream thread, opened a new one", thread_id=thread_id)
        return thread_id

    def forward(self, context: Optional[ConversationContext]) -> Optional[ConversationContext]:
        """Pass-through for display nodes: the context goes downstream unchanged"""
        return context

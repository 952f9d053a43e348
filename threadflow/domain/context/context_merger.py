from typing import List, Optional, Sequence

from threadflow.domain.models.conversation import ChatMessage, ConversationContext
from threadflow.infrastructure.observability.logging import ThreadLogger


class ContextMergeEngine:
    """Combines upstream contexts into the single view a node consumes.

    Thread resolution is "first wins": the node's own adopted thread, then
    the first upstream thread id in declared connection order. Messages are
    concatenated in the same order, never reordered or deduplicated.
    """

    def __init__(self, thread_logger: Optional[ThreadLogger] = None):
        self.thread_logger = thread_logger or ThreadLogger(__name__)

    def merge(
        self,
        upstream: Sequence[Optional[ConversationContext]],
        adopted_thread_id: Optional[str] = None
    ) -> ConversationContext:
        """Merge upstream contexts, resolving the thread id.

        A ``thread_id`` of None on the result means a thread still has to be
        created.
        """

        sources = [context for context in upstream if context is not None]

        messages: List[ChatMessage] = []
        for context in sources:
            messages.extend(context.messages)

        upstream_thread_ids: List[str] = []
        for context in sources:
            if context.thread_id and context.thread_id not in upstream_thread_ids:
                upstream_thread_ids.append(context.thread_id)

        if adopted_thread_id:
            thread_id: Optional[str] = adopted_thread_id
        elif upstream_thread_ids:
            thread_id = upstream_thread_ids[0]
        else:
            thread_id = None

        # Upstream threads whose identity is dropped; their messages are kept
        discarded = [tid for tid in upstream_thread_ids if tid != thread_id]

        self.thread_logger.log_context_merge(
            resolved_thread_id=thread_id,
            source_count=len(sources),
            message_count=len(messages),
            discarded_thread_ids=discarded
        )

        return ConversationContext(
            messages=messages,
            thread_id=thread_id,
            session_id=self._resolve_session_id(sources, thread_id)
        )

    def accumulate(
        self,
        previous: Optional[ConversationContext],
        incoming: Optional[ConversationContext]
    ) -> Optional[ConversationContext]:
        """Fold one newly delivered upstream context into what a node already holds"""

        if incoming is None:
            return previous
        if previous is None:
            return incoming
        return self.merge([previous, incoming])

    def foreign_messages(
        self,
        upstream: Sequence[Optional[ConversationContext]],
        thread_id: Optional[str]
    ) -> List[ChatMessage]:
        """Messages from upstream contexts that do not belong to ``thread_id``.

        Another thread's persona is left out: the resolved thread carries its
        own, and only one system message may lead a call context.
        """

        messages: List[ChatMessage] = []
        dropped = 0
        for context in upstream:
            if context is None:
                continue
            if thread_id and context.thread_id == thread_id:
                continue
            for message in context.messages:
                if message.is_system:
                    dropped += 1
                    continue
                messages.append(message)

        if dropped:
            self.thread_logger.logger.debug(
                "Dropped foreign persona messages", thread_id=thread_id, dropped=dropped
            )
        return messages

    @staticmethod
    def _resolve_session_id(
        sources: Sequence[ConversationContext],
        thread_id: Optional[str]
    ) -> Optional[str]:
        for context in sources:
            if thread_id and context.thread_id == thread_id and context.session_id:
                return context.session_id
        for context in sources:
            if context.session_id:
                return context.session_id
        return None

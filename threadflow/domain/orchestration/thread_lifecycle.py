from typing import Optional
import structlog

from threadflow.domain.models.conversation import ChatMessage, ConversationContext, ThreadInfo
from threadflow.domain.context.memory.thread_store import ThreadStore
from threadflow.domain.context.persona import PersonaInjector
from threadflow.domain.exceptions import SystemMessageInjectionError
from threadflow.infrastructure.observability.logging import ThreadLogger

logger = structlog.get_logger(__name__)


class ThreadLifecycleController:
    """Public API for creating, extending and discarding conversation threads.

    Per thread: NONE -> CREATED -> (APPENDING)* -> RESET. Whether the
    persona was injected is fixed at CREATED; nothing after that adds a
    system message.
    """

    def __init__(
        self,
        store: Optional[ThreadStore] = None,
        persona_injector: Optional[PersonaInjector] = None,
        thread_logger: Optional[ThreadLogger] = None
    ):
        self.store = store or ThreadStore()
        self.persona_injector = persona_injector or PersonaInjector()
        self.thread_logger = thread_logger or ThreadLogger(__name__)
        self._current_thread_id: Optional[str] = None

    @property
    def current_thread_id(self) -> Optional[str]:
        """Most recently created (or explicitly selected) thread"""
        return self._current_thread_id

    def set_current_thread_id(self, thread_id: Optional[str]):
        self._current_thread_id = thread_id

    async def create_thread(
        self,
        persona: Optional[str] = None,
        initial_user_message: Optional[str] = None
    ) -> str:
        """Start a new thread, prepending the persona as a system message if given"""

        initial = self.persona_injector.initial_messages(persona, initial_user_message)
        thread_id = await self.store.create(
            initial.messages,
            brand_voice_injected=initial.brand_voice_injected
        )
        self._current_thread_id = thread_id

        self.thread_logger.log_thread_event(
            "created",
            thread_id,
            data={
                "brand_voice_injected": initial.brand_voice_injected,
                "message_count": len(initial.messages)
            }
        )
        return thread_id

    async def append_message(self, thread_id: str, message: ChatMessage) -> ConversationContext:
        """Append a message to a thread.

        An unknown ``thread_id`` starts a fresh thread seeded with ``message``;
        the returned context carries the id actually written to.
        """

        if message.is_system:
            raise SystemMessageInjectionError(thread_id)

        thread = await self.store.append(thread_id, message)
        if thread is not None:
            return thread.to_context()

        new_thread_id = await self.store.create([message])
        self._current_thread_id = new_thread_id
        self.thread_logger.log_self_heal(
            missing_thread_id=thread_id,
            new_thread_id=new_thread_id,
            role=message.role.value
        )

        healed = await self.store.get(new_thread_id)
        if healed is None:
            # Reset by a concurrent caller between create and read
            return ConversationContext(messages=[message], thread_id=new_thread_id)
        return healed.to_context()

    async def get_thread_context(self, thread_id: str) -> Optional[ConversationContext]:
        """Fresh copy of a thread's history, or None if the thread is unknown"""

        thread = await self.store.get(thread_id)
        if thread is None:
            logger.warning("Thread not found", thread_id=thread_id)
            return None
        return thread.to_context()

    async def get_thread_info(self, thread_id: str) -> Optional[ThreadInfo]:
        thread = await self.store.get(thread_id)
        return thread.to_info() if thread else None

    async def has_brand_voice_injected(self, thread_id: str) -> bool:
        thread = await self.store.get(thread_id)
        return thread.brand_voice_injected if thread else False

    async def reset_thread(self, thread_id: str):
        """Discard a thread. Unknown ids are ignored."""

        removed = await self.store.remove(thread_id)
        if self._current_thread_id == thread_id:
            self._current_thread_id = None

        self.thread_logger.log_thread_event("reset", thread_id, data={"existed": removed})

    async def clear_all_threads(self):
        """Discard every thread"""

        count = await self.store.clear()
        self._current_thread_id = None

        logger.info("Cleared all threads", thread_count=count)

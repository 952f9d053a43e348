from typing import Dict, List, Optional, Sequence
import asyncio
import secrets
import string
import time
import structlog

from threadflow.domain.models.conversation import ChatMessage, Thread, utc_now
from threadflow.domain.context.windowing import window_messages

logger = structlog.get_logger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


class ThreadStore:
    """Keyed in-memory storage of thread records for the process lifetime"""

    def __init__(self, max_messages: int = 20):
        if max_messages < 1:
            raise ValueError(f"max_messages must be at least 1, got {max_messages}")
        self.max_messages = max_messages
        self.threads: Dict[str, Thread] = {}
        self._lock = asyncio.Lock()

    def _generate_thread_id(self) -> str:
        while True:
            suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
            thread_id = f"thread_{int(time.time() * 1000)}_{suffix}"
            if thread_id not in self.threads:
                return thread_id

    async def create(
        self,
        initial_messages: Sequence[ChatMessage],
        brand_voice_injected: bool = False
    ) -> str:
        """Store a new thread and return its id"""

        async with self._lock:
            thread_id = self._generate_thread_id()
            now = utc_now()
            messages = window_messages(
                [message.model_copy(deep=True) for message in initial_messages],
                self.max_messages
            )
            self.threads[thread_id] = Thread(
                thread_id=thread_id,
                session_id=f"session_{int(time.time() * 1000)}",
                created_at=now,
                last_message_at=now,
                messages=messages,
                brand_voice_injected=brand_voice_injected
            )

        logger.debug(
            "Created thread",
            thread_id=thread_id,
            message_count=len(messages),
            brand_voice_injected=brand_voice_injected
        )
        return thread_id

    async def get(self, thread_id: str) -> Optional[Thread]:
        """Get a copy of a thread"""

        async with self._lock:
            thread = self.threads.get(thread_id)
            return thread.model_copy(deep=True) if thread else None

    async def append(self, thread_id: str, message: ChatMessage) -> Optional[Thread]:
        """Append a message and window the thread. Returns None for unknown ids."""

        async with self._lock:
            thread = self.threads.get(thread_id)
            if thread is None:
                return None

            stored = message.model_copy(deep=True)
            thread.messages = window_messages(thread.messages + [stored], self.max_messages)
            thread.last_message_at = utc_now()
            snapshot = thread.model_copy(deep=True)

        logger.debug(
            "Appended message to thread",
            thread_id=thread_id,
            role=message.role.value,
            message_count=len(snapshot.messages)
        )
        return snapshot

    async def remove(self, thread_id: str) -> bool:
        """Delete a thread. Removing an unknown id is a no-op."""

        async with self._lock:
            return self.threads.pop(thread_id, None) is not None

    async def clear(self) -> int:
        """Drop every thread and return how many were stored"""

        async with self._lock:
            count = len(self.threads)
            self.threads.clear()
            return count

    async def thread_ids(self) -> List[str]:
        async with self._lock:
            return list(self.threads.keys())

    async def count(self) -> int:
        async with self._lock:
            return len(self.threads)

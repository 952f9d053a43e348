from typing import List, NamedTuple, Optional
import structlog

from threadflow.domain.models.conversation import ChatMessage

logger = structlog.get_logger(__name__)


class InitialMessages(NamedTuple):
    messages: List[ChatMessage]
    brand_voice_injected: bool


class PersonaInjector:
    """Builds the opening messages of a new thread.

    This is the only place a system message enters a thread.
    """

    def initial_messages(
        self,
        persona: Optional[str] = None,
        initial_user_message: Optional[str] = None
    ) -> InitialMessages:
        messages: List[ChatMessage] = []
        injected = bool(persona and persona.strip())

        if injected:
            messages.append(ChatMessage.system(persona))

        if initial_user_message and initial_user_message.strip():
            messages.append(ChatMessage.user(initial_user_message))

        logger.debug(
            "Built initial thread messages",
            brand_voice_injected=injected,
            message_count=len(messages)
        )

        return InitialMessages(messages=messages, brand_voice_injected=injected)

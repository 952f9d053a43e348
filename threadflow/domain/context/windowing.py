from typing import List, Sequence

from threadflow.domain.models.conversation import ChatMessage


def window_messages(messages: Sequence[ChatMessage], cap: int) -> List[ChatMessage]:
    """Bound a message list to ``cap`` entries, newest first.

    A leading system message (the persona) is never evicted: it stays at
    position 0 and the remaining ``cap - 1`` slots hold the most recent
    non-system messages. System messages after the first are not expected
    (persona injection is creation-only) and are dropped when truncating.
    """

    if cap < 1:
        raise ValueError(f"Window cap must be at least 1, got {cap}")

    if len(messages) <= cap:
        return list(messages)

    head = messages[0]
    if not head.is_system:
        return list(messages[-cap:])

    tail = [message for message in messages[1:] if not message.is_system]
    keep = cap - 1
    return [head] + (tail[-keep:] if keep > 0 else [])

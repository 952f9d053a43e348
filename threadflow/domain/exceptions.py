class ThreadEngineError(Exception):
    """Base class for thread engine errors"""


class SystemMessageInjectionError(ThreadEngineError, ValueError):
    """A system message was appended to an existing thread.

    Persona messages are only ever inserted when a thread is created.
    """

    def __init__(self, thread_id: str):
        self.thread_id = thread_id
        super().__init__(f"System messages can only be added at thread creation (thread_id={thread_id})")


class EmptyPromptError(ThreadEngineError, ValueError):
    """Prompt is empty or contains only whitespace"""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Prompt is empty or contains only invalid characters (node_id={node_id})")

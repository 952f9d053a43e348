# This module handles conversation context between workflow nodes

# +---------------------+
# |    Thread store     |   (Authoritative, in-memory, windowed)
# |---------------------|
# | Persona message     |
# | User turns          |
# | Assistant turns     |
# +---------------------+

# +---------------------+
# |    Node state       |   (Per node, survives re-runs)
# |---------------------|
# | Adopted thread id   |
# | Accumulated input   |
# +---------------------+

#    \    /
#     \  /
#      \/
# +------------------------------+
# |           Context            |   (Merged from upstream for one turn)
# |------------------------------|
# | Thread history               |
# | Foreign upstream messages    |
# | File / image context         |
# | Resolved thread id           |
# +------------------------------+
#         |
#         v
#   [generate_response]

from .windowing import window_messages
from .persona import PersonaInjector, InitialMessages
from .memory import ThreadStore
from .context_merger import ContextMergeEngine
from .file_context_builder import (
    build_enhanced_prompt,
    file_context_to_message,
    file_contexts_to_messages,
)
from .state import NodeState, NodeStateManager

__all__ = [
    "window_messages",
    "PersonaInjector",
    "InitialMessages",
    "ThreadStore",
    "ContextMergeEngine",
    "build_enhanced_prompt",
    "file_context_to_message",
    "file_contexts_to_messages",
    "NodeState",
    "NodeStateManager",
]

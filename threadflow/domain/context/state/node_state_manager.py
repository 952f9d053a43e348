from typing import Dict, Optional
import asyncio
from datetime import datetime
from pydantic import BaseModel, Field

from threadflow.domain.models.conversation import ConversationContext, utc_now
from threadflow.domain.context.context_merger import ContextMergeEngine


class NodeState(BaseModel):
    """What a prompt node remembers between runs"""
    node_id: str
    thread_id: Optional[str] = Field(None, description="Thread adopted on a previous run")
    input_context: Optional[ConversationContext] = Field(None, description="Accumulated upstream input")
    last_updated: datetime = Field(default_factory=utc_now)


class NodeStateManager:
    """Manages per-node thread adoption and accumulated input"""

    def __init__(self, merger: Optional[ContextMergeEngine] = None):
        self.merger = merger or ContextMergeEngine()
        self.states: Dict[str, NodeState] = {}
        self._lock = asyncio.Lock()

    async def get_state(self, node_id: str) -> NodeState:
        """Get current state for a node"""

        async with self._lock:
            state = self.states.get(node_id)
            return state.model_copy() if state else NodeState(node_id=node_id)

    async def adopt_thread(self, node_id: str, thread_id: Optional[str]):
        """Record the thread a node wrote to"""

        async with self._lock:
            state = self.states.setdefault(node_id, NodeState(node_id=node_id))
            state.thread_id = thread_id
            state.last_updated = utc_now()

    async def receive_input(
        self,
        node_id: str,
        context: Optional[ConversationContext]
    ) -> Optional[ConversationContext]:
        """Fold a context delivered by an upstream node into the node's input"""

        async with self._lock:
            state = self.states.setdefault(node_id, NodeState(node_id=node_id))
            state.input_context = self.merger.accumulate(state.input_context, context)
            state.last_updated = utc_now()
            return state.input_context

    async def clear_node(self, node_id: str):
        """Clear state for a node"""

        async with self._lock:
            self.states.pop(node_id, None)

    async def clear_all(self):
        async with self._lock:
            self.states.clear()

    async def get_all_nodes(self) -> Dict[str, NodeState]:
        """Get all node states"""

        async with self._lock:
            return {node_id: state.model_copy() for node_id, state in self.states.items()}

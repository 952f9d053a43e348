# Node state = what a prompt node needs to resume its conversation on the next run.

# It is "the NOW" for the node, covering:

# The thread it adopted on a previous execution

# The context accumulated from upstream deliveries so far

# Whether any input has arrived yet

from .node_state_manager import NodeState, NodeStateManager

__all__ = ["NodeState", "NodeStateManager"]

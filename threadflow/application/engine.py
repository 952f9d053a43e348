from typing import Optional
import structlog

from threadflow.domain.context.context_merger import ContextMergeEngine
from threadflow.domain.context.memory.thread_store import ThreadStore
from threadflow.domain.context.persona import PersonaInjector
from threadflow.domain.context.state.node_state_manager import NodeStateManager
from threadflow.domain.orchestration.node_executor import NodeExecutor
from threadflow.domain.orchestration.thread_lifecycle import ThreadLifecycleController
from threadflow.infrastructure.config import EngineSettings
from threadflow.infrastructure.observability.logging import setup_logging, thread_logger

logger = structlog.get_logger(__name__)


class ThreadEngine:
    """One isolated engine instance: store, lifecycle API, merger and node executor"""

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()
        self.store = ThreadStore(max_messages=self.settings.max_context_messages)
        self.merger = ContextMergeEngine(thread_logger)
        self.lifecycle = ThreadLifecycleController(
            store=self.store,
            persona_injector=PersonaInjector(),
            thread_logger=thread_logger
        )
        self.node_states = NodeStateManager(self.merger)
        self.executor = NodeExecutor(
            self.lifecycle,
            merger=self.merger,
            node_states=self.node_states,
            max_prompt_length=self.settings.max_prompt_length
        )

    async def new_workflow(self):
        """Drop every thread and node binding"""

        await self.lifecycle.clear_all_threads()
        await self.node_states.clear_all()
        logger.info("Started new workflow")


def build_engine(settings: Optional[EngineSettings] = None, configure_logging: bool = False) -> ThreadEngine:
    """Create an engine, optionally configuring structlog from the same settings"""

    settings = settings or EngineSettings.from_env()
    if configure_logging:
        setup_logging(
            log_level=settings.log_level,
            log_format=settings.log_format,
            service_name=settings.service_name
        )

    engine = ThreadEngine(settings)
    logger.info("Thread engine ready", max_context_messages=settings.max_context_messages)
    return engine

import structlog
import logging
import sys
from typing import Dict, Any, List, Optional


def build_processors(log_format: str = "json") -> List[Any]:
    """Processor chain shared by every engine logger.

    ``node_id`` and ``thread_id`` bound with ``structlog.contextvars`` are
    merged into each event; the last processor renders JSON unless
    ``log_format`` is ``"console"``.
    """

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())
    return processors


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    service_name: str = "threadflow"
) -> None:
    """Route structlog through stdlib logging on stdout"""

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO)
    )

    structlog.configure(
        processors=build_processors(log_format),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=service_name)


class ThreadLogger:
    """Specialized logger for thread lifecycle events"""

    def __init__(self, name: str):
        self.logger = structlog.get_logger(name)

    def log_thread_event(
        self,
        event_type: str,
        thread_id: str,
        data: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        """Log thread lifecycle events (created, reset, cleared)"""

        self.logger.info(
            "thread_event",
            event_type=event_type,
            thread_id=thread_id,
            data=data or {},
            **kwargs
        )

    def log_self_heal(
        self,
        missing_thread_id: str,
        new_thread_id: str,
        role: str
    ):
        """Log an append against an unknown thread that started a new one"""

        self.logger.warning(
            "thread_self_healed",
            missing_thread_id=missing_thread_id,
            new_thread_id=new_thread_id,
            role=role
        )

    def log_context_merge(
        self,
        resolved_thread_id: Optional[str],
        source_count: int,
        message_count: int,
        discarded_thread_ids: Optional[List[str]] = None
    ):
        """Log a context merge; warn when upstream threads disagree"""

        if discarded_thread_ids:
            self.logger.warning(
                "context_merge_conflict",
                resolved_thread_id=resolved_thread_id,
                discarded_thread_ids=discarded_thread_ids,
                source_count=source_count,
                message_count=message_count
            )
            return

        self.logger.debug(
            "context_merge",
            resolved_thread_id=resolved_thread_id,
            source_count=source_count,
            message_count=message_count
        )


# Global logger instance
thread_logger = ThreadLogger("threadflow")

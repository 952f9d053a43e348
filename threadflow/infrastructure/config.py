from pydantic import BaseModel, Field
import os


class EngineSettings(BaseModel):
    """Runtime settings for the thread engine"""
    max_context_messages: int = Field(20, ge=1, description="Window cap applied on every append")
    max_prompt_length: int = Field(50000, ge=1, description="Prompts are truncated to this many characters")
    log_level: str = "INFO"
    log_format: str = Field("json", description="'json' or 'console'")
    service_name: str = "threadflow"

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Build settings from THREADFLOW_* environment variables"""

        defaults = cls()
        return cls(
            max_context_messages=int(os.getenv("THREADFLOW_MAX_CONTEXT_MESSAGES", defaults.max_context_messages)),
            max_prompt_length=int(os.getenv("THREADFLOW_MAX_PROMPT_LENGTH", defaults.max_prompt_length)),
            log_level=os.getenv("THREADFLOW_LOG_LEVEL", defaults.log_level),
            log_format=os.getenv("THREADFLOW_LOG_FORMAT", defaults.log_format),
            service_name=os.getenv("THREADFLOW_SERVICE_NAME", defaults.service_name)
        )

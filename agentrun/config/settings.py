"""
Global settings from environment variables.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AgentRunSettings(BaseSettings):
    """
    Global configuration loaded from environment variables.

    Environment variables should be prefixed with AGENTRUN_
    Example: AGENTRUN_DEBUG=true, AGENTRUN_AWAIT_TIMEOUT=300
    """

    model_config = SettingsConfigDict(
        env_prefix="AGENTRUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core settings
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_logs: bool = False

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000

    # Runtime settings
    await_timeout: float | None = Field(default=None, gt=0)  # None = wait forever
    event_queue_size: int = Field(default=0, ge=0)  # 0 = unbounded

    # Register the example agents at API startup
    builtin_agents: bool = True


# Global settings instance (singleton)
settings = AgentRunSettings()


__all__ = ["AgentRunSettings", "settings"]

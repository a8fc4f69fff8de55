"""Configuration settings for the SynClub MCP adapter."""

from dataclasses import dataclass
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class PollPolicy:
    """How long a task poller waits for a task to finish."""

    max_attempts: int
    interval: float  # seconds slept before each status query


class Settings(BaseSettings):
    """Adapter settings loaded from environment variables.

    Credentials:
    - SYNCLUB_MCP_API: API key sent as Authorization and X-API-Key
    - UNIFIED_API_BASE_URL: Base URL of the upstream comic API

    Everything else uses the SYNCLUB_ prefix (SYNCLUB_POLL_INTERVAL, ...).
    A missing API key is allowed; requests then fail with AuthError.
    """

    # Upstream
    api_key: str = Field(
        default="", validation_alias="SYNCLUB_MCP_API"
    )
    api_host: str = Field(
        default="",
        validation_alias="UNIFIED_API_BASE_URL",
    )
    request_timeout: float = 60.0
    stream_timeout: float = 300.0

    # Task polling
    poll_max_attempts: int = 30
    poll_interval: float = 2.0
    image_edit_poll_max_attempts: int = 20
    image_edit_poll_interval: float = 5.0

    # Edit tools stream by default; off sends them through one POST + polling
    edit_streaming: bool = True

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="SYNCLUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def default_poll_policy(self) -> PollPolicy:
        return PollPolicy(self.poll_max_attempts, self.poll_interval)

    @property
    def image_edit_poll_policy(self) -> PollPolicy:
        return PollPolicy(
            self.image_edit_poll_max_attempts, self.image_edit_poll_interval
        )


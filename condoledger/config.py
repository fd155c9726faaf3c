"""Application settings using pydantic-settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class LedgerSettings(BaseSettings):
    """Settings for a ledger application.

    All settings can be configured via environment variables with the
    CONDOLEDGER_ prefix. For example:
    - CONDOLEDGER_BACKEND=mongodb
    - CONDOLEDGER_DEFAULT_CURRENCY=EUR
    - CONDOLEDGER_COMMAND_LOG_LEVEL=DEBUG

    Attributes:
        backend: Where events and read models live.
        default_currency: Currency reported by summaries that have no
            amounts to take it from.
        command_log_level: Level the logging middleware logs commands at.
        concurrency_max_attempts: Attempts per command before a
            concurrency conflict is surfaced.
        concurrency_retry_delay: Seconds between those attempts.
        replay_batch_size: Events loaded per batch when replaying
            projections.
    """

    backend: Literal["memory", "mongodb"] = "memory"
    default_currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    command_log_level: str = "INFO"
    concurrency_max_attempts: int = Field(default=3, gt=0)
    concurrency_retry_delay: float = Field(default=0.05, ge=0)
    replay_batch_size: int = Field(default=500, gt=0)

    model_config = {"env_prefix": "CONDOLEDGER_"}

"""
Configuration Management for the Split Wizard

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Every tunable of the wizard lives here - tolerances,
clamps, the participant floor and the interaction timings. Product variants
disagree on some of these (e.g. whether a category is mandatory), so they are
named policy values rather than constants buried in the state classes.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WizardSettings(BaseSettings):
    """
    Settings for one wizard deployment.

    Loads configuration from environment variables (prefix SPLIT_WIZARD_)
    and an optional .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPLIT_WIZARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Stage 1 policy
    require_category: bool = Field(
        default=True,
        description="Whether a category must be picked before leaving stage 1",
    )
    default_currency: str = Field(
        default="USD",
        description="ISO 4217 code used for new drafts",
    )

    # Stage 2 policy
    min_split_participants: int = Field(
        default=2,
        ge=2,
        description="Participant floor while split mode is on",
    )

    # Stage 3 clamps and tolerances
    min_shares: int = Field(
        default=1,
        ge=1,
        description="Lowest share count a participant can hold",
    )
    max_shares: int = Field(
        default=10,
        ge=1,
        description="Highest share count a participant can hold",
    )
    amount_tolerance: Decimal = Field(
        default=Decimal("0.01"),
        gt=0,
        description="Exact amounts are balanced when |sum - total| is below this",
    )
    percentage_tolerance: Decimal = Field(
        default=Decimal("0.1"),
        gt=0,
        description="Percentages are balanced when |sum - 100| is below this",
    )

    # Interaction timings (seconds)
    transition_cooldown_seconds: float = Field(
        default=0.35,
        ge=0.0,
        description="Minimum time between two stage transitions",
    )
    input_debounce_seconds: float = Field(
        default=0.1,
        ge=0.0,
        description="Quiet period before amount edits are published",
    )

    # Draft handoff
    persistence_retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts at saving a draft when the sink reports a transient failure",
    )
    persistence_retry_wait_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Base of the exponential backoff between save attempts",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level for the structlog/stdlib pipeline",
    )

    @field_validator("default_currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Currency codes are three ASCII letters, stored upper-case."""
        code = v.strip().upper()
        if len(code) != 3 or not code.isascii() or not code.isalpha():
            raise ValueError(f"Invalid ISO 4217 currency code: {v!r}")
        return code

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v!r}")
        return level

    @model_validator(mode="after")
    def validate_share_bounds(self) -> "WizardSettings":
        if self.max_shares < self.min_shares:
            raise ValueError("max_shares cannot be lower than min_shares")
        return self


@lru_cache()
def get_settings() -> WizardSettings:
    """
    Get wizard settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return WizardSettings()

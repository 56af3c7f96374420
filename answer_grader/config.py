"""
Configuration management for the Answer Grader system.

Uses Pydantic Settings for type-safe configuration loading from environment variables.
All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

API_KEY_MIN_LENGTH = 10


class GradingConfig(BaseModel):
    """
    Immutable switches read by the grading engine on every call.

    Built once at startup (usually from Settings) and shared read-only
    between concurrent grading calls.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    ai_grading_enabled: bool = Field(
        default=True,
        description="Whether to consult the generative model before falling back",
    )

    fallback_enabled: bool = Field(
        default=True,
        description="Whether similarity grading is used when the model path fails",
    )

    timeout_ms: int = Field(
        default=30000,
        gt=0,
        description="Time budget for a single model call, in milliseconds",
    )

    @property
    def timeout_seconds(self) -> float:
        """Return the model call budget in seconds."""
        return self.timeout_ms / 1000


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are validated at startup. An enabled AI tier without
    an API key is rejected here rather than on the first grading call.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Model API Configuration
    # ==========================================================================
    llm_api_key: str | None = Field(
        default=None,
        description="API key for the OpenAI-compatible endpoint",
    )

    llm_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL for the OpenAI-compatible API",
    )

    llm_model: str = Field(
        default="gpt-4o-mini",
        description="Model to use for grading",
    )

    llm_temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Temperature for LLM generation (low for consistent grading)",
    )

    llm_max_tokens: int = Field(
        default=1000,
        ge=1,
        description="Maximum tokens in the model reply",
    )

    # ==========================================================================
    # Grading Configuration
    # ==========================================================================
    ai_grading_enabled: bool = Field(
        default=True,
        description="Try model-based grading before the similarity fallback",
    )

    ai_grading_fallback_enabled: bool = Field(
        default=True,
        description="Use similarity grading when the model path fails",
    )

    ai_grading_timeout_ms: int = Field(
        default=30000,
        gt=0,
        description="Time budget for a single model call, in milliseconds",
    )

    batch_max_workers: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Worker threads used to grade the questions of one submission",
    )

    @field_validator("llm_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base URL doesn't have trailing slash."""
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_api_key_present(self) -> "Settings":
        """Require an API key whenever the AI tier is switched on."""
        if not self.ai_grading_enabled:
            return self
        if not self.llm_api_key:
            raise ValueError(
                "llm_api_key is required when ai_grading_enabled is true "
                "(set LLM_API_KEY or AI_GRADING_ENABLED=false)"
            )
        if len(self.llm_api_key) < API_KEY_MIN_LENGTH:
            raise ValueError(
                f"llm_api_key must be at least {API_KEY_MIN_LENGTH} characters"
            )
        return self

    def grading_config(self) -> GradingConfig:
        """Build the immutable engine configuration from these settings."""
        return GradingConfig(
            ai_grading_enabled=self.ai_grading_enabled,
            fallback_enabled=self.ai_grading_fallback_enabled,
            timeout_ms=self.ai_grading_timeout_ms,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()

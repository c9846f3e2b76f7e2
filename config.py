"""Configuration settings for Plan Forge."""

from dotenv import load_dotenv

load_dotenv()

from pydantic_settings import BaseSettings
from pydantic import Field
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


class Settings(BaseSettings):
    """Global settings for Plan Forge.

    Settings can be overridden via environment variables with PLAN_FORGE_ prefix.
    Example: PLAN_FORGE_MODEL=openrouter/deepseek/deepseek-chat
    """

    # Generation
    provider: str = Field(
        default="litellm",
        description="Transport used for plan generation (litellm, openai)",
    )
    model: str = Field(
        default="",
        description="Model identifier sent to the provider; generation is refused when empty",
    )
    api_key: str = Field(
        default="",
        description="Credential for the model endpoint (env: PLAN_FORGE_API_KEY)",
    )
    api_base: str = Field(
        default="",
        description="Endpoint override; empty lets LiteLLM route by model string (the openai provider then uses OpenRouter)",
    )
    max_tokens_per_call: int = Field(
        default=8192,
        description="Maximum tokens requested for a single plan",
    )
    api_timeout_seconds: int = Field(
        default=120,
        description="API call timeout in seconds"
    )

    # Storage
    database_url: str = Field(
        default="sqlite:///./plan_forge.db",
        description="SQLAlchemy database URL",
    )
    slug_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Insert attempts before giving up on slug collisions",
    )
    slug_retry_base_delay_seconds: float = Field(
        default=0.05,
        ge=0.0,
        description="Backoff unit between slug attempts; attempt N waits N units",
    )
    guest_project_ttl_hours: int = Field(
        default=168,
        ge=1,
        description="Lifetime of projects created without an owner",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_dir: Optional[str] = Field(
        default=None,
        description="Directory for rotating log files; console only when unset",
    )

    model_config = {
        "env_prefix": "PLAN_FORGE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def get_log_path(self) -> Optional[Path]:
        """Get log directory as Path object."""
        return Path(self.log_dir) if self.log_dir else None


# Create singleton instance
settings = Settings()


@dataclass(frozen=True)
class GenerationConfig:
    """Everything the plan generator needs to reach the model.

    Passed explicitly into the generator so missing configuration is
    detected (and testable) without reading the process environment.
    """
    model: str = ""
    api_key: str = ""
    provider: str = "litellm"
    api_base: Optional[str] = None
    max_tokens: int = 8192
    timeout_seconds: int = 120

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "GenerationConfig":
        source = source or settings
        return cls(
            model=source.model,
            api_key=source.api_key,
            provider=source.provider,
            api_base=source.api_base or None,
            max_tokens=source.max_tokens_per_call,
            timeout_seconds=source.api_timeout_seconds,
        )

    def missing_fields(self) -> List[str]:
        """Names of required values that are empty."""
        return [name for name in ("model", "api_key") if not getattr(self, name).strip()]

"""Base agent class for model-backed agents.

Every agent:
- Receives an explicit GenerationConfig (never reads the environment itself)
- Refuses to call the model when required configuration is missing
- Calls the LLM provider and classifies transport failures
- Tracks token usage and cost across calls
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel

from agents.failures import ConfigMissing, GenerationFailure, classify_transport_error
from config import GenerationConfig
from logging_config import get_logger
from providers import LLMProvider, LLMResponse, get_provider

logger = get_logger(__name__)


class TokenUsage(BaseModel):
    """Track token usage and provider-reported cost."""
    input_tokens: int = 0
    output_tokens: int = 0
    cost: float = 0.0

    def add(self, response: LLMResponse) -> None:
        self.input_tokens += response.input_tokens
        self.output_tokens += response.output_tokens
        self.cost += response.cost


class AgentResult(BaseModel):
    """Result from an agent run, including output and metadata."""
    output: Any
    token_usage: TokenUsage
    model: str
    provider: str = "litellm"
    raw_response: Optional[str] = None


class BaseAgent(ABC):
    """Base class for agents that make one model call per run.

    Subclasses decide what to send and how to read the answer; this class
    owns the provider, the configuration check and failure classification.
    """

    def __init__(
        self,
        role: str,
        config: GenerationConfig,
        provider: Optional[LLMProvider] = None,
    ):
        """Initialize the agent.

        Args:
            role: Agent role, used for logging and provider metadata
            config: Model, credential and endpoint settings
            provider: Provider instance to use; built from config on first call if None
        """
        self.role = role
        self.config = config
        self._provider = provider
        self.total_usage = TokenUsage()

    @property
    def llm_provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = get_provider(self.config)
            if hasattr(self._provider, "set_metadata"):
                self._provider.set_metadata({"agent": self.role})
        return self._provider

    def _check_config(self) -> None:
        """Raise ConfigMissing if the model or credential is absent or the provider is unknown."""
        missing = self.config.missing_fields()
        if missing:
            raise ConfigMissing(
                f"Generation is not configured: missing {', '.join(missing)}"
            )
        try:
            self.llm_provider
        except ValueError as e:
            raise ConfigMissing(str(e)) from e

    def _complete(self, system_prompt: str, user_message: str) -> LLMResponse:
        """Call the provider once.

        Raises:
            GenerationFailure: The provider call failed (classified)
        """
        try:
            response = self.llm_provider.complete(
                system_prompt=system_prompt,
                user_message=user_message,
                model=self.config.model,
                max_tokens=self.config.max_tokens,
            )
        except GenerationFailure:
            raise
        except Exception as e:
            failure = classify_transport_error(e)
            logger.warning(
                "%s: model call failed (%s): %s", self.role, failure.kind, failure.message
            )
            raise failure from e

        self.total_usage.add(response)
        return response

    @abstractmethod
    def get_task_description(self) -> str:
        """Return a description of what this agent does.

        Used for logging and debugging.
        """
        pass

"""LLM provider abstraction used by the plan generator."""

from .base import LLMProvider, LLMResponse
from .factory import PROVIDERS, get_provider, list_providers
from .litellm_provider import LiteLLMProvider
from .openai_provider import OpenAIProvider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LiteLLMProvider",
    "OpenAIProvider",
    "PROVIDERS",
    "get_provider",
    "list_providers",
]

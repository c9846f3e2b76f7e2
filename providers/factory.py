"""Factory for creating LLM providers."""

from typing import Dict, Type

from config import GenerationConfig
from .base import LLMProvider
from .litellm_provider import LiteLLMProvider
from .openai_provider import OpenAIProvider


# Registry of available providers
PROVIDERS: Dict[str, Type[LLMProvider]] = {
    "litellm": LiteLLMProvider,
    "openai": OpenAIProvider,
    "openrouter": OpenAIProvider,
}


def get_provider(config: GenerationConfig) -> LLMProvider:
    """Build the provider named by a generation config.

    Args:
        config: Generation settings (provider name, model, credentials, endpoint)

    Returns:
        LLMProvider instance

    Raises:
        ValueError: If the provider name is not registered

    Examples:
        get_provider(GenerationConfig(model="openrouter/deepseek/deepseek-chat", api_key="..."))
        get_provider(GenerationConfig(provider="openai", model="gpt-4o-mini", api_key="..."))
    """
    provider_key = (config.provider or "litellm").lower()
    if provider_key not in PROVIDERS:
        raise ValueError(
            f"Unknown provider: {config.provider}. "
            f"Available: {list(PROVIDERS.keys())}"
        )

    if PROVIDERS[provider_key] is LiteLLMProvider:
        return LiteLLMProvider(
            default_model=config.model,
            api_key=config.api_key or None,
            api_base=config.api_base,
            timeout=config.timeout_seconds,
        )
    return OpenAIProvider(
        default_model=config.model,
        api_key=config.api_key or None,
        base_url=config.api_base,
        timeout=config.timeout_seconds,
    )


def list_providers(config: GenerationConfig) -> Dict[str, bool]:
    """List all providers and their availability for the given config.

    Returns:
        Dict mapping provider name to availability status
    """
    result = {}
    for name in PROVIDERS:
        # Skip aliases
        if name == "openrouter":
            continue
        provider = get_provider(GenerationConfig(
            model=config.model,
            api_key=config.api_key,
            provider=name,
            api_base=config.api_base,
            max_tokens=config.max_tokens,
            timeout_seconds=config.timeout_seconds,
        ))
        result[name] = provider.is_available() and not config.missing_fields()
    return result

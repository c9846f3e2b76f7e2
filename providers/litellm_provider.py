"""LiteLLM-backed provider. Default transport for plan generation."""

from typing import Optional

from .base import LLMProvider, LLMResponse


class LiteLLMProvider(LLMProvider):
    """Single provider that delegates to litellm.completion().

    Model strings follow LiteLLM's ``provider/model`` convention, e.g.
    ``openrouter/deepseek/deepseek-chat`` or ``gpt-4o-mini``.
    """

    def __init__(
        self,
        default_model: str,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        metadata: Optional[dict] = None,
    ):
        """Initialize with the LiteLLM model string to use by default.

        Args:
            default_model: LiteLLM model string.
            api_key: Credential forwarded to litellm; litellm falls back to env vars when None.
            api_base: Endpoint override (only needed for OpenAI-compatible gateways).
            timeout: Request timeout in seconds.
            metadata: Optional dict passed to litellm callbacks.
        """
        self._default_model = default_model
        self._api_key = api_key
        self._api_base = api_base
        self._timeout = timeout
        self._metadata = metadata or {}

    @property
    def name(self) -> str:
        return "litellm"

    @property
    def default_model(self) -> str:
        return self._default_model

    def set_metadata(self, metadata: dict) -> None:
        """Merge metadata into what is sent with each call."""
        self._metadata.update(metadata)

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        import litellm

        resolved_model = model or self._default_model
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ]
        kwargs = {
            "model": resolved_model,
            "messages": messages,
            "metadata": {**self._metadata},
        }
        if max_tokens:
            kwargs["max_tokens"] = max_tokens
        if self._api_key:
            kwargs["api_key"] = self._api_key
        if self._api_base:
            kwargs["api_base"] = self._api_base
        if self._timeout:
            kwargs["timeout"] = self._timeout
        response = litellm.completion(**kwargs)

        content = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "prompt_tokens", 0) or 0
        output_tokens = getattr(usage, "completion_tokens", 0) or 0
        hidden = getattr(response, "_hidden_params", None) or {}
        cost = float(hidden.get("response_cost", 0) or 0)
        model_id = getattr(response, "model", None) or resolved_model

        return LLMResponse(
            content=content,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=model_id,
            provider=self.name,
            cost=cost,
        )

    def is_available(self) -> bool:
        """LiteLLM reads API keys from env; we consider it available if the model is set."""
        return bool(self._default_model)

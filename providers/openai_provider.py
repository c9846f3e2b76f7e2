"""OpenAI-compatible provider (OpenAI SDK pointed at any chat-completions endpoint)."""

import os
from typing import Optional

from .base import LLMProvider, LLMResponse

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI-compatible chat-completions APIs.

    Defaults to the OpenRouter endpoint; set ``base_url`` to target OpenAI
    itself or a self-hosted gateway.
    """

    def __init__(
        self,
        default_model: str = "",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize OpenAI-compatible provider.

        Args:
            default_model: Model identifier sent when none is given per call.
            api_key: API key. Uses OPENAI_API_KEY env var if not provided.
            base_url: Endpoint root. Defaults to OpenRouter.
            timeout: Request timeout in seconds.
        """
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.base_url = base_url or DEFAULT_BASE_URL
        self.timeout = timeout
        self._default_model = default_model
        self._client = None

    @property
    def name(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return self._default_model

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI
            kwargs = {"api_key": self.api_key, "base_url": self.base_url}
            if self.timeout:
                kwargs["timeout"] = self.timeout
            self._client = OpenAI(**kwargs)
        return self._client

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        client = self._get_client()
        resolved_model = model or self.default_model

        kwargs = {}
        if max_tokens:
            kwargs["max_tokens"] = max_tokens
        response = client.chat.completions.create(
            model=resolved_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            **kwargs,
        )

        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            model=getattr(response, "model", None) or resolved_model,
            provider=self.name,
        )

    def is_available(self) -> bool:
        return bool(self.api_key)

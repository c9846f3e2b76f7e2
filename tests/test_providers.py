"""Tests for LLM providers and the provider factory (SDKs mocked)."""

import pytest
from unittest.mock import patch, MagicMock

from config import GenerationConfig, Settings
from providers import LiteLLMProvider, OpenAIProvider, get_provider, list_providers
from providers.base import LLMResponse


@pytest.fixture
def mock_completion_response():
    resp = MagicMock()
    resp.choices = [MagicMock()]
    resp.choices[0].message.content = '{"ok": true}'
    resp.usage = MagicMock(prompt_tokens=10, completion_tokens=5)
    resp._hidden_params = {"response_cost": 0.001}
    resp.model = "deepseek/deepseek-chat"
    return resp


class TestLiteLLMProvider:
    """Test LiteLLMProvider with mocked litellm."""

    def test_complete_returns_llm_response(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response):
            provider = LiteLLMProvider(default_model="openrouter/deepseek/deepseek-chat")
            result = provider.complete("You are helpful.", "Hi", max_tokens=100)
        assert isinstance(result, LLMResponse)
        assert result.content == '{"ok": true}'
        assert result.input_tokens == 10
        assert result.output_tokens == 5
        assert result.cost == 0.001
        assert result.model == "deepseek/deepseek-chat"
        assert result.provider == "litellm"

    def test_passes_credentials_and_endpoint(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response) as mock_completion:
            provider = LiteLLMProvider(
                default_model="gpt-4o-mini",
                api_key="sk-test",
                api_base="https://gateway.example/v1",
                timeout=30,
            )
            provider.complete("Sys", "User", max_tokens=2048)
        call_kw = mock_completion.call_args[1]
        assert call_kw["model"] == "gpt-4o-mini"
        assert call_kw["api_key"] == "sk-test"
        assert call_kw["api_base"] == "https://gateway.example/v1"
        assert call_kw["timeout"] == 30
        assert call_kw["max_tokens"] == 2048
        assert call_kw["messages"][0] == {"role": "system", "content": "Sys"}
        assert call_kw["messages"][1] == {"role": "user", "content": "User"}

    def test_omits_unset_options(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response) as mock_completion:
            LiteLLMProvider(default_model="gpt-4o-mini").complete("Sys", "User")
        call_kw = mock_completion.call_args[1]
        assert "api_key" not in call_kw
        assert "api_base" not in call_kw
        assert "max_tokens" not in call_kw

    def test_passes_metadata(self, mock_completion_response):
        with patch("litellm.completion", return_value=mock_completion_response) as mock_completion:
            provider = LiteLLMProvider(default_model="gpt-4o-mini")
            provider.set_metadata({"agent": "planner"})
            provider.complete("Sys", "User")
        assert mock_completion.call_args[1]["metadata"] == {"agent": "planner"}

    def test_none_content_becomes_empty(self, mock_completion_response):
        mock_completion_response.choices[0].message.content = None
        with patch("litellm.completion", return_value=mock_completion_response):
            result = LiteLLMProvider(default_model="gpt-4o-mini").complete("Sys", "User")
        assert result.content == ""

    def test_sdk_errors_propagate(self):
        with patch("litellm.completion", side_effect=RuntimeError("rate limit")):
            with pytest.raises(RuntimeError):
                LiteLLMProvider(default_model="gpt-4o-mini").complete("Sys", "User")


class TestOpenAIProvider:
    """Test the OpenAI-compatible provider with a mocked client."""

    def test_complete_uses_client(self, mock_completion_response):
        provider = OpenAIProvider(default_model="deepseek/deepseek-chat", api_key="sk-test")
        client = MagicMock()
        client.chat.completions.create.return_value = mock_completion_response
        provider._client = client

        result = provider.complete("Sys", "User", max_tokens=512)

        call_kw = client.chat.completions.create.call_args[1]
        assert call_kw["model"] == "deepseek/deepseek-chat"
        assert call_kw["max_tokens"] == 512
        assert result.content == '{"ok": true}'
        assert result.provider == "openai"

    def test_defaults_to_openrouter(self):
        provider = OpenAIProvider(default_model="x", api_key="sk-test")
        assert provider.base_url == "https://openrouter.ai/api/v1"

    def test_client_built_with_base_url(self):
        provider = OpenAIProvider(default_model="x", api_key="sk-test", base_url="https://api.openai.com/v1", timeout=15)
        with patch("openai.OpenAI") as mock_openai:
            provider._get_client()
        mock_openai.assert_called_once_with(api_key="sk-test", base_url="https://api.openai.com/v1", timeout=15)

    def test_availability_follows_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert not OpenAIProvider(default_model="x").is_available()
        assert OpenAIProvider(default_model="x", api_key="sk").is_available()


class TestFactory:
    """Test get_provider and list_providers."""

    def test_default_config_lets_litellm_route(self, mock_completion_response):
        config = GenerationConfig.from_settings(Settings(_env_file=None, model="gpt-4o-mini", api_key="sk-test"))
        with patch("litellm.completion", return_value=mock_completion_response) as mock_completion:
            get_provider(config).complete("Sys", "User", max_tokens=config.max_tokens)
        call_kw = mock_completion.call_args[1]
        assert "api_base" not in call_kw
        assert call_kw["max_tokens"] == config.max_tokens

    def test_openai_provider_falls_back_to_openrouter(self):
        provider = get_provider(GenerationConfig(model="m", api_key="k", provider="openai"))
        assert provider.base_url == "https://openrouter.ai/api/v1"

    def test_default_is_litellm(self, generation_config):
        provider = get_provider(generation_config)
        assert isinstance(provider, LiteLLMProvider)
        assert provider.default_model == generation_config.model

    @pytest.mark.parametrize("name", ["openai", "openrouter", "OpenAI"])
    def test_openai_compatible(self, name):
        provider = get_provider(GenerationConfig(model="m", api_key="k", provider=name))
        assert isinstance(provider, OpenAIProvider)

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            get_provider(GenerationConfig(model="m", api_key="k", provider="carrier-pigeon"))

    def test_list_providers(self, generation_config):
        assert list_providers(generation_config) == {"litellm": True, "openai": True}

    def test_list_providers_without_key(self):
        result = list_providers(GenerationConfig(model="m", api_key=""))
        assert result == {"litellm": False, "openai": False}

"""Integration tests for the LLM adapter layer with a mocked OpenAI SDK."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from app.adapters.llm import OpenAIClient, create_llm_client
from app.core.config import LLMSettings
from app.core.errors import LLMAppError, ValidationAppError

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


class TestOpenAIClientIntegration:
    """OpenAI client behaviour against a patched chat.completions.create."""

    @pytest.mark.asyncio
    async def test_complete_returns_stripped_text(self) -> None:
        client = OpenAIClient(api_key="test-key-123", model="gpt-3.5-turbo")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion("  es \n"),
        ):
            result = await client.complete("Detect this", system="Be brief")

        assert result == "es"

    @pytest.mark.asyncio
    async def test_complete_sends_system_message_and_allowed_params(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-3.5-turbo")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion("ok"),
        ) as mock_create:
            await client.complete(
                "Explain cat",
                system="You are Giggle Translate",
                max_tokens=150,
                temperature=0.3,
                unsupported_option=True,
            )

        call_kwargs = mock_create.call_args.kwargs
        assert call_kwargs["model"] == "gpt-3.5-turbo"
        assert call_kwargs["messages"] == [
            {"role": "system", "content": "You are Giggle Translate"},
            {"role": "user", "content": "Explain cat"},
        ]
        assert call_kwargs["max_tokens"] == 150
        assert call_kwargs["temperature"] == 0.3
        assert "unsupported_option" not in call_kwargs

    @pytest.mark.asyncio
    async def test_complete_without_system_sends_only_user_message(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-3.5-turbo")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion("ok"),
        ) as mock_create:
            await client.complete("Hello")

        assert mock_create.call_args.kwargs["messages"] == [{"role": "user", "content": "Hello"}]

    @pytest.mark.asyncio
    async def test_timeout_raises_llm_timeout(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-3.5-turbo", timeout_seconds=2.0)

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=openai.APITimeoutError(request=_REQUEST),
        ):
            with pytest.raises(LLMAppError) as exc_info:
                await client.complete("Hello")

        assert exc_info.value.code == "llm_timeout"
        assert exc_info.value.details["timeout_seconds"] == 2.0

    @pytest.mark.asyncio
    async def test_quota_error_raises_provider_error(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-3.5-turbo")
        error = openai.RateLimitError(
            "You exceeded your current quota",
            response=httpx.Response(429, request=_REQUEST),
            body=None,
        )

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=error,
        ):
            with pytest.raises(LLMAppError) as exc_info:
                await client.complete("Hello")

        assert exc_info.value.code == "llm_provider_error"
        assert exc_info.value.details["http_status"] == 429

    @pytest.mark.asyncio
    async def test_connection_error_raises_provider_error(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-3.5-turbo")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=openai.APIConnectionError(request=_REQUEST),
        ):
            with pytest.raises(LLMAppError) as exc_info:
                await client.complete("Hello")

        assert exc_info.value.code == "llm_provider_error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "   "])
    async def test_empty_content_raises(self, content: str | None) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-3.5-turbo")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(content),
        ):
            with pytest.raises(LLMAppError, match="empty response"):
                await client.complete("Hello")

    def test_automatic_retries_are_disabled(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-3.5-turbo")
        assert client.client.max_retries == 0


class TestLLMFactory:
    """LLM client factory."""

    def test_create_llm_client_with_settings(self) -> None:
        cfg = LLMSettings(provider="OpenAI", model="gpt-3.5-turbo", api_key="k", timeout_seconds=7)

        client = create_llm_client(cfg)

        assert isinstance(client, OpenAIClient)
        assert client.model == "gpt-3.5-turbo"
        assert client.timeout_seconds == 7

    def test_missing_api_key_raises(self) -> None:
        cfg = LLMSettings(provider="openai", model="gpt-3.5-turbo", api_key=None)

        with pytest.raises(ValidationAppError) as exc_info:
            create_llm_client(cfg)

        assert exc_info.value.code == "llm_missing_api_key"

    def test_unknown_provider_raises(self) -> None:
        cfg = LLMSettings(provider="carrier-pigeon", model="x", api_key="k")

        with pytest.raises(ValidationAppError) as exc_info:
            create_llm_client(cfg)

        assert exc_info.value.code == "llm_unknown_provider"

"""OpenAI LLM client adapter."""

import logging
from typing import Any

from openai import APIStatusError, APITimeoutError, AsyncOpenAI, OpenAIError

from app.adapters.llm.base import AbstractLLMClient
from app.core.errors import LLMAppError

logger = logging.getLogger(__name__)

_PASSTHROUGH_PARAMS = {
    "temperature",
    "max_tokens",
    "top_p",
    "frequency_penalty",
    "presence_penalty",
    "seed",
}


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI chat completions returning plain text.

    Retries are disabled: a failed or timed-out call is reported to the
    caller once and never replayed.
    """

    provider = "openai"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-3.5-turbo").
            base_url: Optional custom base URL for the OpenAI API.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = model
        self.timeout_seconds = timeout_seconds

    def _build_request(self, prompt: str, system: str | None, kwargs: dict[str, Any]) -> dict[str, Any]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        for param in _PASSTHROUGH_PARAMS:
            if param in kwargs:
                request_params[param] = kwargs[param]
        return request_params

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        **kwargs: Any,
    ) -> str:
        """Generate a completion using OpenAI chat completions.

        Args:
            prompt: User prompt to send to the model.
            system: Optional system message.
            **kwargs: Provider options (temperature, max_tokens, top_p, etc.).

        Returns:
            str: Stripped content of the first choice.

        Raises:
            LLMAppError: On timeout, API/network errors or empty content.
        """
        request_params = self._build_request(prompt, system, kwargs)

        try:
            response = await self.client.chat.completions.create(**request_params)
        except APITimeoutError as exc:
            raise LLMAppError(
                code="llm_timeout",
                message="Completion provider timed out",
                details={
                    "provider": self.provider,
                    "model": self.model,
                    "timeout_seconds": self.timeout_seconds,
                },
            ) from exc
        except APIStatusError as exc:
            raise LLMAppError(
                code="llm_provider_error",
                message=f"OpenAI API error: {exc.message}",
                details={
                    "provider": self.provider,
                    "model": self.model,
                    "http_status": exc.status_code,
                },
            ) from exc
        except OpenAIError as exc:
            raise LLMAppError(
                code="llm_provider_error",
                message=f"OpenAI API error: {str(exc)}",
                details={
                    "provider": self.provider,
                    "model": self.model,
                    "error_type": type(exc).__name__,
                },
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if content is None or not content.strip():
            raise LLMAppError(
                code="llm_empty_response",
                message="LLM returned empty response",
                details={"provider": self.provider, "model": self.model},
            )

        logger.debug(
            "llm.completion",
            extra={"model": self.model, "chars": len(content)},
        )
        return content.strip()

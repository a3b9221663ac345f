from abc import ABC, abstractmethod
from typing import Any


class AbstractLLMClient(ABC):
	"""Interface for LLM clients that return plain-text completions."""

	@abstractmethod
	async def complete(
		self,
		prompt: str,
		*,
		system: str | None = None,
		**kwargs: Any,
	) -> str:
		"""Generate a text completion for a single prompt.

		Args:
			prompt: User message sent to the model.
			system: Optional system instruction placed before the prompt.
			**kwargs: Provider-specific options (e.g., temperature, max_tokens).

		Returns:
			str: Trimmed text returned by the model.

		Raises:
			LLMAppError: If the provider call fails, times out, or returns no content.
		"""
		...

"""Child-friendly word explanations relayed to the completion provider.

The service owns prompt construction and caching; the provider client is
injected so tests can substitute a fake.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.adapters.llm.base import AbstractLLMClient
from app.utils.simple_cache import SimpleTTLCache, build_cache_key

# Prompt version for cache invalidation when prompt changes
PROMPT_VERSION = "explain-v1"


@dataclass(frozen=True)
class ExplanationResult:
    explanation: str
    cached: bool = False


def build_system_prompt(age: int, language: str) -> str:
    """Persona and style instructions for an explanation.

    Args:
        age: Child's age in years.
        language: Language the answer must be written in.

    Returns:
        System message text.
    """
    return (
        "You are Giggle Translate, an app that explains words to children. "
        f"Provide a simple, age-appropriate explanation for a {age}-year-old child "
        f"in {language} language. "
        "Use examples, simple language, and fun comparisons that a "
        f"{age}-year-old would understand. "
        "Keep your explanation concise, under 3 sentences."
    )


def build_prompt(word: str, age: int) -> str:
    return f'Explain the word "{word}" to a {age}-year-old child.'


class ExplanationService:
    """Explains words to children in a requested language.

    Attributes:
        llm: Completion provider.
        cache: TTL cache keyed by normalized (word, age, language).
    """

    def __init__(self, llm: AbstractLLMClient, cache: SimpleTTLCache) -> None:
        self.llm = llm
        self.cache = cache

    async def explain(self, word: str, age: int, language: str) -> ExplanationResult:
        """Return an explanation, served from cache when available.

        Args:
            word: Word to explain.
            age: Child's age in years.
            language: Output language.

        Returns:
            ExplanationResult with the text and whether it came from cache.

        Raises:
            LLMAppError: If the provider call fails. Nothing is cached.
        """
        word = word.strip()
        language = language.strip()

        cache_key = build_cache_key(word, age, language, salt=PROMPT_VERSION)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return ExplanationResult(explanation=cached, cached=True)

        explanation = await self.llm.complete(
            build_prompt(word, age),
            system=build_system_prompt(age, language),
            max_tokens=150,
        )

        self.cache.set(cache_key, explanation)
        return ExplanationResult(explanation=explanation)

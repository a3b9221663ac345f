"""Language detection relayed to the completion provider, with caching."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from app.adapters.llm.base import AbstractLLMClient
from app.schemas.relay import DEFAULT_LANGUAGE_CODE
from app.utils.simple_cache import SimpleTTLCache, build_cache_key
from app.utils.text_normalizer import normalize_text

logger = logging.getLogger(__name__)

# Bump when the prompt changes so stale answers are not served
PROMPT_VERSION = "detect-v1"

SYSTEM_PROMPT = (
    "You are a language detection expert. Respond with only the ISO 639-1 "
    "language code (like 'en', 'es', 'fr', etc.) that corresponds to the "
    "language of the text provided."
)

_ISO_639_1 = re.compile(r"^[a-z]{2}$")


@dataclass(frozen=True)
class DetectionResult:
    language: str
    cached: bool = False


def build_prompt(text: str) -> str:
    return f'Detect the language of this text: "{text}"'


def parse_language_code(raw: str) -> str | None:
    """Extract an ISO 639-1 code from a model reply.

    Returns None when the reply is not a bare two-letter code once quotes,
    punctuation and surrounding whitespace are removed.
    """
    candidate = re.sub(r"[^a-z]", "", raw.strip().lower())
    if _ISO_639_1.match(candidate):
        return candidate
    return None


class LanguageDetectionService:
    """Detects the language of short texts.

    Attributes:
        llm: Completion provider.
        cache: TTL cache keyed by normalized text.
    """

    def __init__(self, llm: AbstractLLMClient, cache: SimpleTTLCache) -> None:
        self.llm = llm
        self.cache = cache

    async def detect(self, text: str | None) -> DetectionResult:
        """Return the ISO 639-1 code for ``text``.

        Empty or whitespace-only input short-circuits to the default code
        without touching the provider or the cache.

        Raises:
            LLMAppError: If the provider call fails. Nothing is cached.
        """
        if not text or not text.strip():
            return DetectionResult(language=DEFAULT_LANGUAGE_CODE)

        cache_key = build_cache_key(text, salt=PROMPT_VERSION)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return DetectionResult(language=cached, cached=True)

        reply = await self.llm.complete(
            build_prompt(normalize_text(text)),
            system=SYSTEM_PROMPT,
            max_tokens=5,
            temperature=0.3,
        )

        language = parse_language_code(reply)
        if language is None:
            logger.warning(
                "relay.detect.unparseable_reply",
                extra={"reply_chars": len(reply), "fallback": DEFAULT_LANGUAGE_CODE},
            )
            return DetectionResult(language=DEFAULT_LANGUAGE_CODE)

        self.cache.set(cache_key, language)
        return DetectionResult(language=language)

"""Pydantic schemas for the relay endpoints.

Wire names are camelCase to match the web client; Python attributes stay
snake_case through aliases.
"""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LANGUAGE_CODE = "en"
EXPLANATION_FALLBACK = "Oops! I couldn't get an explanation right now. Try again in a moment."


class DetectLanguageRequest(BaseModel):
    """Text whose language should be detected."""

    text: str | None = Field(
        None,
        description="Text to analyse. Missing, empty or whitespace-only text yields 'en'.",
    )


class DetectLanguageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    detected_language: str = Field(
        ...,
        alias="detectedLanguage",
        description="ISO 639-1 language code (e.g. 'en', 'es', 'fr').",
    )


class DetectLanguageErrorResponse(DetectLanguageResponse):
    error: str = Field("Language detection failed", description="Failure summary.")


class ExplainRequest(BaseModel):
    """A word to explain to a child."""

    word: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Word or short phrase to explain.",
    )
    age: int = Field(
        ...,
        ge=1,
        le=18,
        description="Age of the child in years.",
    )
    language: str = Field(
        "English",
        min_length=1,
        max_length=50,
        description="Language the explanation should be written in.",
    )


class ExplainResponse(BaseModel):
    explanation: str = Field(..., description="Short, age-appropriate explanation.")


class ExplainErrorResponse(ExplainResponse):
    error: str = Field("Explanation generation failed", description="Failure summary.")


class CacheStats(BaseModel):
    size: int
    hits: int
    misses: int
    evictions: int
    ttl_seconds: int = Field(..., alias="ttlSeconds")
    max_entries: int | None = Field(None, alias="maxEntries")

    model_config = ConfigDict(populate_by_name=True)


class RateLimitInfo(BaseModel):
    enabled: bool
    limit: int
    window_seconds: int = Field(..., alias="windowSeconds")
    tracked_clients: int = Field(..., alias="trackedClients")

    model_config = ConfigDict(populate_by_name=True)


class StatsResponse(BaseModel):
    """Cache counters for both relay caches plus limiter configuration."""

    language_cache: CacheStats = Field(..., alias="languageCache")
    explanation_cache: CacheStats = Field(..., alias="explanationCache")
    rate_limit: RateLimitInfo = Field(..., alias="rateLimit")

    model_config = ConfigDict(populate_by_name=True)

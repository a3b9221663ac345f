import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.config import Settings
from app.core.dependencies import get_explanation_service, get_language_service, get_settings
from app.core.errors import LLMAppError, ValidationAppError
from app.core.rate_limit import enforce_rate_limit
from app.schemas.relay import (
    DEFAULT_LANGUAGE_CODE,
    EXPLANATION_FALLBACK,
    DetectLanguageErrorResponse,
    DetectLanguageRequest,
    DetectLanguageResponse,
    ExplainErrorResponse,
    ExplainRequest,
    ExplainResponse,
)
from app.services.explanation_service import ExplanationService
from app.services.language_service import LanguageDetectionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Relay"])

_RATE_LIMITED = {429: {"description": "Too many requests from this client"}}


@router.post(
    "/detect-language",
    response_model=DetectLanguageResponse,
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        500: {"model": DetectLanguageErrorResponse, "description": "Provider failure; defaults to 'en'"},
        **_RATE_LIMITED,
    },
)
async def detect_language(
    payload: DetectLanguageRequest,
    service: LanguageDetectionService = Depends(get_language_service),
    app_settings: Settings = Depends(get_settings),
):
    """Detect the ISO 639-1 language code of a text.

    Missing, empty or whitespace-only text yields "en" without calling the
    provider, whatever its length. Provider failures return "en" with
    status 500 instead of an error page.
    """
    if not payload.text or not payload.text.strip():
        return DetectLanguageResponse(detected_language=DEFAULT_LANGUAGE_CODE)

    max_chars = app_settings.app.max_text_chars
    if len(payload.text) > max_chars:
        raise ValidationAppError(
            code="text_too_long",
            message=f"Text exceeds {max_chars} characters",
            details={"hint": "Send a shorter excerpt; a sentence is enough to detect a language"},
        )

    try:
        result = await service.detect(payload.text)
    except LLMAppError as exc:
        logger.error(
            "relay.detect.failed",
            extra={"error_code": exc.code, "error_message": exc.message},
        )
        body = DetectLanguageErrorResponse(detected_language=DEFAULT_LANGUAGE_CODE)
        return JSONResponse(status_code=500, content=body.model_dump(by_alias=True))

    logger.info(
        "relay.detect.completed",
        extra={"language": result.language, "cached": result.cached},
    )
    return DetectLanguageResponse(detected_language=result.language)


@router.post(
    "/explain",
    response_model=ExplainResponse,
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        500: {"model": ExplainErrorResponse, "description": "Provider failure; fallback message"},
        **_RATE_LIMITED,
    },
)
async def explain(
    payload: ExplainRequest,
    service: ExplanationService = Depends(get_explanation_service),
):
    """Explain a word to a child of the given age, in the given language."""
    try:
        result = await service.explain(payload.word, payload.age, payload.language)
    except LLMAppError as exc:
        logger.error(
            "relay.explain.failed",
            extra={"error_code": exc.code, "error_message": exc.message},
        )
        body = ExplainErrorResponse(explanation=EXPLANATION_FALLBACK)
        return JSONResponse(status_code=500, content=body.model_dump())

    logger.info(
        "relay.explain.completed",
        extra={"age": payload.age, "language": payload.language, "cached": result.cached},
    )
    return ExplainResponse(explanation=result.explanation)

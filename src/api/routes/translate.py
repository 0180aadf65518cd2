"""
Translation Endpoint
"""
import asyncio

from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError

from src.core.rate_limiter import client_key_for
from src.models.schemas import TranslationRequest, TranslationResponse
from src.services.translation_service import TranslationService, get_translation_service
from src.utils.exceptions import (
    MethodNotAllowedException,
    SlangifyException,
    ValidationException,
)
from src.utils.logger import setup_logger

logger = setup_logger(__name__)
router = APIRouter()


async def _read_request(request: Request, timeout: float) -> TranslationRequest:
    """Parse the JSON body; anything malformed or too slow is a VALIDATION_ERROR."""
    try:
        body = await asyncio.wait_for(request.json(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"⏱️ Request body not received within {timeout}s")
        raise ValidationException("Request body was not received in time.")
    except ValueError:
        raise ValidationException()

    if not isinstance(body, dict):
        raise ValidationException()

    try:
        return TranslationRequest.model_validate(body)
    except ValidationError:
        raise ValidationException()


@router.options("/translate", status_code=204)
async def translate_preflight():
    """CORS pre-flight; headers are added by the app middleware."""
    return Response(status_code=204)


@router.api_route("/translate", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def translate_method_not_allowed():
    raise MethodNotAllowedException()


@router.post("/translate", response_model=TranslationResponse, response_model_by_alias=True)
async def translate_text(
    request: Request,
    service: TranslationService = Depends(get_translation_service),
):
    """
    Translate text into every generation's slang.

    Args:
        request: Raw request; body is ``{"text": str, "deviceId"?: str}``

    Returns:
        TranslationResponse with ``output`` and ``cached``
    """
    try:
        service.ensure_enabled()

        payload = await _read_request(request, service.settings.REQUEST_BODY_TIMEOUT)
        client_key = client_key_for(
            payload.device_id,
            request.headers.get("x-forwarded-for"),
            request.client.host if request.client else None,
        )
        logger.info(f"🌐 Translation request from {client_key} (length: {len(payload.text)} chars)")

        result, cached = await service.translate(payload.text, client_key)
        return TranslationResponse(output=result, cached=cached)

    except SlangifyException:
        raise
    except Exception:
        logger.exception("Unexpected error during translation")
        raise SlangifyException()

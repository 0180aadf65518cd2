"""
Client for the Slangify translation backend.

Front-ends call the backend through this module; no provider API keys live
here. Every failure comes back as a TranslateError with a user-facing
message.
"""
import os
import platform
from dataclasses import dataclass
from typing import Optional

import requests

from src.models.schemas import TranslationResult

# --- Configuration ---
BACKEND_URL = os.getenv("BACKEND_URL", "")
REQUEST_TIMEOUT = 30  # seconds


@dataclass
class TranslateError:
    code: str
    message: str
    retry_after: Optional[int] = None


@dataclass
class TranslateResponse:
    success: bool
    output: Optional[TranslationResult] = None
    error: Optional[TranslateError] = None
    cached: bool = False


class TranslationError(Exception):
    """Raised by translate() with the backend's code and message."""

    def __init__(self, error: TranslateError):
        super().__init__(error.message)
        self.code = error.code
        self.retry_after = error.retry_after


def get_device_id() -> str:
    """Stable-ish identifier for backend rate limiting."""
    return f"{platform.node() or 'unknown'}-{platform.machine() or 'unknown'}"


def _failure(code: str, message: str, retry_after: Optional[int] = None) -> TranslateResponse:
    return TranslateResponse(success=False, error=TranslateError(code, message, retry_after))


def translate_via_backend(
    text: str,
    device_id: Optional[str] = None,
    url: Optional[str] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> TranslateResponse:
    """
    POST ``text`` to the backend and interpret the reply.

    Args:
        text: Text to translate
        device_id: Rate-limit identity; derived from the host when omitted
        url: Backend endpoint, defaults to BACKEND_URL
        timeout: Seconds before the request is abandoned

    Returns:
        TranslateResponse with either ``output`` or ``error`` set
    """
    url = url or BACKEND_URL
    if not url:
        return _failure(
            "SERVER_ERROR",
            "Translation service is not configured. Please set up the backend endpoint.",
        )

    # Quick local check before spending a round trip
    if not isinstance(text, str) or not text.strip():
        return _failure("INVALID_INPUT", "Please enter some text to translate.")

    try:
        response = requests.post(
            url,
            json={"text": text.strip(), "deviceId": device_id or get_device_id()},
            timeout=timeout,
        )
    except requests.Timeout:
        return _failure(
            "NETWORK_ERROR",
            "Request timed out. Please check your connection and try again.",
        )
    except requests.ConnectionError:
        return _failure(
            "NETWORK_ERROR",
            "Connection error. Please check your internet and try again.",
        )

    try:
        data = response.json()
    except ValueError:
        return _failure("PARSE_ERROR", "Unable to process server response. Please try again.")

    if not response.ok:
        data = data if isinstance(data, dict) else {}
        return _failure(
            data.get("code") or "SERVER_ERROR",
            data.get("error") or "Translation failed. Please try again.",
            data.get("retryAfter"),
        )

    if not isinstance(data, dict) or not data.get("output"):
        return _failure("SERVER_ERROR", "Invalid response from server. Please try again.")

    try:
        output = TranslationResult.model_validate(data["output"])
    except ValueError:
        return _failure("PARSE_ERROR", "Unable to process server response. Please try again.")

    return TranslateResponse(success=True, output=output, cached=bool(data.get("cached")))


def translate(text: str) -> TranslationResult:
    """Translate via the backend or raise TranslationError."""
    response = translate_via_backend(text)
    if not response.success or response.output is None:
        raise TranslationError(
            response.error or TranslateError("SERVER_ERROR", "Translation failed. Please try again.")
        )
    return response.output

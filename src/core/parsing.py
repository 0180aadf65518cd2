"""
Defensive parsing of chat-completion responses into TranslationResult.

Each stage raises the matching LLMException subclass so callers can map
failures straight to error codes:

    raw body -> envelope (PARSE_ERROR)
             -> message content (INCOMPLETE_RESPONSE)
             -> JSON object, with trailing-object recovery (PARSE_ERROR)
             -> schema-checked result (INCOMPLETE_RESPONSE)
"""
import json
import re
from typing import Any, Dict

from pydantic import ValidationError

from src.models.schemas import TranslationResult
from src.utils.exceptions import IncompleteResponseException, ParseException
from src.utils.logger import setup_logger, truncate

logger = setup_logger(__name__)

# Largest {...} block that runs to the end of the text
_TRAILING_OBJECT = re.compile(r"\{.*\}\s*$", re.DOTALL)


def parse_envelope(raw: str) -> Dict[str, Any]:
    """Decode the provider's JSON envelope."""
    try:
        envelope = json.loads(raw)
    except (TypeError, ValueError):
        logger.error(f"Provider returned non-JSON envelope: {truncate(raw)}")
        raise ParseException()

    if not isinstance(envelope, dict):
        logger.error(f"Provider envelope is not an object: {truncate(raw)}")
        raise ParseException()
    return envelope


def extract_content(envelope: Dict[str, Any]) -> str:
    """Pull ``choices[0].message.content`` out of the envelope, trimmed."""
    try:
        content = envelope["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None

    if not isinstance(content, str) or not content.strip():
        logger.error(f"Empty content from provider: {truncate(json.dumps(envelope), 800)}")
        raise IncompleteResponseException()
    return content.strip()


def parse_content(content: str) -> Dict[str, Any]:
    """
    Decode the model's text as a JSON object.

    If the model leaked prose around the JSON, fall back to the trailing
    brace-delimited block. Never guesses beyond that.
    """
    try:
        data = json.loads(content)
    except ValueError:
        match = _TRAILING_OBJECT.search(content)
        if not match:
            logger.error(f"Could not parse model JSON: {truncate(content)}")
            raise ParseException()
        try:
            data = json.loads(match.group(0))
        except ValueError:
            logger.error(f"Model JSON parse error: {truncate(match.group(0))}")
            raise ParseException()

    if not isinstance(data, dict):
        logger.error(f"Model JSON is not an object: {truncate(content)}")
        raise IncompleteResponseException()
    return data


def validate_result(data: Dict[str, Any]) -> TranslationResult:
    """Enforce the result schema; anything partial is rejected."""
    try:
        return TranslationResult.model_validate(data)
    except ValidationError as e:
        logger.error(
            f"Result structure invalid/incomplete ({e.error_count()} errors): "
            f"{truncate(json.dumps(data), 800)}"
        )
        raise IncompleteResponseException()


def parse_translation(raw: str) -> TranslationResult:
    """Run the full pipeline over a raw provider response body."""
    envelope = parse_envelope(raw)
    content = extract_content(envelope)
    return validate_result(parse_content(content))

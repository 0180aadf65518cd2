"""
Input validation for text submitted to the translator.
"""
from src.utils.exceptions import ErrorCode, ValidationException


def validate_text(text, max_characters: int = 80, max_words: int = 20) -> str:
    """
    Check submitted text against the length and word-count limits.

    Args:
        text: Untrusted user input
        max_characters: Maximum length after trimming
        max_words: Maximum number of whitespace-separated words

    Returns:
        The trimmed text

    Raises:
        ValidationException: with INVALID_INPUT, INPUT_TOO_LONG or TOO_MANY_WORDS
    """
    if not isinstance(text, str) or not text.strip():
        raise ValidationException(
            "Please enter some text to translate.",
            code=ErrorCode.INVALID_INPUT,
        )

    trimmed = text.strip()
    if len(trimmed) > max_characters:
        raise ValidationException(
            f"Text is too long. Please keep it under {max_characters} characters.",
            code=ErrorCode.INPUT_TOO_LONG,
        )

    if len(trimmed.split()) > max_words:
        raise ValidationException(
            f"Too many words. Please keep it under {max_words} words.",
            code=ErrorCode.TOO_MANY_WORDS,
        )

    return trimmed

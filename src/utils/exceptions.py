"""
Custom exceptions and the error-code vocabulary of the API.
"""
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Error codes returned to clients in the ``code`` field."""
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    INPUT_TOO_LONG = "INPUT_TOO_LONG"
    TOO_MANY_WORDS = "TOO_MANY_WORDS"
    RATE_LIMITED = "RATE_LIMITED"
    SERVICE_DISABLED = "SERVICE_DISABLED"
    PARSE_ERROR = "PARSE_ERROR"
    INCOMPLETE_RESPONSE = "INCOMPLETE_RESPONSE"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_STATUS = {
    ErrorCode.METHOD_NOT_ALLOWED: 405,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.INPUT_TOO_LONG: 400,
    ErrorCode.TOO_MANY_WORDS: 400,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.SERVICE_DISABLED: 503,
    ErrorCode.PARSE_ERROR: 502,
    ErrorCode.INCOMPLETE_RESPONSE: 502,
    ErrorCode.UPSTREAM_ERROR: 502,
    ErrorCode.SERVER_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}


class SlangifyException(Exception):
    """Base exception for the Slangify API.

    ``message`` is always safe to show to the end user.
    """
    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None, code: Optional[ErrorCode] = None,
                 retry_after: Optional[int] = None):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        self.retry_after = retry_after
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.code]


class MethodNotAllowedException(SlangifyException):
    """Exception raised for any method other than POST/OPTIONS."""
    code = ErrorCode.METHOD_NOT_ALLOWED
    default_message = "Method not allowed"


class ValidationException(SlangifyException):
    """Exception raised during input validation."""
    code = ErrorCode.VALIDATION_ERROR
    default_message = "Invalid request body."


class RateLimitException(SlangifyException):
    """Exception raised when a client (or we, upstream) are throttled."""
    code = ErrorCode.RATE_LIMITED
    default_message = "Too many requests. Please try again later."


class ServiceDisabledException(SlangifyException):
    """Exception raised while the kill switch is on."""
    code = ErrorCode.SERVICE_DISABLED
    default_message = "Translation service is temporarily unavailable."


class LLMException(SlangifyException):
    """Exception raised when the model provider call fails."""
    code = ErrorCode.UPSTREAM_ERROR
    default_message = "Translation failed. Please try again."


class ParseException(LLMException):
    """Exception raised when provider output is not parseable JSON."""
    code = ErrorCode.PARSE_ERROR
    default_message = "Could not parse translation."


class IncompleteResponseException(LLMException):
    """Exception raised when provider output does not match the result schema."""
    code = ErrorCode.INCOMPLETE_RESPONSE
    default_message = "Translation response was incomplete."


class ConfigurationException(SlangifyException):
    """Exception raised when the service is misconfigured (e.g. missing API key)."""
    code = ErrorCode.SERVER_ERROR
    default_message = "Translation service is not configured."

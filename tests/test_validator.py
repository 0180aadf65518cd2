"""
Tests for src/core/validator.py
"""
import pytest

from src.core.validator import validate_text
from src.utils.exceptions import ErrorCode, ValidationException


class TestValidateText:

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None, 42])
    def test_blank_or_non_string_is_invalid(self, text):
        with pytest.raises(ValidationException) as exc:
            validate_text(text)
        assert exc.value.code == ErrorCode.INVALID_INPUT
        assert exc.value.status_code == 400

    def test_returns_trimmed_text(self):
        assert validate_text("   That's so fetch  ") == "That's so fetch"

    def test_exactly_max_characters_is_allowed(self):
        assert validate_text("a" * 80) == "a" * 80

    def test_too_long(self):
        with pytest.raises(ValidationException) as exc:
            validate_text("a" * 81)
        assert exc.value.code == ErrorCode.INPUT_TOO_LONG
        assert "80 characters" in exc.value.message

    def test_length_is_measured_after_trimming(self):
        assert validate_text("   " + "a" * 80 + "   ") == "a" * 80

    def test_twenty_words_is_allowed(self):
        validate_text(" ".join(["yo"] * 20))

    def test_too_many_words(self):
        with pytest.raises(ValidationException) as exc:
            validate_text(" ".join(["yo"] * 21))
        assert exc.value.code == ErrorCode.TOO_MANY_WORDS
        assert "20 words" in exc.value.message

    def test_custom_limits(self):
        with pytest.raises(ValidationException) as exc:
            validate_text("one two three", max_characters=80, max_words=2)
        assert exc.value.code == ErrorCode.TOO_MANY_WORDS

"""
Unit tests for the value validators and error helpers.
"""

import logging

import pytest

from statusmon.validation import (
    ErrorSeverity,
    ValidationError,
    handle_cli_error,
    handle_error,
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
)


@pytest.mark.unit
class TestNumericValidators:
    """Test cases for integer and float validation."""

    def test_integer_in_range(self):
        assert validate_positive_integer("12", min_value=1, max_value=20) == 12

    def test_integer_below_minimum(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_positive_integer(0, field_name="drivers.top_modules")

        assert exc_info.value.field_name == "drivers.top_modules"
        assert ">= 1" in str(exc_info.value)

    def test_integer_above_maximum(self):
        with pytest.raises(ValidationError):
            validate_positive_integer(65, max_value=64)

    def test_booleans_are_rejected(self):
        with pytest.raises(ValidationError):
            validate_positive_integer(True)
        with pytest.raises(ValidationError):
            validate_positive_float(False)

    def test_float_from_int(self):
        assert validate_positive_float(2, min_value=0.1) == 2.0

    def test_float_not_a_number(self):
        with pytest.raises(ValidationError):
            validate_positive_float("fast")


@pytest.mark.unit
class TestChoiceValidators:
    """Test cases for enum and string validation."""

    def test_case_insensitive_returns_canonical_spelling(self):
        assert validate_enum_choice("debug", ["DEBUG", "INFO"], case_sensitive=False) == "DEBUG"

    def test_case_sensitive_mismatch(self):
        with pytest.raises(ValidationError):
            validate_enum_choice("CPU", ["cpu", "memory"])

    def test_non_string_choice(self):
        with pytest.raises(ValidationError):
            validate_enum_choice(3, ["cpu", "memory"])

    def test_non_empty_string_is_stripped(self):
        assert validate_non_empty_string("  pkexec ") == "pkexec"

    def test_blank_string(self):
        with pytest.raises(ValidationError):
            validate_non_empty_string("   ")


@pytest.mark.unit
class TestErrorHandling:
    """Test cases for handle_error and handle_cli_error."""

    def test_reraise(self):
        with pytest.raises(RuntimeError):
            handle_error(RuntimeError("boom"), "testing", reraise=True)

    def test_logged_without_reraise(self, caplog):
        test_logger = logging.getLogger("statusmon.tests")
        with caplog.at_level(logging.WARNING, logger="statusmon.tests"):
            handle_error(RuntimeError("boom"), "testing", severity=ErrorSeverity.WARNING,
                         reraise=False, logger=test_logger)

        assert "Error in testing: boom" in caplog.text

    def test_string_severity(self, caplog):
        test_logger = logging.getLogger("statusmon.tests")
        with caplog.at_level(logging.INFO, logger="statusmon.tests"):
            handle_error(ValueError("odd"), "testing", severity="info", reraise=False, logger=test_logger)

        assert "odd" in caplog.text

    def test_cli_error_exits_with_code(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ValueError("bad flag"), "argument parsing", exit_code=2)

        assert exc_info.value.code == 2

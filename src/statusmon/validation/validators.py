"""
Value validation functions.

Small, composable validators used by the configuration layer and the CLI.
Each one returns the normalized value or raises ValidationError naming the
offending field.
"""

from typing import Any, Callable, List, Optional, TypeVar

from .exceptions import ValidationError

Number = TypeVar("Number", int, float)


def _fail(field_name: str, value: Any, message: str) -> None:
    raise ValidationError(f"{field_name} {message}", field_name=field_name, value=value)


def _coerce_in_range(
    value: Any,
    convert: Callable[[Any], Number],
    kind: str,
    min_value: Number,
    max_value: Optional[Number],
    field_name: str,
) -> Number:
    # bool is an int subclass; True must not pass as 1.
    if isinstance(value, bool):
        _fail(field_name, value, f"must be a valid {kind}, got {value}")
    try:
        converted = convert(value)
    except (ValueError, TypeError):
        _fail(field_name, value, f"must be a valid {kind}, got {value}")
    if converted < min_value:
        _fail(field_name, value, f"must be >= {min_value}, got {converted}")
    if max_value is not None and converted > max_value:
        _fail(field_name, value, f"must be <= {max_value}, got {converted}")
    return converted


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is an integer inside the given bounds.

    Used for line counts, worker counts, capacities and the log filter and
    priority ids (with min_value=0).

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    return _coerce_in_range(value, int, "integer", min_value, max_value, field_name)


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """Validate a number of seconds (poll interval, command timeout) inside bounds."""
    return _coerce_in_range(value, float, "number", min_value, max_value, field_name)


def validate_enum_choice(
    value: Any,
    valid_choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Returns:
        The matching choice as spelled in valid_choices, so "debug" with
        case_sensitive=False comes back as "DEBUG"

    Raises:
        ValidationError: If the value is not a string or not a choice
    """
    if not isinstance(value, str):
        _fail(field_name, value, f"must be a string, got {type(value).__name__}")

    for choice in valid_choices:
        if choice == value or (not case_sensitive and choice.lower() == value.lower()):
            return choice

    _fail(field_name, value, f"must be one of {valid_choices}, got '{value}'")


def validate_non_empty_string(value: Any, field_name: str = "value") -> str:
    """Validate that a value is a non-blank string and return it stripped."""
    if not isinstance(value, str) or not value.strip():
        _fail(field_name, value, "must be a non-empty string")
    return value.strip()

"""
Opencode SDK - Input validation helpers.

Provides validation functions for client-side parameter checking before any
request is built. Every failure is a ParamValidationError naming the field.
"""

from typing import Any

from .exceptions import ParamValidationError


def validate_required(value: Any, field_name: str) -> None:
    """Validate that a required field is set and not empty."""
    if value is None:
        raise ParamValidationError(field_name, "is required")
    if isinstance(value, str) and value == "":
        raise ParamValidationError(field_name, "cannot be empty")
    if isinstance(value, (list, tuple, dict)) and not value:
        raise ParamValidationError(field_name, "cannot be empty")


def validate_path_param(value: Any, field_name: str) -> None:
    """Validate a resource identifier substituted into the URL path."""
    validate_required(value, field_name)
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise ParamValidationError(field_name, "must be a string")
    if isinstance(value, str) and not value.strip():
        raise ParamValidationError(field_name, "cannot be blank")


def validate_in_list(value: Any, field_name: str, allowed_values: list) -> None:
    """Validate that a value is in a list of allowed values."""
    if value is None:
        return

    if value not in allowed_values:
        raise ParamValidationError(
            field_name,
            f"must be one of: {', '.join(str(v) for v in allowed_values)}",
        )


def validate_dict(value: Any, field_name: str) -> None:
    """Validate that a value is a dictionary."""
    if value is None:
        return

    if not isinstance(value, dict):
        raise ParamValidationError(field_name, "must be a dictionary")

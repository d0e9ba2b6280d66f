"""
Error types for treatment planning.

Two failures reach the caller: stage/grade text that is not a number
(reported by the request boundary before the core runs), and a normalized
field outside its allowed values (reported by the validator). Both carry a
single human-readable message that is shown to the user verbatim.
"""

from typing import Any


class NavigatorError(Exception):
    """Base exception for all treatment planning errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class UpstreamParseError(NavigatorError):
    """Stage or grade text could not be read as an integer."""

    DEFAULT_MESSAGE = "Please enter valid numeric values for Tumor Stage and Tumor Grade."

    def __init__(
        self,
        field: str,
        raw_value: Any,
        message: str = DEFAULT_MESSAGE,
    ):
        super().__init__(
            message=message,
            code="NON_NUMERIC_INPUT",
            details={"field": field, "value": raw_value},
        )
        self.field = field
        self.raw_value = raw_value


class ValidationError(NavigatorError):
    """A normalized input field is outside its enumerated domain."""

    def __init__(
        self,
        message: str,
        field: str,
        value: Any,
        valid_options: list[Any],
    ):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field, "value": value, "valid_options": valid_options},
        )
        self.field = field
        self.value = value
        self.valid_options = valid_options

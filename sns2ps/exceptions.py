"""Custom exception hierarchy for sns2ps.

Provides structured exceptions with error context and correction hints so the
service layer and the CLI can turn failures into specific user-facing messages.
"""

from enum import Enum
from typing import Any


class Sns2psError(Exception):
    """Base exception for all sns2ps errors.

    Attributes:
        message: Human-readable error message.
        error_data: Structured error information.
        suggestion: Hint for how to resolve the error.
    """

    def __init__(
        self,
        message: str,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize the error.

        Args:
            message: Human-readable error message.
            error_data: Structured context (URLs, IDs, fields, etc.).
            suggestion: Actionable correction hint.
        """
        super().__init__(message)
        self.message = message
        self.error_data = error_data or {}
        self.suggestion = suggestion

    def __str__(self) -> str:
        """Return formatted error message with suggestion if available."""
        base = self.message
        if self.suggestion:
            return f"{base}\nSuggestion: {self.suggestion}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to structured dictionary for logging.

        Returns:
            Dictionary with error type, message, data, and suggestion.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_data": self.error_data,
            "suggestion": self.suggestion,
        }


class FetchErrorKind(Enum):
    """Classification of a failed remote fetch."""

    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"

    @classmethod
    def from_status(cls, status_code: int | None) -> "FetchErrorKind":
        """Map an HTTP status code to a fetch error kind."""
        if status_code in (401, 403):
            return cls.UNAUTHORIZED
        if status_code == 404:
            return cls.NOT_FOUND
        return cls.TRANSPORT


class FetchError(Sns2psError):
    """Remote fetch failures, classified by ``kind``.

    Examples:
        - Wrong username or password (UNAUTHORIZED)
        - Unknown match ID (NOT_FOUND)
        - Connection timeout, HTTP 500, undecodable body (TRANSPORT)
    """

    def __init__(
        self,
        message: str,
        kind: FetchErrorKind = FetchErrorKind.TRANSPORT,
        url: str | None = None,
        status_code: int | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize fetch error.

        Args:
            message: Human-readable error message.
            kind: Classification of the failure.
            url: The URL that failed.
            status_code: HTTP status code if applicable.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update({"url": url, "status_code": status_code, "kind": kind.value})

        if suggestion is None:
            if kind is FetchErrorKind.UNAUTHORIZED:
                suggestion = "Check the Shoot 'n Score It username and password."
            elif kind is FetchErrorKind.NOT_FOUND:
                suggestion = "Check the match ID."
            else:
                suggestion = (
                    "Check network connectivity. If the error persists, "
                    "Shoot 'n Score It may be temporarily unavailable."
                )

        super().__init__(message, data, suggestion)
        self.kind = kind
        self.url = url
        self.status_code = status_code


class ParseError(Sns2psError):
    """Payload decoding failures (structure doesn't match expectations).

    Examples:
        - Match payload is not a JSON object
        - Squad list is not a JSON array
        - Match has no name
    """

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        field: str | None = None,
        snippet: str | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize parse error.

        Args:
            message: Human-readable error message.
            resource: Resource being decoded (match, squads, competitors).
            field: Field name that failed to decode.
            snippet: Relevant payload snippet (truncated).
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update(
            {
                "resource": resource,
                "field": field,
                "snippet": snippet[:500] if snippet else None,
            }
        )

        default_suggestion = suggestion or (
            "The Shoot 'n Score It API format may have changed. "
            "Review the model decoding in sns2ps.models."
        )

        super().__init__(message, data, default_suggestion)
        self.resource = resource
        self.field = field


class ValidationError(Sns2psError):
    """Request validation failures (required input is missing).

    Examples:
        - Missing match ID
        - Missing username or password
    """

    def __init__(
        self,
        message: str,
        fields: list[str] | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize validation error.

        Args:
            message: Human-readable error message.
            fields: Names of the missing fields.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update({"fields": fields or []})

        default_suggestion = suggestion or (
            f"Supply a value for: {', '.join(fields)}."
            if fields
            else "Supply the match ID, username and password."
        )

        super().__init__(message, data, default_suggestion)
        self.fields = fields or []


class ConfigurationError(Sns2psError):
    """Invalid configuration or CLI arguments.

    Examples:
        - Non-numeric PORT
        - Non-positive timeout
    """

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        expected_format: str | None = None,
        example: str | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize configuration error.

        Args:
            message: Human-readable error message.
            parameter: Parameter name that's invalid.
            expected_format: Expected format for the parameter.
            example: Example of valid value.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update(
            {
                "parameter": parameter,
                "expected_format": expected_format,
                "example": example,
            }
        )

        default_suggestion = suggestion or (
            f"Parameter '{parameter}' must be in format: {expected_format}. "
            f"Example: {example}"
            if parameter and expected_format and example
            else "Check the environment variables and command-line arguments."
        )

        super().__init__(message, data, default_suggestion)
        self.parameter = parameter
        self.expected_format = expected_format
        self.example = example


class ExportError(Sns2psError):
    """CSV rendering failures.

    Examples:
        - A field that cannot be encoded as UTF-8
    """

    def __init__(
        self,
        message: str,
        row: int | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        data = error_data or {}
        data.update({"row": row})
        super().__init__(
            message,
            data,
            suggestion or "Check the competitor data for invalid characters.",
        )
        self.row = row

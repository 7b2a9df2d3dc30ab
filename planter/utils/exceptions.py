"""
Domain exceptions for Planter backend.

Services raise these; routes let them bubble up to the exception handler
registered in planter/main.py, which renders ``to_dict()`` with the
exception's HTTP status code.

The three completion failures (ExternalServiceError, EmptyResponseError,
ParseError) share the GenerationError base so recommendation generation can
treat them as one recoverable group while chat surfaces them unchanged.
"""

from typing import Any, Dict, Optional

from fastapi import status


class PlanterError(Exception):
    """Base exception for all Planter domain errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or "internal_error"
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the API error body shape."""
        body: Dict[str, Any] = {"error": self.error_code, "details": self.message}
        if self.details:
            body["context"] = self.details
        return body


class ValidationError(PlanterError):
    """Malformed questionnaire or chat input."""

    def __init__(self, message: str = "Invalid input", field: Optional[str] = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            error_code="validation_error",
        )


class NotFoundError(PlanterError):
    """Unknown questionnaire, session or plant."""

    def __init__(self, resource_type: str, resource_id: Optional[str] = None):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            message=f"{resource_type} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="not_found",
        )


class AuthorizationError(PlanterError):
    """
    Ownership mismatch on a user-owned resource.

    The message is deliberately generic so the response does not confirm
    that the resource exists for someone else.
    """

    def __init__(self, message: str = "Access to this resource is forbidden"):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="forbidden",
        )


class GenerationError(PlanterError):
    """Base for failures of the completion pipeline."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, error_code: str = "generation_error"):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            error_code=error_code,
        )


class ExternalServiceError(GenerationError):
    """Completion endpoint returned non-2xx or could not be reached."""

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        details = {"upstream_status": upstream_status} if upstream_status is not None else None
        super().__init__(message, details=details, error_code="external_service_error")


class EmptyResponseError(GenerationError):
    """Completion endpoint answered without any alternatives."""

    def __init__(self, message: str = "Completion response contained no alternatives"):
        super().__init__(message, error_code="empty_response")


class ParseError(GenerationError):
    """No recommendation could be extracted from the model text."""

    def __init__(self, message: str = "Failed to parse any recommendations from response"):
        super().__init__(message, error_code="parse_error")

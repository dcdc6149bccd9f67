"""
Standardized error handling for the Newsdesk API.

Provides consistent error codes, exception classes, and response formatting.
"""

import logging
import uuid
from enum import Enum
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Authentication/Authorization (401/403)
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    RATE_LIMITED = "RATE_LIMITED"

    # Resource errors (404/409)
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE = "DUPLICATE"
    CONFLICT = "CONFLICT"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"

    # External service errors
    PUSH_DELIVERY_ERROR = "PUSH_DELIVERY_ERROR"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Error Response Schema
# =============================================================================

@dataclass
class ErrorDetail:
    """Detailed error information."""
    code: ErrorCode
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "code": self.code.value if isinstance(self.code, ErrorCode) else self.code,
            "message": self.message,
        }
        if self.field:
            result["field"] = self.field
        if self.details:
            result["details"] = self.details
        return result


@dataclass
class ErrorResponse:
    """Standardized error response."""
    error: ErrorDetail
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error.to_dict(),
            "request_id": self.request_id,
        }

    def to_response(self, status_code: int = 400) -> Response:
        return Response(self.to_dict(), status=status_code)


# =============================================================================
# Custom Exceptions
# =============================================================================

class NewsdeskException(APIException):
    """Base exception for Newsdesk API errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.INTERNAL_ERROR
    default_detail = "An error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_detail
        self.error_code = code or self.error_code
        self.field = field
        self.error_details = details or {}

        if status_code:
            self.status_code = status_code

        super().__init__(detail=self.message)

    def get_error_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        return ErrorResponse(
            error=ErrorDetail(
                code=self.error_code,
                message=self.message,
                field=self.field,
                details=self.error_details if self.error_details else None,
            ),
            request_id=request_id or str(uuid.uuid4()),
        )


class ValidationError(NewsdeskException):
    """Validation error."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.VALIDATION_ERROR
    default_detail = "Validation failed"


class NotFoundError(NewsdeskException):
    """Resource not found."""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = ErrorCode.NOT_FOUND
    default_detail = "Resource not found"


class DuplicateError(NewsdeskException):
    """Duplicate resource."""
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCode.DUPLICATE
    default_detail = "Resource already exists"


class ConflictError(NewsdeskException):
    """Request conflicts with the current state of the resource."""
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCode.CONFLICT
    default_detail = "Request conflicts with current state"


class LimitExceededError(NewsdeskException):
    """A capacity limit would be exceeded."""
    status_code = status.HTTP_409_CONFLICT
    error_code = ErrorCode.LIMIT_EXCEEDED
    default_detail = "Limit exceeded"


class PushDeliveryError(NewsdeskException):
    """Push provider is misconfigured or unreachable."""
    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = ErrorCode.PUSH_DELIVERY_ERROR
    default_detail = "Push delivery failed"


# =============================================================================
# Exception Handler
# =============================================================================

def get_request_id(request) -> str:
    """Get or generate request ID from request."""
    if hasattr(request, 'request_id'):
        return request.request_id
    return str(uuid.uuid4())


def newsdesk_exception_handler(exc, context):
    """
    Custom exception handler for the Newsdesk API.

    Converts all exceptions to standardized error response format.
    """
    request = context.get('request')
    request_id = get_request_id(request) if request else str(uuid.uuid4())

    # Handle our custom exceptions
    if isinstance(exc, NewsdeskException):
        error_response = exc.get_error_response(request_id)
        logger.warning(
            "API Error: %s",
            exc.error_code.value,
            extra={
                "error_code": exc.error_code.value,
                "error_message": exc.message,
                "field": exc.field,
                "status_code": exc.status_code,
            }
        )
        return error_response.to_response(exc.status_code)

    # Handle Django validation errors
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            details = exc.message_dict
            message = "Validation failed"
        else:
            details = {"errors": exc.messages}
            message = exc.messages[0] if exc.messages else "Validation failed"

        error_response = ErrorResponse(
            error=ErrorDetail(
                code=ErrorCode.VALIDATION_ERROR,
                message=message,
                details=details,
            ),
            request_id=request_id,
        )
        return error_response.to_response(status.HTTP_400_BAD_REQUEST)

    # Handle 404
    if isinstance(exc, Http404):
        error_response = ErrorResponse(
            error=ErrorDetail(
                code=ErrorCode.NOT_FOUND,
                message=str(exc) if str(exc) else "Resource not found",
            ),
            request_id=request_id,
        )
        return error_response.to_response(status.HTTP_404_NOT_FOUND)

    # Use DRF's default handler for standard exceptions
    response = drf_exception_handler(exc, context)

    if response is not None:
        error_code = ErrorCode.VALIDATION_ERROR
        if response.status_code == 401:
            error_code = ErrorCode.AUTHENTICATION_REQUIRED
        elif response.status_code == 403:
            error_code = ErrorCode.PERMISSION_DENIED
        elif response.status_code == 404:
            error_code = ErrorCode.NOT_FOUND
        elif response.status_code == 429:
            error_code = ErrorCode.RATE_LIMITED
        elif response.status_code >= 500:
            error_code = ErrorCode.INTERNAL_ERROR

        # Extract message from DRF response
        if isinstance(response.data, dict):
            if 'detail' in response.data:
                message = str(response.data['detail'])
                details = None
            else:
                message = "Validation failed"
                details = response.data
        elif isinstance(response.data, list):
            message = str(response.data[0]) if response.data else "Error"
            details = {"errors": response.data}
        else:
            message = str(response.data)
            details = None

        error_response = ErrorResponse(
            error=ErrorDetail(
                code=error_code,
                message=message,
                details=details,
            ),
            request_id=request_id,
        )
        return error_response.to_response(response.status_code)

    # Unhandled exception - log and return generic error
    logger.exception("Unhandled exception: %s", type(exc).__name__)

    error_response = ErrorResponse(
        error=ErrorDetail(
            code=ErrorCode.INTERNAL_ERROR,
            message="An unexpected error occurred",
        ),
        request_id=request_id,
    )
    return error_response.to_response(status.HTTP_500_INTERNAL_SERVER_ERROR)

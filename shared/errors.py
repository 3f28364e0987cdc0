"""
Shared error handling for the SSO provider services.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class AccessLayerException(Exception):
    """Base exception for the SSO provider services."""

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class AuthenticationError(AccessLayerException):
    """Authentication-related errors."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None,
                 code: str = "AUTHENTICATION_ERROR"):
        super().__init__(code, message, details)


class AuthorizationError(AccessLayerException):
    """Authorization-related errors."""

    status_code = 403

    def __init__(self, message: str = "Authorization failed", details: Optional[Dict[str, Any]] = None,
                 code: str = "AUTHORIZATION_ERROR"):
        super().__init__(code, message, details)


class ExternalServiceError(AccessLayerException):
    """External service errors."""

    status_code = 502

    def __init__(self, service: str, message: str = "External service error",
                 details: Optional[Dict[str, Any]] = None, code: str = "EXTERNAL_SERVICE_ERROR"):
        self.service = service
        super().__init__(code, f"{service}: {message}", details)


class MissingCredentialError(AuthenticationError):
    """No access token where one is required."""

    def __init__(self, message: str = "missing access token", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="MISSING_CREDENTIAL")


class ProfileIncompleteError(AuthenticationError):
    """Introspection succeeded but returned no usable identity."""

    def __init__(self, message: str = "can't find email", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="PROFILE_INCOMPLETE")


class GroupMembershipLostError(AuthorizationError):
    """Refresh-time group re-check found the user no longer authorized."""

    def __init__(self, message: str = "user is no longer in the group(s)", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="GROUP_MEMBERSHIP_LOST")


class RemoteUnavailableError(ExternalServiceError):
    """Transport failure or unexpected status from a remote endpoint."""

    def __init__(self, service: str, message: str = "service unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(service, message, details, code="REMOTE_UNAVAILABLE")


class DecodeError(ExternalServiceError):
    """Malformed response body from a remote endpoint."""

    def __init__(self, service: str, message: str = "malformed response", details: Optional[Dict[str, Any]] = None):
        super().__init__(service, message, details, code="DECODE_ERROR")


class RequestCancelledError(AccessLayerException):
    """Remote call aborted before completion."""

    status_code = 504

    def __init__(self, message: str = "request cancelled", details: Optional[Dict[str, Any]] = None):
        super().__init__("CANCELLED", message, details)

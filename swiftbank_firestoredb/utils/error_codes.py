from enum import Enum
from typing import Any, Dict, Optional

from google.api_core import exceptions as gcp_exceptions


class ErrorCodes:
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503

    @staticmethod
    def get_http_status_code(error: Exception) -> int:
        if isinstance(error, CustomError):
            return error.code
        if isinstance(error, (gcp_exceptions.PermissionDenied, gcp_exceptions.Unauthenticated)):
            return ErrorCodes.FORBIDDEN
        if isinstance(error, gcp_exceptions.NotFound):
            return ErrorCodes.NOT_FOUND
        if isinstance(error, (ValueError, gcp_exceptions.InvalidArgument)):
            return ErrorCodes.BAD_REQUEST
        if isinstance(error, (gcp_exceptions.ServiceUnavailable, gcp_exceptions.DeadlineExceeded)):
            return ErrorCodes.SERVICE_UNAVAILABLE
        return ErrorCodes.INTERNAL_SERVER_ERROR


class ErrorKind(str, Enum):
    NETWORK = "NETWORK_ERROR"
    NOT_FOUND = "NOT_FOUND_ERROR"
    AUTH = "AUTH_ERROR"
    CONFIG = "CONFIG_ERROR"
    VALIDATION = "VALIDATION_ERROR"
    TRANSACTION = "TRANSACTION_ERROR"


class CustomError(Exception):
    """
    Base for every error the sync layer surfaces to callers.

    Callers match on ``kind`` (or the subclass), never on ``message``.
    """

    kind: ErrorKind = ErrorKind.NETWORK
    code: int = ErrorCodes.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def retryable(self) -> bool:
        return self.kind == ErrorKind.NETWORK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }


class NetworkError(CustomError):
    kind = ErrorKind.NETWORK
    code = ErrorCodes.SERVICE_UNAVAILABLE


class NotFoundError(CustomError):
    kind = ErrorKind.NOT_FOUND
    code = ErrorCodes.NOT_FOUND


class AuthError(CustomError):
    kind = ErrorKind.AUTH
    code = ErrorCodes.FORBIDDEN


class ConfigError(CustomError):
    kind = ErrorKind.CONFIG
    code = ErrorCodes.INTERNAL_SERVER_ERROR


class ValidationError(CustomError):
    kind = ErrorKind.VALIDATION
    code = ErrorCodes.BAD_REQUEST


class TransactionError(CustomError):
    kind = ErrorKind.TRANSACTION
    code = ErrorCodes.INTERNAL_SERVER_ERROR


def is_permission_error(error: Exception) -> bool:
    if isinstance(error, (AuthError, gcp_exceptions.PermissionDenied, gcp_exceptions.Unauthenticated)):
        return True
    return "insufficient permissions" in str(error).lower()


def translate_store_error(error: Exception, message: str) -> CustomError:
    """Map a Firestore / google-api-core exception onto the typed error taxonomy."""
    if isinstance(error, CustomError):
        return error
    details = {"cause": str(error), "cause_type": type(error).__name__}
    if is_permission_error(error):
        return AuthError(message, details)
    if isinstance(error, gcp_exceptions.NotFound):
        return NotFoundError(message, details)
    return NetworkError(message, details)

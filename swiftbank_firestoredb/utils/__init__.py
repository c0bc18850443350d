"""
Shared utilities for the sync layer.

This module contains:
- Logging and timing helpers
- Environment configuration
- The typed error taxonomy and the StandardResponse envelope
- Identifier generators
"""

from .error_codes import (
    AuthError,
    ConfigError,
    CustomError,
    ErrorCodes,
    ErrorKind,
    NetworkError,
    NotFoundError,
    TransactionError,
    ValidationError,
)
from .logger import logger
from .standard_response import StandardResponse
from .time_it import time_it
from .time_now import TimeManager

__all__ = [
    "AuthError",
    "ConfigError",
    "CustomError",
    "ErrorCodes",
    "ErrorKind",
    "NetworkError",
    "NotFoundError",
    "TransactionError",
    "ValidationError",
    "logger",
    "StandardResponse",
    "time_it",
    "TimeManager",
]

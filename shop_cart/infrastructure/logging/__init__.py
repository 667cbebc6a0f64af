"""
Logging Infrastructure

Structured logging setup plus error reporting and the cart API error boundary.
"""

from .error_handler import (
    ErrorCategory,
    ErrorReport,
    ErrorReporter,
    ErrorSeverity,
    cart_operation,
    classify_error,
)
from .logger_config import (
    LoggingConfig,
    LoggingConfigOptions,
    get_structured_logger,
    setup_logging,
)

__all__ = [
    "ErrorCategory",
    "ErrorReport",
    "ErrorReporter",
    "ErrorSeverity",
    "cart_operation",
    "classify_error",
    "LoggingConfig",
    "LoggingConfigOptions",
    "get_structured_logger",
    "setup_logging",
]

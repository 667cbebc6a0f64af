"""
Error Handling

Classifies, counts and logs cart errors, and provides the error boundary
decorator that keeps exceptions from escaping the public cart API.
"""

import logging
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, Optional

from shop_cart.infrastructure.utilities.exceptions import (
    CartPersistenceError,
    CartValidationError,
    ShopCartError,
)


class ErrorSeverity(Enum):
    """Error severity levels"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification"""

    VALIDATION = "validation"
    PERSISTENCE = "persistence"
    SYSTEM = "system"


@dataclass
class ErrorReport:
    """Dataclass for error reports"""

    error: Exception
    context: Optional[Dict[str, Any]] = None
    user_id: Optional[str] = None


def classify_error(error: Exception) -> tuple[ErrorCategory, ErrorSeverity]:
    """Category and severity for an exception"""
    if isinstance(error, CartValidationError):
        return ErrorCategory.VALIDATION, ErrorSeverity.LOW
    if isinstance(error, CartPersistenceError):
        return ErrorCategory.PERSISTENCE, ErrorSeverity.HIGH
    return ErrorCategory.SYSTEM, ErrorSeverity.MEDIUM


class ErrorReporter:
    """Error reporting with metrics"""

    MAX_RECENT_ERRORS = 50

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.error_metrics = {
            "total_errors": 0,
            "errors_by_category": {},
            "errors_by_severity": {},
            "recent_errors": [],
        }

    def report_error(self, report: ErrorReport) -> str:
        """Report an error with full context and metrics"""

        # Generate unique error ID
        error_id = f"ERR_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{id(report.error)}"
        category, severity = classify_error(report.error)

        error_details = {
            "error_id": error_id,
            "error_message": str(report.error),
            "error_code": (
                report.error.error_code
                if isinstance(report.error, ShopCartError)
                else "UNKNOWN"
            ),
            "severity": severity.value,
            "category": category.value,
            "context": report.context or {},
            "timestamp": datetime.now().isoformat(),
            "user_id": report.user_id,
        }
        if category is ErrorCategory.SYSTEM:
            error_details["traceback"] = "".join(
                traceback.format_exception(report.error)
            )

        self._update_metrics(error_details)
        self._log_error(error_details)

        return error_id

    def _update_metrics(self, error_details: Dict[str, Any]):
        """Update error metrics"""
        self.error_metrics["total_errors"] += 1

        category = error_details["category"]
        severity = error_details["severity"]

        by_category = self.error_metrics["errors_by_category"]
        by_category[category] = by_category.get(category, 0) + 1

        by_severity = self.error_metrics["errors_by_severity"]
        by_severity[severity] = by_severity.get(severity, 0) + 1

        self.error_metrics["recent_errors"].append(error_details)
        if len(self.error_metrics["recent_errors"]) > self.MAX_RECENT_ERRORS:
            self.error_metrics["recent_errors"].pop(0)

    def _log_error(self, error_details: Dict[str, Any]):
        """Log error with appropriate level"""
        severity = error_details["severity"]

        log_message = (
            "ERROR [%(error_id)s] %(error_message)s "
            "(Code: %(error_code)s, Category: %(category)s, User: %(user_id)s)"
        )

        if severity == ErrorSeverity.CRITICAL.value:
            self.logger.critical(log_message, error_details)
        elif severity == ErrorSeverity.HIGH.value:
            self.logger.error(log_message, error_details)
        elif severity == ErrorSeverity.MEDIUM.value:
            self.logger.error(log_message, error_details)
            if "traceback" in error_details:
                self.logger.debug("%s", error_details["traceback"])
        else:
            self.logger.info(log_message, error_details)

    def get_error_statistics(self) -> Dict[str, Any]:
        """Get error statistics"""
        return {
            "total_errors": self.error_metrics["total_errors"],
            "errors_by_category": dict(self.error_metrics["errors_by_category"]),
            "errors_by_severity": dict(self.error_metrics["errors_by_severity"]),
            "recent_error_count": len(self.error_metrics["recent_errors"]),
        }


def cart_operation(
    failure_message: str,
    result_factory: Optional[Callable[[str], Any]] = None,
):
    """
    Error boundary for async cart API methods.

    Unexpected exceptions are handed to the instance's `_report_failure`
    hook and converted into a failure result built by `result_factory`
    (or the instance's `_failure_response`).
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except Exception as e:
                self._report_failure(func.__name__, e, failure_message)
                factory = result_factory or self._failure_response
                return factory(failure_message)

        return wrapper

    return decorator

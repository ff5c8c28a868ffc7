"""
Error Handling Utilities for the configuration store.

A user-facing application must start even when its configuration is
damaged, so most failures in this package are logged and replaced by a
default value rather than propagated. This module provides the helpers that
make that policy uniform:

1. Detailed error logging with context
2. Error categorization and severity levels
3. A context manager and a decorator that log and drop failures

USAGE:
    from rdconfig.utils.error_handling import (
        handle_error,
        ErrorCategory,
        safe_execute,
        with_error_handling,
    )

    with safe_execute("store peer config", ErrorCategory.FILESYSTEM):
        store_path(path, data)

    @with_error_handling(category=ErrorCategory.CODEC, default_return={})
    def parse():
        ...
"""

import functools
import logging
import sys
import threading
import traceback
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


# =============================================================================
# EXCEPTIONS
# =============================================================================

class ConfigStoreError(Exception):
    """Base exception for configuration store failures."""


class CodecError(ConfigStoreError, ValueError):
    """A persisted field could not be decoded into its declared type."""


class SecretError(ConfigStoreError):
    """A blob could not be encrypted or decrypted."""


# =============================================================================
# CATEGORIES AND SEVERITY
# =============================================================================

class ErrorCategory(Enum):
    """Categories of errors for proper handling and reporting."""
    # Reading, writing or removing files
    FILESYSTEM = "filesystem"

    # Malformed on-disk records
    CODEC = "codec"

    # Field or blob encryption
    CRYPTO = "crypto"

    # Option and settings handling
    CONFIG = "configuration"

    # Platform queries (hostname, MAC address, home directory)
    PLATFORM = "platform"

    # Unknown/uncategorized
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """Detailed context information for an error."""
    error: Exception
    category: ErrorCategory
    severity: ErrorSeverity
    operation: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    thread_name: str = field(default_factory=lambda: threading.current_thread().name)
    stack_trace: str = ""
    additional_context: Dict[str, Any] = field(default_factory=dict)
    platform: str = field(default_factory=lambda: sys.platform)

    def __post_init__(self):
        if not self.stack_trace:
            self.stack_trace = traceback.format_exc()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            'error_type': type(self.error).__name__,
            'error_message': str(self.error),
            'category': self.category.value,
            'severity': self.severity.value,
            'operation': self.operation,
            'timestamp': self.timestamp,
            'thread_name': self.thread_name,
            'additional_context': self.additional_context,
            'platform': self.platform,
        }

    def format_log_message(self) -> str:
        """Format a compact multi-line log message."""
        lines = [
            f"{self.operation} failed [{self.severity.value}]",
            f"  Category: {self.category.value}",
            f"  Type: {type(self.error).__name__}",
            f"  Message: {self.error}",
            f"  Thread: {self.thread_name}",
        ]

        if self.additional_context:
            lines.append("  Context:")
            for key, value in self.additional_context.items():
                lines.append(f"    {key}: {value}")

        return '\n'.join(lines)


def determine_severity(
    error: Exception,
    category: ErrorCategory,
) -> ErrorSeverity:
    """
    Determine the severity level for an error based on type and category.
    """
    # A missing file is the normal first-run state
    if isinstance(error, FileNotFoundError):
        return ErrorSeverity.INFO

    if isinstance(error, PermissionError):
        return ErrorSeverity.ERROR

    # Damaged records are replaced by defaults
    if category in (ErrorCategory.CODEC, ErrorCategory.PLATFORM):
        return ErrorSeverity.WARNING

    return ErrorSeverity.ERROR


_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.DEBUG,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def handle_error(
    error: Exception,
    operation: str,
    category: ErrorCategory = ErrorCategory.UNKNOWN,
    severity: Optional[ErrorSeverity] = None,
    additional_context: Optional[Dict[str, Any]] = None,
    reraise: bool = False,
) -> ErrorContext:
    """
    Handle an error with contextual logging.

    Args:
        error: The exception that occurred
        operation: Name of the operation that failed
        category: Category of the error
        severity: Severity level (auto-determined if not provided)
        additional_context: Additional context information
        reraise: Whether to re-raise the exception after handling

    Returns:
        ErrorContext with full error details
    """
    if severity is None:
        severity = determine_severity(error, category)

    context = ErrorContext(
        error=error,
        category=category,
        severity=severity,
        operation=operation,
        additional_context=additional_context or {},
    )

    logger.log(_LOG_LEVELS.get(severity, logging.ERROR), context.format_log_message())

    if reraise:
        raise error

    return context


@contextmanager
def safe_execute(
    operation: str,
    category: ErrorCategory = ErrorCategory.UNKNOWN,
    default_return: Any = None,
    additional_context: Optional[Dict[str, Any]] = None,
):
    """
    Context manager that logs and drops any exception raised in its body.

    Usage:
        with safe_execute("store status", ErrorCategory.FILESYSTEM) as result:
            result.value = store_path(path, data)
        if not result.success:
            ...
    """
    class Result:
        def __init__(self):
            self.value = default_return
            self.error: Optional[ErrorContext] = None
            self.success = True

    result = Result()

    try:
        yield result
    except Exception as e:
        result.success = False
        result.error = handle_error(
            e,
            operation,
            category=category,
            additional_context=additional_context,
        )
        result.value = default_return


def with_error_handling(
    category: ErrorCategory = ErrorCategory.UNKNOWN,
    operation: Optional[str] = None,
    default_return: Any = None,
):
    """
    Decorator returning ``default_return`` (or its result, when callable)
    after logging any exception raised by the wrapped function.

    Usage:
        @with_error_handling(category=ErrorCategory.PLATFORM)
        def hostname():
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                handle_error(e, operation or func.__name__, category=category)
                return default_return() if callable(default_return) else default_return

        return wrapper
    return decorator

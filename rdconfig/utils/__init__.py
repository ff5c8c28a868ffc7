"""
Utility modules for the configuration store.

Provides:
- Error handling with contextual logging
- The reader/writer lock guarding every entity singleton
"""

from .error_handling import (
    CodecError,
    ConfigStoreError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    SecretError,
    determine_severity,
    handle_error,
    safe_execute,
    with_error_handling,
)
from .rwlock import Guarded, ReadWriteLock

__all__ = [
    # Error handling
    'CodecError',
    'ConfigStoreError',
    'ErrorCategory',
    'ErrorContext',
    'ErrorSeverity',
    'SecretError',
    'determine_severity',
    'handle_error',
    'safe_execute',
    'with_error_handling',
    # Locking
    'Guarded',
    'ReadWriteLock',
]

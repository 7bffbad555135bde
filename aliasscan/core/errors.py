"""
Error types for the alias scanner.

A scan has exactly one way to fail from inside the walk (a key requested for
a value with no stable storage) plus one configurable abort (object ceiling).
"""

from typing import Optional, Any, Dict


class AliasScanError(Exception):
    """
    Base exception for all alias-scan errors.

    Provides common functionality for error tracking and reporting.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize scan error.

        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnaddressableValueError(AliasScanError):
    """
    Raised when an identity key is requested for a value without stable storage.

    Scalars, tuples, namedtuples and dead weak references have no address of
    their own. Reaching this from inside a scan means the walker asked for a
    key it should never have asked for; the scan is aborted.
    """

    def __init__(self, message: str,
                 value_type: Optional[type] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize unaddressable value error.

        Args:
            message: Error message
            value_type: Type of the offending value
            details: Additional error context
        """
        super().__init__(message, details)
        self.value_type = value_type

        self.details.update({
            'value_type': getattr(value_type, '__qualname__', repr(value_type)),
        })


class ScanLimitError(AliasScanError):
    """Raised when a scan registers more identities than ``max_objects`` allows."""

    def __init__(self, message: str,
                 limit: int = 0,
                 registered: int = 0,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.limit = limit
        self.registered = registered

        self.details.update({
            'limit': limit,
            'registered': registered
        })


class TargetResolutionError(AliasScanError):
    """Raised when a ``module:attribute`` target cannot be imported."""

    def __init__(self, message: str,
                 target: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.target = target
        self.details['target'] = target


def is_unaddressable_error(error: Exception) -> bool:
    """Check if error is an unaddressable-value contract violation."""
    return isinstance(error, UnaddressableValueError)


def is_limit_error(error: Exception) -> bool:
    """Check if error is due to the object ceiling."""
    return isinstance(error, ScanLimitError)

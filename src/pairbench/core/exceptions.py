"""
PairBench Domain-Specific Exceptions
====================================

Exception hierarchy for consistent error handling across the harness.

Exception Hierarchy:
    PairBenchError (base)
    ├── RecoverableError (transient, retry possible)
    │   ├── CollaboratorFailureError
    │   └── RunCancelledError
    └── IrrecoverableError (permanent, requires intervention)
        ├── ConfigurationError
        ├── ValidationError
        │   └── InvalidInputError
        └── NotFoundError
            └── UnknownWorkloadError

Usage Guidelines:
    - Validate inputs before any workload runs and raise InvalidInputError
    - Wrap data-access failures in CollaboratorFailureError and never retry them
      locally; retries would hide the latency being measured
    - A degraded memory measurement is not an error; it is flagged on the result
"""

from typing import Optional, Any
from enum import Enum
import os


class ErrorCategory(Enum):
    """Categories for error classification."""
    STORAGE = "STORAGE"
    CONFIG = "CONFIG"
    VALIDATION = "VALIDATION"
    WORKLOAD = "WORKLOAD"
    SYSTEM = "SYSTEM"


class PairBenchError(Exception):
    """
    Base exception for all PairBench errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for API responses
        context: Additional context about the error
        recoverable: Whether the error is potentially recoverable
    """

    error_code: str = "PAIRBENCH_ERROR"
    recoverable: bool = True
    category: ErrorCategory = ErrorCategory.SYSTEM

    def __init__(
        self,
        message: str,
        context: Optional[dict] = None,
        error_code: Optional[str] = None,
        recoverable: Optional[bool] = None
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        if error_code is not None:
            self.error_code = error_code
        if recoverable is not None:
            self.recoverable = recoverable

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message

    def to_dict(self, include_traceback: bool = False) -> dict:
        """
        Convert exception to dictionary for JSON response.

        Args:
            include_traceback: Whether to include stack trace (only in DEBUG mode)
        """
        result = {
            "error": self.message,
            "code": self.error_code,
            "recoverable": self.recoverable,
        }

        if include_traceback:
            import traceback
            result["traceback"] = "".join(
                traceback.format_exception(type(self), self, self.__traceback__)
            )

        if self.context:
            result["context"] = self.context

        return result


# =============================================================================
# Base Categories: Recoverable vs Irrecoverable
# =============================================================================

class RecoverableError(PairBenchError):
    """
    Base class for recoverable errors.

    These are transient errors that may succeed when the request is repeated:
    - Data store unreachable
    - Run cancelled by the caller
    """
    recoverable = True


class IrrecoverableError(PairBenchError):
    """
    Base class for irrecoverable errors.

    These are permanent errors that require a different request or setup:
    - Invalid configuration
    - Invalid workload input
    - Unknown workload
    """
    recoverable = False


# =============================================================================
# Storage Errors
# =============================================================================

class StorageError(PairBenchError):
    """Base exception for record store errors."""
    error_code = "STORAGE_ERROR"
    category = ErrorCategory.STORAGE


class CollaboratorFailureError(RecoverableError, StorageError):
    """Raised when a data-access call made on behalf of a workload fails."""
    error_code = "COLLABORATOR_FAILURE"

    def __init__(self, backend: str, operation: str, reason: str, context: Optional[dict] = None):
        ctx = {"backend": backend, "operation": operation}
        if context:
            ctx.update(context)
        super().__init__(f"[{backend}] {operation} failed: {reason}", ctx)
        self.backend = backend
        self.operation = operation


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(IrrecoverableError):
    """Raised when configuration is invalid or missing."""
    error_code = "CONFIGURATION_ERROR"
    category = ErrorCategory.CONFIG

    def __init__(self, config_key: str, reason: str, context: Optional[dict] = None):
        ctx = {"config_key": config_key}
        if context:
            ctx.update(context)
        super().__init__(f"Configuration error for '{config_key}': {reason}", ctx)
        self.config_key = config_key


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(IrrecoverableError):
    """Raised when input validation fails."""
    error_code = "VALIDATION_ERROR"
    category = ErrorCategory.VALIDATION

    def __init__(self, field: str, reason: str, value: Any = None, context: Optional[dict] = None):
        ctx = {"field": field}
        if value is not None:
            # Truncate large values
            value_str = str(value)
            if len(value_str) > 100:
                value_str = value_str[:100] + "..."
            ctx["value"] = value_str
        if context:
            ctx.update(context)
        super().__init__(f"Validation error for '{field}': {reason}", ctx)
        self.field = field
        self.reason = reason


class InvalidInputError(ValidationError):
    """Raised when a workload input fails its constraints (negative size, malformed ids)."""
    error_code = "INVALID_INPUT"


# =============================================================================
# Not Found Errors
# =============================================================================

class NotFoundError(IrrecoverableError):
    """Raised when a requested resource is not found."""
    error_code = "NOT_FOUND_ERROR"
    category = ErrorCategory.SYSTEM

    def __init__(self, resource_type: str, resource_id: str, context: Optional[dict] = None):
        ctx = {"resource_type": resource_type, "resource_id": resource_id}
        if context:
            ctx.update(context)
        super().__init__(f"{resource_type} '{resource_id}' not found", ctx)
        self.resource_type = resource_type
        self.resource_id = resource_id


class UnknownWorkloadError(NotFoundError):
    """Raised when a workload name is not registered."""
    error_code = "UNKNOWN_WORKLOAD"
    category = ErrorCategory.WORKLOAD

    def __init__(self, name: str, available: Optional[list] = None):
        ctx = {"available": available} if available else None
        super().__init__("Workload", name, ctx)
        self.name = name


# =============================================================================
# Run Errors
# =============================================================================

class RunCancelledError(RecoverableError):
    """Raised when a run is cancelled before all of its work completed."""
    error_code = "RUN_CANCELLED"
    category = ErrorCategory.WORKLOAD

    def __init__(self, workload: str, variant: str, context: Optional[dict] = None):
        ctx = {"workload": workload, "variant": variant}
        if context:
            ctx.update(context)
        super().__init__(f"Run of {workload}/{variant} was cancelled", ctx)
        self.workload = workload
        self.variant = variant


# =============================================================================
# Utility Functions
# =============================================================================

def wrap_storage_exception(backend: str, operation: str, exc: Exception) -> CollaboratorFailureError:
    """
    Wrap a driver exception into a CollaboratorFailureError.

    Args:
        backend: Name of the storage backend (e.g., 'sqlite')
        operation: Name of the operation that failed
        exc: The original exception

    Returns:
        CollaboratorFailureError carrying the original exception type name
    """
    return CollaboratorFailureError(
        backend,
        operation,
        str(exc),
        {"original_exception": type(exc).__name__},
    )


def is_debug_mode() -> bool:
    """Check if debug mode is enabled via environment variable."""
    return os.environ.get("PAIRBENCH_DEBUG", "").lower() in ("true", "1", "yes")


__all__ = [
    "PairBenchError",
    "RecoverableError",
    "IrrecoverableError",
    "ErrorCategory",
    "StorageError",
    "CollaboratorFailureError",
    "ConfigurationError",
    "ValidationError",
    "InvalidInputError",
    "NotFoundError",
    "UnknownWorkloadError",
    "RunCancelledError",
    "wrap_storage_exception",
    "is_debug_mode",
]

"""
Custom exception classes for the parameter store client and naming model.
"""
from typing import Any, Dict, Optional, Union

from botocore.exceptions import BotoCoreError, ClientError


class SlsToolkitError(Exception):
    """
    Base exception for all toolkit errors.

    Attributes:
        message: Human-readable error message
        original_error: The exception that caused this error, if any
        context: Additional context about the failure
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} ({context_str})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, "
            f"original_error={self.original_error!r}, context={self.context!r})"
        )


class InvalidInputError(SlsToolkitError, ValueError):
    """Exception raised when a required argument is empty."""

    def __init__(self, message: str, field: Optional[str] = None):
        """
        Initialize invalid input error.

        Args:
            message: Error message
            field: Name of the argument that failed validation
        """
        super().__init__(message, context={"field": field} if field else None)
        self.field = field


class ParameterNotFoundError(SlsToolkitError):
    """Exception raised when the parameter store reports a key as absent."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message, original_error, {"key": key} if key else None)
        self.key = key


class ParameterConflictError(SlsToolkitError):
    """Exception raised when a parameter exists and overwrite is disallowed."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message, context={"key": key} if key else None)
        self.key = key


class ParameterStoreSystemError(SlsToolkitError):
    """Exception raised for every other remote or transport failure."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(
            message,
            original_error,
            {"operation": operation} if operation else None
        )
        self.operation = operation


class UnknownTriggerError(SlsToolkitError, ValueError):
    """Exception raised for a trigger name outside the registered set."""

    def __init__(self, trigger: str):
        super().__init__(f"event trigger ({trigger}) is not registered")
        self.trigger = trigger


def map_ssm_error(
    error: Union[ClientError, BotoCoreError],
    operation: str,
    key: Optional[str] = None
) -> SlsToolkitError:
    """
    Classify a botocore error raised by an SSM call.

    Only ``ParameterNotFound`` is singled out; Put and Delete rely on it to
    tell an absent key from a failed read. Everything else is a system error.

    Args:
        error: The botocore exception
        operation: The SSM operation that failed (e.g. "GetParameter")
        key: The parameter key or path involved, if any

    Returns:
        ParameterNotFoundError or ParameterStoreSystemError
    """
    target = f" ({key})" if key else ""

    if isinstance(error, ClientError):
        error_code = error.response.get('Error', {}).get('Code', '')
        error_message = error.response.get('Error', {}).get('Message', str(error))
        if error_code == 'ParameterNotFound':
            return ParameterNotFoundError(
                f"{operation} failed{target}: parameter not found",
                key=key,
                original_error=error
            )
        return ParameterStoreSystemError(
            f"{operation} failed{target}: {error_code} {error_message}".rstrip(),
            operation=operation,
            original_error=error
        )

    return ParameterStoreSystemError(
        f"{operation} failed{target}: {error}",
        operation=operation,
        original_error=error
    )

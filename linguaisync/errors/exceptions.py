"""
Error hierarchy for linguaisync.

Every failure raised by the engine derives from LinguaSyncError, which carries
a machine-readable code and a context dict for structured logging. Errors are
split into temporary (worth retrying) and permanent ones.
"""

from typing import Any, Dict, Optional
from datetime import datetime, timezone


class LinguaSyncError(Exception):
    """
    Base exception for all linguaisync errors.

    Provides error context and categorization used by the retry handler
    and by structured logging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        retry_after: Optional[float] = None,
        previous_error: Optional[Exception] = None,
    ):
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.retry_after = retry_after
        self.previous_error = previous_error
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "retry_after": self.retry_after,
            "timestamp": self.timestamp.isoformat(),
            "previous_error": str(self.previous_error) if self.previous_error else None,
        }

    def is_retryable(self) -> bool:
        """Determine if this error should trigger a retry."""
        return isinstance(self, TemporaryError)


class TemporaryError(LinguaSyncError):
    """Base class for temporary errors that should be retried."""

    def __init__(self, message: str, retry_after: Optional[float] = None, **kwargs):
        super().__init__(message, retry_after=retry_after, **kwargs)


class PermanentError(LinguaSyncError):
    """Base class for permanent errors that should not be retried."""
    pass


class ConfigurationError(PermanentError):
    """Configuration-related errors (missing credentials, bad config file)."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(message, context={"config_key": config_key}, **kwargs)


class ValidationError(PermanentError):
    """Invalid argument passed to the engine."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs):
        super().__init__(
            message,
            context={"field": field, "value": str(value) if value is not None else None},
            **kwargs
        )


class TreeLoadError(PermanentError):
    """A translation tree or the locales directory could not be read."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, context={"path": path}, **kwargs)


class MergeError(PermanentError):
    """A translation result could not be written into the target tree."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, context={"path": path}, **kwargs)


class MergeConflictError(MergeError):
    """Target tree holds a non-object where an intermediate object is needed."""

    def __init__(self, message: str, path: Optional[str] = None, segment: Optional[str] = None, **kwargs):
        super().__init__(message, path=path, **kwargs)
        self.context["segment"] = segment


class ProviderError(LinguaSyncError):
    """Translation provider failure (transport, HTTP status or response shape)."""

    def __init__(
        self,
        message: str,
        provider: str = "openai",
        status_code: Optional[int] = None,
        is_temporary: Optional[bool] = None,
        **kwargs
    ):
        if is_temporary is None:
            lowered = message.lower()
            is_temporary = (
                "timeout" in lowered
                or "connection" in lowered
                or (status_code is not None and status_code >= 500)
            )

        super().__init__(
            message,
            context={
                "provider": provider,
                "status_code": status_code,
                "is_temporary": is_temporary,
            },
            **kwargs
        )

    def is_retryable(self) -> bool:
        """Provider errors are retryable only for transient failures."""
        return self.context.get("is_temporary", False)


class RateLimitError(TemporaryError):
    """Provider rate limiting."""

    def __init__(self, message: str, retry_after: Optional[float] = None, provider: str = "openai", **kwargs):
        super().__init__(message, retry_after=retry_after, context={"provider": provider}, **kwargs)


ERROR_REGISTRY = {
    "configuration": ConfigurationError,
    "validation": ValidationError,
    "treeload": TreeLoadError,
    "merge": MergeError,
    "provider": ProviderError,
    "ratelimit": RateLimitError,
    "temporary": TemporaryError,
}


def create_error(error_type: str, message: str, **kwargs) -> LinguaSyncError:
    """Factory function to create errors by type."""
    error_class = ERROR_REGISTRY.get(error_type, LinguaSyncError)
    return error_class(message, **kwargs)


def categorize_error(error: Exception) -> str:
    """Categorize an unknown error into our error hierarchy."""
    if isinstance(error, LinguaSyncError):
        return error.__class__.__name__

    error_msg = str(error).lower()

    if isinstance(error, (TimeoutError, ConnectionError)):
        return "TemporaryError"
    if isinstance(error, (OSError, ValueError)) and "json" in error_msg:
        return "TreeLoadError"
    if "rate" in error_msg and "limit" in error_msg:
        return "RateLimitError"
    elif "timeout" in error_msg or "connection" in error_msg:
        return "TemporaryError"
    elif "config" in error_msg or "api key" in error_msg:
        return "ConfigurationError"
    else:
        return "LinguaSyncError"

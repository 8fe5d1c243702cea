"""
Error handling for linguaisync:
- Structured error hierarchy
- Retry with exponential backoff for provider calls
"""

from .exceptions import (
    LinguaSyncError,
    TemporaryError,
    PermanentError,
    ConfigurationError,
    ValidationError,
    TreeLoadError,
    MergeError,
    MergeConflictError,
    ProviderError,
    RateLimitError,
    create_error,
    categorize_error,
)

from .handlers import RetryHandler

__all__ = [
    # Exceptions
    "LinguaSyncError",
    "TemporaryError",
    "PermanentError",
    "ConfigurationError",
    "ValidationError",
    "TreeLoadError",
    "MergeError",
    "MergeConflictError",
    "ProviderError",
    "RateLimitError",
    "create_error",
    "categorize_error",

    # Handlers
    "RetryHandler",
]

"""Translation providers."""

from .base import TranslationProvider, build_request_items, stringify_source
from .openai_provider import OpenAIProvider, create_prompt, parse_provider_response

__all__ = [
    "OpenAIProvider",
    "TranslationProvider",
    "build_request_items",
    "create_prompt",
    "parse_provider_response",
    "stringify_source",
]

"""OpenAI chat-completions translation provider."""

import json
from typing import Any, Dict, List, Optional, Sequence

import openai
import structlog
from openai import AsyncOpenAI
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from linguaisync.config import Settings
from linguaisync.errors import (
    ConfigurationError,
    LinguaSyncError,
    ProviderError,
    RateLimitError,
    RetryHandler,
)
from linguaisync.tree import TranslationResult, TranslationTask

from .base import TranslationProvider, build_request_items

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a professional translator specializing in software localization. "
    "Always return valid JSON in the exact format requested."
)


class ProviderTranslation(BaseModel):
    key: str
    translation: Any = None


class ProviderResponse(BaseModel):
    translations: List[ProviderTranslation] = Field(default_factory=list)


def create_prompt(items: List[Dict[str, str]], language_name: str) -> str:
    return f"""You are a professional translator. Translate the following English text to {language_name}.

IMPORTANT INSTRUCTIONS:
1. Maintain the exact same structure and formatting
2. Preserve all placeholders like {{{{variable}}}}, {{{{count}}}}, etc.
3. Keep HTML tags intact if present
4. For technical terms, use appropriate {language_name} equivalents
5. Maintain the tone and context appropriate for a software application
6. If the English value is an array, return an array in the translation (NOT an object with numbered keys)
7. If the English value is an object, return an object in the translation
8. Return ONLY a JSON object with the translations

Translate these English texts:
{json.dumps(items, indent=2, ensure_ascii=False)}

Return format:
{{
  "translations": [
    {{
      "key": "path.to.key",
      "translation": "translated text in {language_name}"
    }}
  ]
}}"""


def parse_provider_response(content: Optional[str]) -> List[TranslationResult]:
    """Decode the model's JSON answer into results.

    Raises:
        ProviderError: if the content is not the expected JSON document
    """
    if not content:
        raise ProviderError("Empty response content", is_temporary=False)

    try:
        response = ProviderResponse.model_validate_json(content)
    except PydanticValidationError as e:
        raise ProviderError(f"Unexpected response format: {e}", is_temporary=False, previous_error=e) from e

    return [TranslationResult(item.key, item.translation) for item in response.translations]


def _retry_after(error: openai.APIStatusError) -> Optional[float]:
    value = error.response.headers.get("retry-after") if error.response is not None else None
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


class OpenAIProvider(TranslationProvider):
    """Translates batches with a single chat-completions request each."""

    name = "openai"

    def __init__(
        self,
        settings: Settings,
        client: Optional[AsyncOpenAI] = None,
        retry_handler: Optional[RetryHandler] = None,
    ):
        self.settings = settings
        self._client = client
        self.retry_handler = retry_handler or RetryHandler(max_attempts=settings.max_retries + 1)

    def ensure_ready(self) -> None:
        if self._client is None and not self.settings.openai_api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY is required for translation updates",
                config_key="openai_api_key",
            )

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self.ensure_ready()
            # Retries are handled by RetryHandler.
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.openai_base_url,
                max_retries=0,
            )
        return self._client

    def build_messages(self, prompt: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    async def _request(self, prompt: str) -> List[TranslationResult]:
        try:
            response = await self.client.chat.completions.create(
                model=self.settings.model,
                messages=self.build_messages(prompt),
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.RateLimitError as e:
            raise RateLimitError(f"OpenAI rate limit: {e}", retry_after=_retry_after(e), previous_error=e) from e
        except openai.APIConnectionError as e:
            raise ProviderError(f"OpenAI connection error: {e}", is_temporary=True, previous_error=e) from e
        except openai.APIStatusError as e:
            raise ProviderError(
                f"OpenAI API error: {e.status_code} {e.message}",
                status_code=e.status_code,
                previous_error=e,
            ) from e

        if not response.choices:
            raise ProviderError("Response contained no choices", is_temporary=False)

        return parse_provider_response(response.choices[0].message.content)

    async def translate(
        self,
        batch: Sequence[TranslationTask],
        language: str,
        language_name: str,
    ) -> List[TranslationResult]:
        items = build_request_items(batch)
        prompt = create_prompt(items, language_name)

        logger.debug(
            "Requesting translations",
            language=language,
            items=len(items),
            prompt_length=len(prompt),
        )

        try:
            return await self.retry_handler.retry_async(self._request, prompt)
        except LinguaSyncError as e:
            logger.error("Translation request failed", language=language, items=len(items), **e.to_dict())
            return []

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()

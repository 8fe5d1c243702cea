"""Runtime settings for a synchronization run."""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

LANGUAGE_NAMES: Dict[str, str] = {
    "es": "Spanish",
    "de": "German",
    "el": "Greek",
    "jp": "Japanese",
    "ua": "Ukrainian",
    "it": "Italian",
    "fr": "French",
    "ru": "Russian",
    "tr": "Turkish",
    "ko": "Korean",
    "vi": "Vietnamese",
    "ar": "Arabic",
    "nl": "Dutch",
    "ro": "Romanian",
    "zh": "Mandarin Chinese",
    "pt": "Portuguese",
    "id": "Indonesian",
    "no": "Norwegian",
    "fi": "Finnish",
    "da": "Danish",
    "sv": "Swedish",
    "pl": "Polish",
    "bg": "Bulgarian",
    "sl": "Slovenian",
}

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"


class Settings(BaseModel):
    """Explicit configuration value passed to every engine component.

    Nothing in the engine reads the environment; ``load_config`` builds this
    once and hands it down.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    locales_dir: Path = Field(default_factory=lambda: Path.cwd() / "locales")
    base_language: str = "en"
    translation_files: List[str] = Field(default_factory=lambda: ["translation.json"])
    batch_size: int = Field(default=20, ge=1)
    batch_delay: float = Field(default=1.0, ge=0)

    openai_api_key: Optional[str] = None
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    model: str = "gpt-4o-mini"
    temperature: float = Field(default=0.3, ge=0, le=2)
    max_tokens: int = Field(default=2000, ge=1)
    max_retries: int = Field(default=2, ge=0)

    strict_merge: bool = False
    custom_language_names: Dict[str, str] = Field(default_factory=dict)

    @field_validator("base_language")
    @classmethod
    def _base_language_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("base_language must not be empty")
        return value

    @field_validator("translation_files")
    @classmethod
    def _translation_files_not_empty(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("translation_files must list at least one file")
        return value

    @property
    def language_names(self) -> Dict[str, str]:
        """Built-in display names merged with user overrides."""
        return {**LANGUAGE_NAMES, **self.custom_language_names}

    def language_name(self, code: str) -> str:
        return self.language_names.get(code, code)

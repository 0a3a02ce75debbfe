# menu_memorizer/core/config.py
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    DATABASE_URL: str
    API_V1_PREFIX: str = ""
    PROJECT_NAME: str = "Menu Memorizer API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: str = "http://localhost:5173"

    OPENAI_API_KEY: str
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o-mini"
    AI_REQUEST_TIMEOUT: int = 60  # seconds

    GOOGLE_APPLICATION_CREDENTIALS: str
    MAX_UPLOAD_SIZE: int = 10485760

    QUIZ_MULTI_SELECT_DISTRACTORS: int = 5
    QUIZ_SINGLE_SELECT_DISTRACTORS: int = 3

    @field_validator('OPENAI_API_KEY')
    @classmethod
    def validate_api_key(cls, value: str) -> str:
        """Reject blank API keys."""
        if not value.strip():
            raise ValueError('OPENAI_API_KEY must not be empty')
        return value.strip()

    @field_validator('GOOGLE_APPLICATION_CREDENTIALS')
    @classmethod
    def validate_credentials_file(cls, value: str) -> str:
        """The OCR credentials file must exist at start-up."""
        if not Path(value).is_file():
            raise ValueError(f'OCR credentials file not found: {value}')
        return value

    @field_validator('QUIZ_MULTI_SELECT_DISTRACTORS', 'QUIZ_SINGLE_SELECT_DISTRACTORS')
    @classmethod
    def validate_distractor_count(cls, value: int) -> int:
        if value < 0:
            raise ValueError('Distractor count must not be negative')
        return value

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS_ORIGINS string to list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


settings = Settings()

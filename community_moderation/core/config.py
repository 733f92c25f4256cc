import json
from typing import Annotated, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_PROJECT_NAME = "Community Moderation API"
DEFAULT_API_V1_PREFIX = "/api/v1"
DEFAULT_DATABASE_URL = "sqlite:///./moderation.db"
DEFAULT_SEVERITY_MODEL_ID = "gpt-4o-mini"
DEFAULT_PROVIDERS_JSON = json.dumps(
    [
        {
            "host": "openai",
            "base_url": "https://api.openai.com/v1",
            "api_key_env": "OPENAI_API_KEY",
            "models": [
                {"id": "gpt-4o-mini", "name": "GPT-4o mini"},
                {"id": "gpt-4o", "name": "GPT-4o"},
            ],
        },
    ],
    ensure_ascii=True,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    PROJECT_NAME: str = DEFAULT_PROJECT_NAME
    API_V1_PREFIX: str = DEFAULT_API_V1_PREFIX
    ENV: str = 'development'
    DEBUG: bool = False

    DATABASE_URL: str = DEFAULT_DATABASE_URL
    LOG_LEVEL: str = 'INFO'
    LOG_JSON: bool = False
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ['*']

    SECRET_KEY: str = 'change-me'
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    AUTO_CREATE_TABLES: bool = False

    PROVIDERS: str = DEFAULT_PROVIDERS_JSON
    SEVERITY_MODEL_ID: str = DEFAULT_SEVERITY_MODEL_ID
    SEVERITY_TIMEOUT_SECONDS: float = 10.0
    SEVERITY_PROMPT_PATH: Optional[str] = None

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, value):  # type: ignore[override]
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return []
            if value == '*':
                return ['*']
            return [item.strip() for item in value.split(',') if item.strip()]
        return value

    @field_validator('SEVERITY_TIMEOUT_SECONDS')
    @classmethod
    def check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError('SEVERITY_TIMEOUT_SECONDS must be positive')
        return value


settings = Settings()

from typing import Literal

from pydantic import HttpUrl, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """App configuration"""

    model_config = SettingsConfigDict(  # pyright: ignore[reportUnannotatedClassAttribute]
        env_file='.env', env_file_encoding='utf-8', extra='ignore'
    )

    openai_api_key: SecretStr = SecretStr('')
    openai_base_url: HttpUrl = HttpUrl('https://api.openai.com/v1')
    model_name: str = 'gpt-4o-mini'
    language: str = 'en'
    request_timeout: float = 600

    # 'hierarchy' asks for the whole nested tree in one call,
    # 'sequential' asks once per newly discovered concept
    build_strategy: Literal['hierarchy', 'sequential'] = 'hierarchy'
    max_depth: int = 3

    log_level: str = 'INFO'


settings = Settings()  # pyright: ignore[reportCallIssue]

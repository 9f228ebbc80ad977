"""Configuration via environment variables."""

from enum import Enum
from pydantic_settings import BaseSettings


class Transport(str, Enum):
    STDIO = "stdio"
    STREAMABLE_HTTP = "streamable-http"


class Settings(BaseSettings):
    model_config = {"env_prefix": "YT_TRANSCRIPTS_"}

    default_languages: list[str] = ["en"]
    request_timeout: float = 30.0
    accept_language: str = "en-US"
    max_proxied_clients: int = 8
    rate_limit_per_minute: int = 30
    max_batch_size: int = 10
    transport: Transport = Transport.STDIO


settings = Settings()

"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    qwen_api_key: str | None = None
    qwen_base_url: str = "https://dashscope.aliyuncs.com/compatible-mode/v1"
    qwen_text_model: str = "qwen-plus"
    qwen_vision_model: str = "qwen-vl-max"
    temperature: float = 0.2
    max_tokens: int = 1000
    upstream_timeout_seconds: float = 25.0
    max_body_bytes: int = 5 * 1024 * 1024
    max_image_bytes: int = 4 * 1024 * 1024
    cors_allow_origin: str = "*"
    cache_name: str = "eat-what-v1"
    precache_paths: list[str] = ["/", "/index.html"]
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

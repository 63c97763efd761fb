"""Configuration settings for Greeter."""

from typing import Literal
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Greeting server settings
    greeting_base_url: str = "http://192.168.214.1:3000"
    greeting_path: str = "/saludo"
    greeting_timeout_seconds: float = 7.0

    # Identity provider settings
    identity_backend: Literal["memory", "firebase"] = "memory"
    firebase_api_key: str = ""
    identity_base_url: str = "https://identitytoolkit.googleapis.com/v1"
    identity_timeout_seconds: float = 10.0

    # Application settings
    app_name: str = "Greeter"
    debug: bool = False
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Parley"
    debug: bool = False

    # Persistence
    persist: bool = False  # Write the workspace snapshot after every change
    data_file: str = "data/workspace.json"

    # Limits
    message_page_size: int = 50
    notification_page_size: int = 20
    max_message_length: int = 1000
    tag_excerpt_length: int = 20

    # Security
    password_hash_rounds: int = 12  # bcrypt cost factor, 4-31

    model_config = ConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()

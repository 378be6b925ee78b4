"""Client configuration, read from ``FILE_STORAGE_*`` environment variables."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FILE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = Field(default="http://localhost:3001", description="Base URL of the API server")
    session_file: Path = Field(
        default=Path.home() / ".file_storage" / "session.json",
        description="Where the token and user summary are kept between runs",
    )
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")

"""
Configuration for Realty Ledger.

Uses pydantic-settings so every knob can be set from environment variables
or a local ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenAISettings(BaseSettings):
    """Portfolio commentary (LLM) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key; commentary falls back to a local summary without it",
    )
    model: str = Field(
        default="gpt-4o-mini",
        description="Chat model used for the portfolio commentary",
    )
    max_tokens: int = Field(default=320, ge=50, le=4096)
    temperature: float = Field(default=0.2, ge=0.0, le=1.0)


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from ``REALTY_*`` environment variables and .env.
    """

    model_config = SettingsConfigDict(
        env_prefix="REALTY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the local JSON store",
    )
    store_filename: str = Field(
        default="users.json",
        description="File name of the local JSON store inside data_dir",
    )
    default_user: str = Field(
        default="demo",
        description="User key preselected in the dashboard",
    )
    currency_symbol: str = Field(default="$")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    @property
    def store_path(self) -> Path:
        return self.data_dir / self.store_filename


class Settings:
    """Root settings container aggregating the sub-settings."""

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def openai(self) -> OpenAISettings:
        return OpenAISettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call ``get_settings.cache_clear()`` to reload after changing the environment.
    """
    return Settings()

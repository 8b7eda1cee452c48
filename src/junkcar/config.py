"""Configuration management using Pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Data Folder Structure:
        data/
        ├── saved-searches.json   # Named filter snapshots
        └── ...                   # Vehicle exports for offline use
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase Configuration (only the vehicle record store needs these)
    supabase_url: Optional[str] = Field(default=None, validation_alias="SUPABASE_URL")
    supabase_key: Optional[str] = Field(default=None, validation_alias="SUPABASE_KEY")

    # Vehicle table and paging
    vehicles_table: str = Field(default="vehicles", validation_alias="VEHICLES_TABLE")
    vehicles_page_size: int = Field(default=50, validation_alias="VEHICLES_PAGE_SIZE")
    # Searches bypass paging and load every match up to this limit
    search_result_limit: int = Field(default=1000, validation_alias="SEARCH_RESULT_LIMIT")

    # Base data directory
    data_dir: Path = Field(default=Path("./data"), validation_alias="DATA_DIR")

    saved_searches_path: Optional[Path] = Field(
        default=None, validation_alias="SAVED_SEARCHES_FILE"
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @computed_field
    @property
    def saved_searches_file(self) -> Path:
        """File backing the saved search registry."""
        return self.saved_searches_path or self.data_dir / "saved-searches.json"

    @computed_field
    @property
    def supabase_enabled(self) -> bool:
        """Supabase is usable when both URL and key are set."""
        return bool(self.supabase_url and self.supabase_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

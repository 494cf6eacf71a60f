"""Configuration management for Book Question Analyzer."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, loaded from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BQA_",
    )

    storage_backend: Literal["seeds", "neo4j"] = Field(
        default="seeds", description="seeds (JSON files) or neo4j"
    )

    # Neo4j connection
    neo4j_uri: str = Field(default="bolt://localhost:7687")
    neo4j_user: str = Field(default="neo4j")
    neo4j_password: str = Field(default="bookgraph123")
    neo4j_timeout: float = Field(default=10.0, description="Seconds per connection attempt and query")

    # Paths
    data_dir: Path = Field(default=Path("data"))
    seeds_path: Path | None = Field(default=None, description="Seed directory (data_dir/seeds if unset)")
    lexicon_path: Path | None = Field(default=None, description="Custom intent lexicon JSON")

    # Analysis settings
    fuzzy_threshold: float = Field(default=0.2, description="Minimum word-overlap score for a similar event")
    log_level: str = Field(default="WARNING")

    @property
    def seeds_dir(self) -> Path:
        return self.seeds_path or self.data_dir / "seeds"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

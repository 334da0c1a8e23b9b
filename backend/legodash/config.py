"""Application configuration settings."""
import os
import json
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Optional, List

from .models.level import BrickColor, GeneratorConfig, PALETTE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    app_name: str = "LegoDash Level Designer Tool"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS settings - as comma-separated string or JSON array
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Level capacity settings
    min_stand_count: int = 6
    max_stand_count: int = 10
    min_bricks_per_stand: int = 7
    max_bricks_per_stand: int = 10
    task_chunk_size: int = 9
    max_attempts: int = 60
    require_full_drain: bool = True
    search_budget: int = 50000
    # Comma-separated color names; empty means the full palette
    palette: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("palette")
    @classmethod
    def check_palette(cls, value: str) -> str:
        """Reject unknown color names early."""
        for name in value.split(","):
            if name.strip():
                BrickColor.parse(name)
        return value

    def get_palette(self) -> List[BrickColor]:
        """Parse the configured palette (full palette when unset)."""
        colors = [BrickColor.parse(n) for n in self.palette.split(",") if n.strip()]
        return colors or list(PALETTE)

    def get_cors_origins(self) -> List[str]:
        """Parse CORS origins from string (comma-separated or JSON)."""
        if not self.cors_origins:
            return ["http://localhost:5173"]

        # Try JSON parse first
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
        except json.JSONDecodeError:
            pass

        # Fall back to comma-separated
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def generator_config(self) -> GeneratorConfig:
        """Build the generator capacity configuration."""
        return GeneratorConfig(
            min_stand_count=self.min_stand_count,
            max_stand_count=self.max_stand_count,
            min_bricks_per_stand=self.min_bricks_per_stand,
            max_bricks_per_stand=self.max_bricks_per_stand,
            task_chunk_size=self.task_chunk_size,
            max_attempts=self.max_attempts,
            require_full_drain=self.require_full_drain,
            search_budget=self.search_budget,
            palette=tuple(self.get_palette()),
        )


# Don't use lru_cache in production to allow env var updates
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings instance (cached in production for performance)."""
    global _settings
    if _settings is None or os.getenv("DEBUG", "false").lower() == "true":
        _settings = Settings()
    return _settings

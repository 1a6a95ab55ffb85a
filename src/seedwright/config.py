"""
Configuration management for seedwright.

Settings come from SEEDWRIGHT_* environment variables or from the
[seedwright] table of a TOML file, validated with Pydantic.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from faker import Faker
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SeedSettings(BaseSettings):
    """Settings shared by factories and persistence contexts."""

    model_config = SettingsConfigDict(env_prefix="SEEDWRIGHT_")

    database_url: str = Field(
        default="postgresql://localhost/seedwright_dev",
        description="PostgreSQL connection URL used by DirectContext",
    )
    schema_name: str = Field(
        default="public", description="Schema that entity tables live in"
    )
    faker_locale: str = Field(default="en_US", description="Faker locale")
    faker_seed: Optional[int] = Field(
        default=None, description="Seed for reproducible generation (optional)"
    )

    @classmethod
    def from_toml(cls, path: Path | str) -> SeedSettings:
        """
        Load settings from the [seedwright] table of a TOML file.

        Args:
            path: Path to the TOML file (e.g. pyproject.toml)

        Returns:
            SeedSettings instance

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        # pyproject.toml keeps it under [tool.seedwright]
        section = data.get("seedwright") or data.get("tool", {}).get("seedwright", {})
        return cls(**section)


def get_faker(settings: SeedSettings | None = None) -> Faker:
    """
    Build a Faker instance from settings.

    When faker_seed is set the instance is seeded, so the same factories
    produce the same values on every run.
    """
    settings = settings or SeedSettings()
    fake = Faker(settings.faker_locale)
    if settings.faker_seed is not None:
        fake.seed_instance(settings.faker_seed)
    return fake

"""Runtime configuration for cardshifter."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="CARDSHIFTER_", env_file=".env", extra="ignore")

    app_name: str = "cardshifter"
    log_level: str = "WARNING"
    mods_directory: Path = Field(
        default_factory=lambda: Path.home() / "cardshifter-mods",
        description="Root folder holding one subdirectory per external mod.",
    )
    default_mod: str = "Vanilla"
    default_seed: int | None = None
    telemetry_enabled: bool = True


settings = Settings()

"""Runtime configuration for Dreamland Engine."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="DREAMLAND_", env_file=".env", extra="ignore")

    app_name: str = "dreamland-engine"
    log_level: str = "INFO"
    balance_path: str | None = Field(
        default=None,
        description="Optional JSON file with balance overrides merged over the built-in table.",
    )
    catalog_path: str | None = Field(
        default=None,
        description="Optional JSON catalog replacing the built-in items/recipes/species.",
    )
    save_directory: str = "saves"
    tick_duration_ms: int = Field(default=100, gt=0)
    random_seed: int | None = None
    telemetry_enabled: bool = True


settings = Settings()

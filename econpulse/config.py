from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


class Settings(BaseSettings):
    world_bank_base_url: str = "https://api.worldbank.org/v2"
    request_timeout: float = 30.0

    primary_window_years: int = 5
    alternate_window_years: int = 25

    max_concurrent_countries: int = 8
    max_refresh_sets: int = 256

    overrides_path: Path = _CONFIG_DIR / "overrides_v1.json"
    narratives_path: Path = _CONFIG_DIR / "narratives_v1.json"

    default_countries: list[str] = ["SWE", "NOR", "DEU", "USA", "ARG"]

    app_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="ECONPULSE_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()

"""
Runtime settings for the poster engine.

Values are read from the environment (prefix ``POSTER_``) or a local ``.env``.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    font_dirs: List[str] = ["fonts", "/usr/share/fonts/truetype"]
    default_font_family: str = "Poppins"
    default_preset: str = "classic"
    png_compress_level: int = 6  # 0-9, affects size only, never pixels
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="POSTER_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()

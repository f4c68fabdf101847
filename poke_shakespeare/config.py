"""Configuration management for the Shakespearean Pokedex.

Uses Pydantic Settings for type-safe configuration with .env file support.
"""
from typing import Literal

from pydantic import PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"

    # Listen address
    host: str = "0.0.0.0"
    port: int = 8000

    # Species lookup (PokeAPI). A JSON object of name -> description
    # replaces the live API with a static table.
    pokeapi_url: str = "https://pokeapi.co/api/v2"
    pokeapi_timeout: PositiveFloat = 5.0
    pokeapi_mock: dict[str, str] | None = None

    # Style transform (Fun Translations)
    translator_url: str = "https://api.funtranslations.com/translate"
    translation_style: str = "shakespeare"
    translator_timeout: PositiveFloat = 5.0
    translator_api_key: str | None = None
    translator_mock: bool = False

    # Response cache
    cache_backend: Literal["memory", "redis", "none"] = "memory"
    cache_ttl: PositiveFloat | None = 3600.0
    cache_capacity: PositiveInt = 4096
    redis_url: str = "redis://localhost:6379"

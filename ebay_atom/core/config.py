from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "eBay Atom"

    # Logging (stderr only; stdout carries the feed)
    LOG_LEVEL: str = "WARNING"
    LOG_JSON: bool = False  # JSON lines instead of the console renderer

    model_config = SettingsConfigDict(case_sensitive=True, env_prefix="EBAY_ATOM_", extra="ignore")


def load_settings() -> Settings:
    """
    Read settings from the environment.

    A malformed EBAY_ATOM_* value only affects logging, so it falls back to
    the defaults instead of stopping the conversion.
    """
    try:
        return Settings()
    except ValidationError:
        return Settings.model_construct()

"""
Shared settings plumbing.

Every settings class reads the process environment and an optional .env
file, ignores unknown keys, and matches names case-insensitively. Only
the env prefix differs between concerns.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


def env_config(prefix: str = "") -> SettingsConfigDict:
    """Settings config for one concern, keyed by its environment prefix."""
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class BaseSettings(PydanticBaseSettings):
    """Settings base bound to the unprefixed environment."""

    model_config = env_config()

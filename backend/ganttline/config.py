"""
Application settings for Ganttline.

Settings are read from the environment (prefix ``GANTTLINE_``) or a local
``.env`` file. They only provide defaults for the HTTP layer; the scheduling
services take every input as an explicit argument.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GANTTLINE_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "Ganttline"
    debug: bool = False
    log_level: str | None = None
    json_logs: bool = False

    # Defaults applied when a request omits them
    default_hours_per_working_day: float = 8.0
    whole_team_assignee: str = "All"


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()

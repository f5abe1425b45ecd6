import os
from enum import Enum
from typing import Any, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types."""

    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):  # type: ignore[misc]
    """
    Relay settings, read from environment variables.

    Logging defaults depend on ``ENV`` unless the corresponding variable
    is set explicitly.
    """

    model_config = SettingsConfigDict(case_sensitive=True)

    ENV: Environment = Environment.DEV

    # Listening address
    HOST: str = "0.0.0.0"
    PORT: int = 8181

    # WebSocket endpoint path
    WS_PATH: str = "/"

    # Logging settings
    LOG_FILE_PATH: str = "logs/logging_errors.log"
    LOG_EXCLUDED_PATHS: list[str] = ["/metrics", "/health"]
    LOG_LEVEL: str = "INFO"
    LOG_CONSOLE_FORMAT: Literal["human", "json"] = "human"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize settings with environment-specific defaults."""
        super().__init__(**kwargs)
        self._apply_environment_defaults(kwargs)

    def _apply_environment_defaults(self, overrides: dict[str, Any]) -> None:
        """Apply environment-specific logging defaults."""
        defaults: dict[Environment, dict[str, str]] = {
            Environment.PRODUCTION: {
                "LOG_CONSOLE_FORMAT": "json",
                "LOG_LEVEL": "WARNING",
            },
            Environment.STAGING: {
                "LOG_CONSOLE_FORMAT": "json",
                "LOG_LEVEL": "INFO",
            },
            Environment.DEV: {
                "LOG_CONSOLE_FORMAT": "human",
                "LOG_LEVEL": "DEBUG",
            },
        }

        for name, value in defaults[self.ENV].items():
            if name in overrides or os.getenv(name) is not None:
                continue
            setattr(self, name, value)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENV == Environment.PRODUCTION

    @property
    def is_staging(self) -> bool:
        """Check if running in staging environment."""
        return self.ENV == Environment.STAGING

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENV == Environment.DEV


app_settings = Settings()

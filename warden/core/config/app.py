"""
Application-specific settings.
"""
from typing import List, Literal, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, environment and CORS origins.

    Security Note:
        - APP_ENV decides whether outgoing mail reaches real recipients; only
          ``production`` delivers to the addressee.
        - Ensure ALLOWED_ORIGINS is explicitly set to trusted domains in production.
    """
    PROJECT_NAME: str = "warden"
    VERSION: str = "0.1.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    ALLOWED_ORIGINS: Union[str, List[str]] = Field(default="http://localhost:3000")

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = Field(ge=0.0, le=1.0, default=0.0)

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Splits a comma-separated string of origins into a list.

        Args:
            v: Input value as a string or list of origins.

        Returns:
            List of stripped origin strings.
        """
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

# ==============================================================================
# SETTINGS CONFIGURATION - Environment Management
# ==============================================================================
# Pydantic Settings for type-safe environment variable management
# Supports: Development, Staging, Production environments
# ==============================================================================

from __future__ import annotations

import json
from enum import Enum
from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class TokenConfiguration(BaseModel):
    """
    JWT token configuration section.

    Read from the environment as ``TOKEN_CONFIGURATION__<FIELD>``.
    Authentication can only be switched on when this section exists.

    Attributes:
        SECRET_KEY: Symmetric signing key
        AUDIENCE: Expected ``aud`` claim
        ISSUER: Expected ``iss`` claim
        SECONDS: Token lifetime in seconds
        ALGORITHM: JWT signing algorithm
    """

    SECRET_KEY: str = Field(
        ...,
        min_length=16,
        description="JWT signing secret key"
    )
    AUDIENCE: str = Field(
        ...,
        description="Token audience"
    )
    ISSUER: str = Field(
        ...,
        description="Token issuer"
    )
    SECONDS: int = Field(
        default=3600,
        description="Token lifetime in seconds"
    )
    ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )


class Settings(BaseSettings):
    """
    Application Settings Configuration.

    Manages all environment variables with type validation and defaults.
    Uses Pydantic BaseSettings for automatic .env file loading and
    environment variable parsing.

    Example:
        >>> from improved_api.core.settings import get_settings
        >>> get_settings().API_TITLE
        'Improved Api'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=True,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # --------------------------------------------------------------------------
    APP_NAME: str = Field(
        default="Improved Api",
        description="Application display name"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application semantic version"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (SQL echo, error details)"
    )
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current deployment environment"
    )

    # --------------------------------------------------------------------------
    # API CONFIGURATION
    # --------------------------------------------------------------------------
    API_PREFIX: str = Field(
        default="/api",
        description="Route prefix for every controller"
    )
    API_TITLE: str = Field(
        default="Improved Api",
        description="OpenAPI documentation title"
    )
    API_DESCRIPTION: str = Field(
        default="An Example how to improve your api",
        description="OpenAPI documentation description"
    )
    API_TERMS_OF_SERVICE: str = Field(
        default="None",
        description="OpenAPI terms of service"
    )
    API_CONTACT_NAME: str = Field(
        default="Improved API",
        description="OpenAPI contact name"
    )
    API_CONTACT_URL: str = Field(
        default="https://github.com/marcoslcosta/ImprovedApi",
        description="OpenAPI contact URL"
    )
    JSON_IGNORE_NULLS: bool = Field(
        default=True,
        description="Omit null members from JSON responses"
    )

    # --------------------------------------------------------------------------
    # DATABASE CONFIGURATION
    # --------------------------------------------------------------------------
    DATABASE_URL: str = Field(
        default="sqlite:///./improved_api.db",
        description="Default connection string"
    )
    DB_ECHO: bool = Field(
        default=False,
        description="Log every SQL statement"
    )

    # --------------------------------------------------------------------------
    # TOKEN CONFIGURATION
    # --------------------------------------------------------------------------
    TOKEN_CONFIGURATION: Optional[TokenConfiguration] = Field(
        default=None,
        description="JWT section (SECRET_KEY, AUDIENCE, ISSUER, SECONDS)"
    )

    # --------------------------------------------------------------------------
    # CORS SETTINGS
    # --------------------------------------------------------------------------
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )

    # --------------------------------------------------------------------------
    # LOGGING CONFIGURATION
    # --------------------------------------------------------------------------
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    LOG_FORMAT: str = Field(
        default="text",
        description="Log format (json, text)"
    )

    # --------------------------------------------------------------------------
    # COMPUTED PROPERTIES
    # --------------------------------------------------------------------------
    @computed_field
    @property
    def async_database_url(self) -> str:
        """
        Connection string with an async driver.

        Plain ``sqlite://`` URLs are upgraded to ``sqlite+aiosqlite://``.
        """
        url = self.DATABASE_URL
        if url.startswith("sqlite://"):
            return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return url

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    # --------------------------------------------------------------------------
    # VALIDATORS
    # --------------------------------------------------------------------------
    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from a comma-separated string, a JSON list or a list."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()

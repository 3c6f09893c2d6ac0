"""
LifeStream Backend: Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before the app starts.

Required in production:
    ACCESS_TOKEN_SECRET  signing secret for issued tokens
    DB_USER / DB_PASS / DB_CLUSTER  Atlas credentials (or MONGODB_URL)
    PORT                 listen port (defaults to 5000)
"""

from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments MUST set
    ACCESS_TOKEN_SECRET and the database credentials.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Used as-is unless DB_USER, DB_PASS and DB_CLUSTER are all present
    mongodb_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string",
    )
    db_user: Optional[str] = Field(default=None)
    db_pass: Optional[str] = Field(default=None)
    db_cluster: Optional[str] = Field(
        default=None,
        description="Atlas cluster host, e.g. cluster0.xxxxx.mongodb.net",
    )
    database_name: str = Field(default="LifeStreamDB")

    # ── Tokens ────────────────────────────────────────────────────────────
    access_token_secret: str = Field(
        default="",
        description="HMAC secret used to sign and verify access tokens",
    )
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_seconds: int = Field(default=3600, ge=60, le=86400)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def mongodb_uri(self) -> str:
        """
        Connection string handed to the Mongo client.

        Atlas credentials take precedence over MONGODB_URL when all three of
        DB_USER, DB_PASS and DB_CLUSTER are configured.
        """
        if self.db_user and self.db_pass and self.db_cluster:
            return (
                f"mongodb+srv://{quote_plus(self.db_user)}:{quote_plus(self.db_pass)}"
                f"@{self.db_cluster}/?retryWrites=true&w=majority"
            )
        return self.mongodb_url

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises a single ValueError.
        """
        errors = []
        if not self.access_token_secret:
            errors.append(
                "ACCESS_TOKEN_SECRET is not set. "
                "Tokens cannot be issued or verified without it."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()

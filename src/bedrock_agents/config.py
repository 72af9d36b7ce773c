"""
Configuration settings for the Bedrock agents support code.

Uses pydantic-settings for type-safe configuration management with
environment variable support.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AWSSettings(BaseSettings):
    """AWS-specific configuration settings."""

    model_config = SettingsConfigDict(extra="ignore")

    # Explicit env var names so Lambda's temporary credentials are not captured
    region: str = Field(default="us-east-1", alias="AWS_REGION")
    access_key_id: str | None = Field(default=None, alias="BEDROCK_AGENTS_AWS_ACCESS_KEY_ID")
    secret_access_key: str | None = Field(default=None, alias="BEDROCK_AGENTS_AWS_SECRET_ACCESS_KEY")


class ReadinessSettings(BaseSettings):
    """Defaults for the vector index readiness check."""

    model_config = SettingsConfigDict(env_prefix="INDEX_READINESS_", extra="ignore")

    max_attempts: int = Field(default=30, ge=1, description="Maximum probe cycles")
    retry_delay: float = Field(default=10.0, ge=0, description="Seconds between probe cycles")
    canary_document_id: str = Field(default="test-doc-id", description="Fixed canary document id")
    vector_dimension: int = Field(default=1536, ge=1, description="Canary vector length")
    service_name: str = Field(default="aoss", description="SigV4 service name for the index endpoint")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates of the index endpoint")
    request_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    response_margin: float = Field(
        default=30.0,
        ge=0,
        description="Seconds of Lambda time kept in reserve for sending the response",
    )

    @field_validator("canary_document_id")
    @classmethod
    def validate_canary_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Canary document id must not be empty")
        return v


class Settings(BaseSettings):
    """Main settings aggregating all configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(default=False, alias="JSON_LOGS")

    # Nested settings
    aws: AWSSettings = Field(default_factory=AWSSettings)
    readiness: ReadinessSettings = Field(default_factory=ReadinessSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

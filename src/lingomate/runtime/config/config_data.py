"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(default=["http://localhost:5173"])
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class JWTConfig(BaseModel):
    """Session token signing and validation configuration."""

    algorithm: Literal["HS256", "HS384", "HS512"] = Field(
        default="HS256", description="Algorithm used to sign session tokens"
    )
    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms accepted when verifying session tokens",
    )
    gen_issuer: str = Field(
        default="lingomate", description="Issuer name to use when generating tokens"
    )
    clock_skew: int = Field(default=0, description="Clock skew tolerance in seconds")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./lingomate.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string, injecting the password if configured."""
        if not self.password_env_var:
            return self.url

        import os

        from sqlalchemy.engine import make_url

        password = os.getenv(self.password_env_var)
        if not password:
            raise ValueError(f"Environment variable {self.password_env_var} not set")
        return make_url(self.url).set(password=password).render_as_string(
            hide_password=False
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=5001, description="Application port")
    session_max_age: int = Field(
        default=7 * 24 * 3600, description="Session token lifetime in seconds"
    )
    session_signing_secret: str | None = Field(
        default=None, description="Secret for signing session JWTs"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class SecurityConfig(BaseModel):
    """Security configuration for authentication cookies."""

    session_cookie_name: str = Field(
        default="jwt", description="Cookie carrying the session token"
    )
    secure_cookies: bool = Field(
        default=True, description="Force secure cookies outside development"
    )
    cookie_samesite: Literal["lax", "strict", "none"] = Field(
        default="strict", description="SameSite cookie attribute"
    )
    min_password_length: int = Field(
        default=6, description="Minimum accepted password length at signup"
    )
    bcrypt_rounds: int = Field(default=12, description="bcrypt cost factor")


class ChatConfig(BaseModel):
    """External real-time chat provider configuration."""

    api_key: str | None = Field(default=None, description="Provider API key")
    api_secret: str | None = Field(default=None, description="Provider API secret")
    base_url: str = Field(
        default="https://chat.stream-io-api.com",
        description="Provider REST endpoint",
    )
    timeout_seconds: float = Field(
        default=10.0, description="Upper bound for a single provider call"
    )
    token_ttl_seconds: int = Field(
        default=3600, description="Lifetime of issued chat credentials"
    )


class RecommendationConfig(BaseModel):
    """Recommendation pool configuration."""

    default_page_size: int = Field(default=20, description="Default page size")
    max_page_size: int = Field(default=100, description="Upper bound for page size")


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    chat: ChatConfig = Field(
        default_factory=ChatConfig, description="Chat provider configuration"
    )
    recommendations: RecommendationConfig = Field(
        default_factory=RecommendationConfig,
        description="Recommendation configuration",
    )

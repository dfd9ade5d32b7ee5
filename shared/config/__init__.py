"""Shared configuration base classes.

Provides common configuration patterns so that every entry point (API
process, tests) reads logging and backend settings the same way.
"""

from pydantic_settings import BaseSettings


class BaseLoggingConfig(BaseSettings):
    """Common logging configuration."""

    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "key",
        "authorization",
        "cookie",
        "session",
    ]
    app_environment: str = "production"


class BaseHttpClientConfig(BaseSettings):
    """Common settings for the backend HTTP client."""

    backend_base_url: str = "http://backend:8080/"
    backend_timeout_seconds: float = 10.0


class BaseServiceConfig(BaseLoggingConfig, BaseHttpClientConfig):
    """Base configuration combining logging and backend client settings.

    The otel_service_name should be overridden by each entry point.
    """

    otel_service_name: str = "unknown"


__all__ = ["BaseLoggingConfig", "BaseHttpClientConfig", "BaseServiceConfig"]

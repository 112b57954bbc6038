"""Configuration management for disposable containers.

This module provides a unified Settings class with flat fields read from
the environment (or a ``.env`` file) and grouped views over them.

Usage:
    from disposable.config import settings

    # Access grouped settings
    settings.runtime.docker_binary
    settings.launch.launch_max_attempts

    # Or use flat access
    settings.docker_binary
    settings.launch_max_attempts
"""

from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Import grouped configurations
from .runtime import RuntimeConfig
from .launch import LaunchConfig
from .logging import LoggingConfig
from .images import (
    IMAGE_PROTOCOLS,
    get_image_protocol,
    get_known_images,
    image_repository,
)

RUNTIME_BACKENDS = ("api", "cli")
LOG_FORMATS = ("json", "console")


class Settings(BaseSettings):
    """Settings with environment variable support.

    Provides both grouped access via nested configs (settings.runtime.*)
    and flat access (settings.docker_binary).
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Runtime Configuration
    runtime_backend: str = Field(
        default="api",
        description="Launch path: 'api' (docker SDK) or 'cli' (docker binary)",
    )
    docker_base_url: Optional[str] = Field(
        default=None,
        description="Daemon URL; falls back to DOCKER_HOST and the local socket",
    )
    docker_binary: str = Field(default="docker", description="Path to docker CLI")
    runtime_call_timeout: int = Field(
        default=60,
        ge=1,
        le=600,
        description="Timeout for a single daemon request (seconds)",
    )
    container_host_ip: str = Field(
        default="localhost",
        description="Host interface used for port bindings and URLs",
    )

    # Launch Retry Configuration (command-line launch path)
    launch_max_attempts: int = Field(
        default=3, ge=1, le=20, description="Total attempts for a CLI launch"
    )
    launch_backoff_min_ms: int = Field(
        default=30, ge=0, description="Lower bound of the randomized backoff"
    )
    launch_backoff_max_ms: int = Field(
        default=3000, ge=0, description="Upper bound of the randomized backoff"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @validator("runtime_backend")
    def validate_runtime_backend(cls, v):
        """Ensure the backend is one we know how to build."""
        v = v.lower().strip()
        if v not in RUNTIME_BACKENDS:
            raise ValueError(
                f"runtime_backend must be one of {', '.join(RUNTIME_BACKENDS)}"
            )
        return v

    @validator("launch_backoff_max_ms")
    def validate_backoff_bounds(cls, v, values):
        """Ensure the backoff window is not inverted."""
        low = values.get("launch_backoff_min_ms")
        if low is not None and v < low:
            raise ValueError(
                "launch_backoff_max_ms must be greater than or equal to launch_backoff_min_ms"
            )
        return v

    @validator("log_format")
    def validate_log_format(cls, v):
        """Ensure the log format is supported."""
        v = v.lower().strip()
        if v not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return v

    # ========================================================================
    # GROUPED CONFIG ACCESS
    # ========================================================================

    @property
    def runtime(self) -> RuntimeConfig:
        """Access container runtime configuration group."""
        return RuntimeConfig(
            runtime_backend=self.runtime_backend,
            docker_base_url=self.docker_base_url,
            docker_binary=self.docker_binary,
            runtime_call_timeout=self.runtime_call_timeout,
            container_host_ip=self.container_host_ip,
        )

    @property
    def launch(self) -> LaunchConfig:
        """Access CLI launch retry configuration group."""
        return LaunchConfig(
            launch_max_attempts=self.launch_max_attempts,
            launch_backoff_min_ms=self.launch_backoff_min_ms,
            launch_backoff_max_ms=self.launch_backoff_max_ms,
        )

    @property
    def logging(self) -> LoggingConfig:
        """Access logging configuration group."""
        return LoggingConfig(
            log_level=self.log_level,
            log_format=self.log_format,
        )


# Global settings instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    # Grouped configs
    "RuntimeConfig",
    "LaunchConfig",
    "LoggingConfig",
    # Image protocol table
    "IMAGE_PROTOCOLS",
    "get_image_protocol",
    "get_known_images",
    "image_repository",
]

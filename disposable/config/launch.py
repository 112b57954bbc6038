"""Command-line launch retry configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class LaunchConfig(BaseSettings):
    """Retry budget and backoff bounds for process-invocation launches."""

    launch_max_attempts: int = Field(default=3, ge=1, le=20, alias="launch_max_attempts")
    launch_backoff_min_ms: int = Field(default=30, ge=0, alias="launch_backoff_min_ms")
    launch_backoff_max_ms: int = Field(default=3000, ge=0, alias="launch_backoff_max_ms")

    def backoff_bounds_seconds(self) -> tuple:
        """Get the (min, max) backoff bounds in seconds."""
        return self.launch_backoff_min_ms / 1000.0, self.launch_backoff_max_ms / 1000.0

    class Config:
        env_prefix = ""
        extra = "ignore"

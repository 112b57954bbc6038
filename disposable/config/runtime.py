"""Container runtime configuration."""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class RuntimeConfig(BaseSettings):
    """Settings for reaching the container daemon."""

    runtime_backend: str = Field(default="api", alias="runtime_backend")
    docker_base_url: Optional[str] = Field(default=None, alias="docker_base_url")
    docker_binary: str = Field(default="docker", alias="docker_binary")
    runtime_call_timeout: int = Field(
        default=60, ge=1, le=600, alias="runtime_call_timeout"
    )
    container_host_ip: str = Field(default="localhost", alias="container_host_ip")

    class Config:
        env_prefix = ""
        extra = "ignore"

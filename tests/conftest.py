"""Pytest configuration and shared fixtures."""

import os
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest

# Set test environment before importing config
# Use setdefault to allow environment variables to override defaults
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("CONTAINER_HOST_IP", "localhost")

from disposable.models.container import RuntimeInspection

TEST_CONTAINER_ID = "4f1c2d3e5a6b7c8d9e0f11223344556677889900aabbccddeeff001122334455"


def make_attrs(
    container_id: str = TEST_CONTAINER_ID,
    name: str = "/quirky_turing",
    ports: Optional[Dict[str, Any]] = None,
    running: bool = True,
) -> Dict[str, Any]:
    """Build a daemon inspect document like the one the SDK and CLI return."""
    return {
        "Id": container_id,
        "Name": name,
        "State": {"Status": "running" if running else "exited", "Running": running},
        "NetworkSettings": {"Ports": ports if ports is not None else {}},
    }


@pytest.fixture
def mongo_attrs():
    """Inspect document for a mongo container published on 28017."""
    return make_attrs(
        ports={
            "27017/tcp": [
                {"HostIp": "0.0.0.0", "HostPort": "28017"},
                {"HostIp": "::", "HostPort": "28017"},
            ],
            "28018/tcp": None,
        }
    )


@pytest.fixture
def mongo_inspection(mongo_attrs):
    """RuntimeInspection for a mongo container published on 28017."""
    return RuntimeInspection.from_attrs(mongo_attrs)


@pytest.fixture
def mock_runtime_client(mongo_inspection):
    """Mock RuntimeClient for testing."""
    client = AsyncMock()

    client.create_container.return_value = TEST_CONTAINER_ID
    client.start_container.return_value = None
    client.inspect_container.return_value = mongo_inspection
    client.stop_container.return_value = None
    client.ping.return_value = True

    return client


@pytest.fixture
def container_id():
    """Full-length container id used by the mock client."""
    return TEST_CONTAINER_ID


@pytest.fixture
def attrs_factory():
    """Factory for daemon inspect documents."""
    return make_attrs

"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for the connection registry and
WebSocket mocks.
"""

import asyncio
import os

import pytest

# Keep the error log file handler away from the working tree
os.environ.setdefault("LOG_FILE_PATH", os.devnull)

from signaling.managers.connection_registry import (  # noqa: E402
    ConnectionRegistry,
    connection_registry,
)


@pytest.fixture(autouse=True)
def reset_connection_registry():
    """
    Empties the global connection registry around every test.

    The lock is replaced as well, since each test may run on its own event
    loop.
    """
    connection_registry.connections.clear()
    connection_registry._lock = asyncio.Lock()
    yield
    connection_registry.connections.clear()


@pytest.fixture
def registry():
    """
    Provides a fresh, empty ConnectionRegistry.

    Returns:
        ConnectionRegistry: Registry independent of the global one
    """
    return ConnectionRegistry()

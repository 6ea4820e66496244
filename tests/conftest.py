"""Pytest fixtures and test utilities for the shaping test suite."""

from unittest.mock import patch

import pytest
from loguru import logger

from shaper_mcp.config import Config


# ============================================================================
# LOGGING FIXTURES
# ============================================================================


@pytest.fixture
def log_messages():
    """
    Capture loguru messages emitted during a test.

    Yields:
        List of formatted log messages, appended as they are emitted

    Cleanup:
        Removes the capturing sink
    """
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")

    yield messages

    logger.remove(handler_id)


# ============================================================================
# CONFIG FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def default_limits():
    """
    Pin response limits to their documented defaults.

    Environment overrides are ignored so expectations stay stable.
    """
    with patch.multiple(
        Config,
        MAX_RESPONSE_SIZE=1_000_000,
        MAX_ARRAY_ITEMS=50,
        MAX_OBJECT_DEPTH=5,
        MAX_CHUNK_SIZE=500_000,
        MAX_TRAVERSAL_DEPTH=256,
        DEFAULT_PAGE_LIMIT=10,
    ):
        yield

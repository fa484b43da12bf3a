"""Shared test fixtures."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock

import pytest

from pkgtrust.analyzers.github import GitHubFetcher
from pkgtrust.config import Settings
from pkgtrust.log import LOGGER_NAME


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo configure_logging() so handlers don't leak between tests."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def settings() -> Settings:
    return Settings(github_token="test-token", metric_timeout=5.0)


@pytest.fixture
def github() -> AsyncMock:
    """A GitHubFetcher double with every fetch method mocked."""
    return AsyncMock(spec=GitHubFetcher)

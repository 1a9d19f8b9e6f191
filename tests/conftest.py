"""Shared pytest fixtures for testing infrastructure.

CRITICAL: Environment variables MUST be set before ANY imports.
"""
import os

# Override environment variables BEFORE importing any crypto_sensei code
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import logging

import pytest
import structlog
from structlog.testing import LogCapture

from crypto_sensei.core.config import Settings
from crypto_sensei.providers.mock import (
    MockMarketDataProvider,
    MockNarrativeGenerator,
    MockNewsProvider,
)
from crypto_sensei.schemas.market import HistoricalSeries
from crypto_sensei.utils.structured_logging import configure_structured_logging
from tests.factories import REFERENCE_PRICES, REFERENCE_VOLUMES


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings without throttling delays.

    Returns:
        Settings: Test configuration
    """
    return Settings(
        environment="test",
        log_level="WARNING",
        market_data_min_interval=0.0,
        news_min_interval=0.0,
    )


@pytest.fixture(scope="session", autouse=True)
def configure_logging(test_settings: Settings):
    """Configure structured logging for tests."""
    configure_structured_logging(log_level=test_settings.log_level)


@pytest.fixture
def log_capture(test_settings: Settings):
    """Capture structlog events with contextvars merged in."""
    capture = LogCapture()
    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars, capture],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
    )
    yield capture
    structlog.contextvars.clear_contextvars()
    configure_structured_logging(log_level=test_settings.log_level)


@pytest.fixture
def reference_series() -> HistoricalSeries:
    """Ten-point series with constant volume used for hand-computed references."""
    return HistoricalSeries(prices=REFERENCE_PRICES, volumes=REFERENCE_VOLUMES)


@pytest.fixture
def mock_market_data() -> MockMarketDataProvider:
    return MockMarketDataProvider()


@pytest.fixture
def mock_news() -> MockNewsProvider:
    return MockNewsProvider()


@pytest.fixture
def mock_narrative() -> MockNarrativeGenerator:
    return MockNarrativeGenerator()

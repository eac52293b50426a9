"""
Pytest configuration and shared fixtures for the test suite.

This file provides sample adapter output and an event recorder used across
the decoder test modules.
"""

import pytest
from pathlib import Path

import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from cectraffic.parser.bus import EventBus


@pytest.fixture
def sample_adapter_lines():
    """Sample cec-client output lines for testing."""
    return [
        "CEC client registered: libCEC version = 6.0.2",
        "waiting for input",
        "TRAFFIC: [          3475]\t>> 1f:82:10:00",
        "TRAFFIC: [          3480]\t<< 10",
        "TRAFFIC: [          3520]\t>> 0f:80:00:00:10:00",
        "TRAFFIC: [          3600]\t>> 40:47:48:44:4d:49",
        "TRAFFIC: [          3650]\t>> 4f:84:10:00:04",
        "TRAFFIC: [          3700]\t>> 01:36",
        "TRAFFIC: [          3750]\t>> 01:fe:01",
    ]


@pytest.fixture
def bus():
    """Event bus with a recorder attached to every event."""
    event_bus = EventBus()
    event_bus.recorded = []
    event_bus.subscribe_all(event_bus.recorded.append)
    return event_bus


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "cli: mark test as command-line related")


# Pytest collection configuration
def pytest_collection_modifyitems(config, items):
    """Modify collected test items with markers."""
    for item in items:
        if "test_client" in item.fspath.basename:
            item.add_marker(pytest.mark.integration)

        if "test_cli" in item.fspath.basename:
            item.add_marker(pytest.mark.cli)

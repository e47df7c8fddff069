"""
Pytest configuration and fixtures for anyroute tests.
"""

import pytest
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from anyroute.interfaces import Node
from anyroute.stats import get_stats_collector


class RecordingNode(Node):
    """Node that remembers every (packet, forwarder) it was handed."""

    def __init__(self, address):
        self._address = address
        self.received = []

    @property
    def address(self):
        return self._address

    @property
    def packets(self):
        return [p for p, _ in self.received]

    def handle_packet(self, packet, forwarder):
        self.received.append((packet, forwarder))


@pytest.fixture(autouse=True)
def reset_stats():
    """Start every test with zeroed counters."""
    get_stats_collector().reset()
    yield


@pytest.fixture
def make_node():
    """Factory for recording nodes."""
    return RecordingNode


@pytest.fixture
def random_content():
    """Random content bytes."""
    return os.urandom(64)

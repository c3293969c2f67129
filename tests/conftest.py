"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import pytest

from arbitrage_sim.config.models import Settings
from arbitrage_sim.services.quote_store import QuoteStore


@pytest.fixture
def sample_store() -> QuoteStore:
    """Store built from the default sample books."""
    defaults = Settings()
    return QuoteStore.from_raw(defaults.bids, defaults.asks)

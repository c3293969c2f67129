from __future__ import annotations

from typing import Any

from arbitrage_sim.config import Settings, load_settings
from arbitrage_sim.core import configure_logging
from arbitrage_sim.services.arbitrage_engine import ArbitrageMatcher
from arbitrage_sim.services.quote_store import QuoteStore


def build_quote_store(settings: Settings) -> QuoteStore:
    return QuoteStore.from_raw(settings.bids, settings.asks, delimiter=settings.key_delimiter)


def build_components(
    config_path: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> tuple[Settings, QuoteStore, ArbitrageMatcher]:
    settings = load_settings(config_path, overrides)
    configure_logging(settings.logging)

    quote_store = build_quote_store(settings)
    matcher = ArbitrageMatcher(quote_store, settings)

    return settings, quote_store, matcher

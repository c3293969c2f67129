from .arbitrage_engine import ArbitrageMatcher, find_best_arbitrage
from .quote_store import QuoteStore, build_quotes, parse_key
from .reporter import TradeReporter

__all__ = [
    "ArbitrageMatcher",
    "QuoteStore",
    "TradeReporter",
    "build_quotes",
    "find_best_arbitrage",
    "parse_key",
]

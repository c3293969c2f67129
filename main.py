from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from arbitrage_sim.bootstrap import build_components
from arbitrage_sim.core.exceptions import ArbitrageError
from arbitrage_sim.services.reporter import TradeReporter

log = logging.getLogger("arbitrage_sim.system")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate greedy cross-exchange arbitrage on sample order books.")
    parser.add_argument("--config", help="Path to a YAML config file (defaults to config/config.yaml lookup)")
    parser.add_argument("--no-books", action="store_true", help="Do not print the order books")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings, quote_store, matcher = build_components(args.config)
    except ArbitrageError as exc:
        log.error("Failed to start: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    log.info("Starting arbitrage simulation")
    reporter = TradeReporter(precision=settings.report.precision)
    show_books = settings.report.show_books and not args.no_books

    if show_books:
        reporter.print_book(quote_store.bids, "Initial Bids")
        reporter.print_book(quote_store.asks, "Initial Asks")

    result = matcher.run()

    reporter.print_trades(result.trades)
    if show_books:
        reporter.print_book(quote_store.bids, "Remaining Bids")
        reporter.print_book(quote_store.asks, "Remaining Asks")

    return 0


if __name__ == "__main__":
    sys.exit(main())

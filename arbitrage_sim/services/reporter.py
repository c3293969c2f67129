"""
Plain-text report of a matching run.

Writes executed trades and order book listings to a text stream.
"""

from __future__ import annotations

import sys
from typing import Iterable, Mapping, TextIO

from arbitrage_sim.services.schemas import Quote, Trade


def total_net_profit(trades: Iterable[Trade]) -> float:
    return sum(trade.net_profit for trade in trades)


class TradeReporter:
    """Console reporter for trades and remaining liquidity."""

    def __init__(self, output: TextIO | None = None, precision: int = 8) -> None:
        self._output = output or sys.stdout
        self._precision = precision

    def _num(self, value: float) -> str:
        return f"{value:.{self._precision}f}"

    def _write(self, line: str = "") -> None:
        self._output.write(line + "\n")

    def format_trade(self, trade: Trade) -> str:
        return (
            f" Buy from {trade.buy_venue} @ {self._num(trade.buy_price)}"
            f" (fee={self._num(trade.buy_fee)})"
            f", sell to {trade.sell_venue} @ {self._num(trade.sell_price)}"
            f" (fee={self._num(trade.sell_fee)})"
            f", vol={trade.volume}, ppu={self._num(trade.profit_per_unit)}"
            f", net={self._num(trade.net_profit)}"
        )

    def print_trades(self, trades: Iterable[Trade]) -> float:
        """Write every trade followed by the total net profit, and return that total."""
        total = 0.0
        self._write()
        self._write("Executed Arbitrage Trades:")
        for trade in trades:
            self._write(self.format_trade(trade))
            total += trade.net_profit
        self._write()
        self._write(f"Total Net Profit: {self._num(total)}")
        return total

    def print_book(self, book: Mapping[str, Quote], label: str) -> None:
        self._write()
        self._write(f"{label}:")
        for quote in book.values():
            self._write(
                f"  {quote.venue} -> price: {self._num(quote.price)}"
                f", fee: {self._num(quote.fee_rate)}, volume: {quote.volume}"
            )

from __future__ import annotations

import logging

from arbitrage_sim.config.models import Settings
from arbitrage_sim.core.exceptions import ArbitrageError
from arbitrage_sim.services.quote_store import QuoteStore
from arbitrage_sim.services.schemas import MatchResult, Quote, QuoteBook, Trade

log = logging.getLogger(__name__)


def _best_pair(bids: QuoteBook, asks: QuoteBook, min_profit_per_unit: float) -> Trade | None:
    """Scan every live ask/bid pair on different venues for the highest profit per unit.

    Only a strictly better pair replaces the current best, so on ties the first
    pair in book order (asks outer, bids inner) wins.
    """
    best: Trade | None = None
    best_profit_per_unit = min_profit_per_unit

    for ask in asks.values():
        if ask.exhausted:
            continue
        effective_cost = ask.effective_cost()

        for bid in bids.values():
            if bid.exhausted:
                continue
            if ask.venue == bid.venue:
                continue

            profit_per_unit = bid.effective_proceeds() - effective_cost
            if profit_per_unit > best_profit_per_unit:
                volume = min(ask.volume, bid.volume)
                best = Trade(
                    buy_venue=ask.venue,
                    sell_venue=bid.venue,
                    buy_fee=ask.fee_rate,
                    sell_fee=bid.fee_rate,
                    buy_price=ask.price,
                    sell_price=bid.price,
                    volume=volume,
                    profit_per_unit=profit_per_unit,
                    net_profit=profit_per_unit * volume,
                )
                best_profit_per_unit = profit_per_unit

    return best


def _locate(book: QuoteBook, venue: str, fee_rate: float, price: float) -> Quote | None:
    for quote in book.values():
        if not quote.exhausted and quote.matches(venue, fee_rate, price):
            return quote
    return None


def _apply_trade(bids: QuoteBook, asks: QuoteBook, trade: Trade) -> None:
    ask = _locate(asks, trade.buy_venue, trade.buy_fee, trade.buy_price)
    bid = _locate(bids, trade.sell_venue, trade.sell_fee, trade.sell_price)
    if ask is None or bid is None:
        raise ArbitrageError(f"Traded quote vanished from the book: {trade}")
    ask.volume -= trade.volume
    bid.volume -= trade.volume


def find_best_arbitrage(
    bids: QuoteBook,
    asks: QuoteBook,
    min_profit_per_unit: float = 0.0,
) -> list[Trade]:
    """Greedily execute the most profitable cross-venue trade until none is left.

    Each pass picks the single best ask/bid pairing, trades the volume both
    sides can support and subtracts it from the two quotes in place. The loop
    stops on the first pass that finds no pair earning strictly more than
    ``min_profit_per_unit`` per unit. Every pass exhausts at least one quote,
    so the number of trades is bounded by the number of quotes.

    Returns the executed trades in execution order.
    """
    trades: list[Trade] = []

    while True:
        trade = _best_pair(bids, asks, min_profit_per_unit)
        if trade is None:
            break

        _apply_trade(bids, asks, trade)
        trades.append(trade)
        log.debug(
            "Trade #%d: buy %s @ %.8f (fee %.5f) -> sell %s @ %.8f (fee %.5f), vol=%d, ppu=%.8f, net=%.8f",
            len(trades),
            trade.buy_venue,
            trade.buy_price,
            trade.buy_fee,
            trade.sell_venue,
            trade.sell_price,
            trade.sell_fee,
            trade.volume,
            trade.profit_per_unit,
            trade.net_profit,
        )

    return trades


class ArbitrageMatcher:
    def __init__(self, quote_store: QuoteStore, settings: Settings) -> None:
        self._quote_store = quote_store
        self._settings = settings
        self._latest = MatchResult()

    @property
    def latest(self) -> MatchResult:
        return self._latest

    def run(self) -> MatchResult:
        """Run the matching loop on the store's books, mutating them in place."""
        bids = self._quote_store.bids
        asks = self._quote_store.asks
        log.debug("Matching %d bids against %d asks", len(bids), len(asks))

        trades = find_best_arbitrage(
            bids,
            asks,
            min_profit_per_unit=self._settings.thresholds.min_profit_per_unit,
        )
        result = MatchResult(trades=tuple(trades))
        self._latest = result

        if result.is_empty:
            log.info("No profitable arbitrage found (bids: %d, asks: %d)", len(bids), len(asks))
        else:
            log.info(
                "Executed %d arbitrage trades, volume %d, net profit %.8f",
                len(result),
                result.total_volume,
                result.total_net_profit,
            )
        return result

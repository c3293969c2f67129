from __future__ import annotations

import logging
import random
from collections import defaultdict

import pytest

from arbitrage_sim.config.models import Settings
from arbitrage_sim.services.arbitrage_engine import ArbitrageMatcher, find_best_arbitrage
from arbitrage_sim.services.quote_store import QuoteStore, build_quotes


def random_books(seed: int, venues: int = 5) -> tuple[dict[str, tuple[float, int]], dict[str, tuple[float, int]]]:
    """Random bid/ask books with one quote per venue per side."""
    rng = random.Random(seed)
    fees = [0.0, 0.0002, 0.001, 0.01]

    def book() -> dict[str, tuple[float, int]]:
        return {
            f"ex{i}-{rng.choice(fees)}": (round(rng.uniform(0.9, 1.1), 4), rng.randint(0, 20))
            for i in range(venues)
        }

    return book(), book()


def test_single_profitable_pair_trades_full_volume() -> None:
    asks = build_quotes({"X-0": (1.00, 5)})
    bids = build_quotes({"Y-0": (1.10, 5)})

    trades = find_best_arbitrage(bids, asks)

    assert len(trades) == 1
    trade = trades[0]
    assert trade.buy_venue == "X"
    assert trade.sell_venue == "Y"
    assert trade.volume == 5
    assert trade.profit_per_unit == pytest.approx(0.10)
    assert trade.net_profit == pytest.approx(0.50)
    assert asks["X-0"].volume == 0
    assert bids["Y-0"].volume == 0


def test_same_venue_is_never_arbitraged() -> None:
    asks = build_quotes({"X-0": (1.00, 5)})
    bids = build_quotes({"X-0": (1.50, 5)})

    assert find_best_arbitrage(bids, asks) == []
    assert asks["X-0"].volume == 5
    assert bids["X-0"].volume == 5


def test_partial_fill_leaves_remaining_ask() -> None:
    asks = build_quotes({"X-0": (1.00, 10)})
    bids = build_quotes({"Y-0": (1.10, 3)})

    trades = find_best_arbitrage(bids, asks)

    assert [t.volume for t in trades] == [3]
    assert asks["X-0"].volume == 7
    assert bids["Y-0"].volume == 0

    assert find_best_arbitrage(bids, asks) == []
    assert asks["X-0"].volume == 7


def test_partial_fill_continues_with_another_bid() -> None:
    asks = build_quotes({"X-0": (1.00, 10)})
    bids = build_quotes({"Y-0": (1.10, 3), "Z-0": (1.05, 20)})

    trades = find_best_arbitrage(bids, asks)

    assert [(t.sell_venue, t.volume) for t in trades] == [("Y", 3), ("Z", 7)]
    assert asks["X-0"].volume == 0
    assert bids["Z-0"].volume == 13


def test_fees_erase_spread() -> None:
    asks = build_quotes({"X-0.05": (1.00, 5), "W-0.03": (1.00, 5)})
    bids = build_quotes({"Y-0.01": (1.04, 5), "Z-0.02": (1.05, 5)})

    assert find_best_arbitrage(bids, asks) == []
    assert [q.volume for q in asks.values()] == [5, 5]
    assert [q.volume for q in bids.values()] == [5, 5]


def test_empty_and_exhausted_books_yield_no_trades() -> None:
    assert find_best_arbitrage({}, {}) == []
    assert find_best_arbitrage(build_quotes({"Y-0": (2.0, 5)}), {}) == []

    asks = build_quotes({"X-0": (1.0, 0)})
    bids = build_quotes({"Y-0": (2.0, 0)})
    assert find_best_arbitrage(bids, asks) == []


def test_best_pair_is_taken_first() -> None:
    asks = build_quotes({"A-0": (1.00, 5), "B-0": (0.90, 5)})
    bids = build_quotes({"C-0": (1.20, 5), "D-0": (1.05, 10)})

    trades = find_best_arbitrage(bids, asks)

    assert [(t.buy_venue, t.sell_venue, t.volume) for t in trades] == [
        ("B", "C", 5),
        ("A", "D", 5),
    ]
    assert trades[0].profit_per_unit == pytest.approx(0.30)
    assert trades[1].profit_per_unit == pytest.approx(0.05)


def test_ties_resolve_in_book_order() -> None:
    asks = build_quotes({"A-0": (1.00, 5), "B-0": (1.00, 5)})
    bids = build_quotes({"C-0": (1.10, 5)})

    trades = find_best_arbitrage(bids, asks)

    assert len(trades) == 1
    assert trades[0].buy_venue == "A"
    assert asks["A-0"].volume == 0
    assert asks["B-0"].volume == 5


def test_duplicate_quote_content_never_goes_negative() -> None:
    asks = build_quotes({"X-0": (1.00, 2), "X-0.0": (1.00, 3)})
    bids = build_quotes({"Y-0": (1.20, 4)})

    trades = find_best_arbitrage(bids, asks)

    assert [t.volume for t in trades] == [2, 2]
    assert asks["X-0"].volume == 0
    assert asks["X-0.0"].volume == 1
    assert bids["Y-0"].volume == 0


def test_profit_threshold() -> None:
    asks = build_quotes({"X-0": (1.00, 5)})
    bids = build_quotes({"Y-0": (1.10, 5)})

    assert find_best_arbitrage(bids, asks, min_profit_per_unit=0.2) == []
    assert asks["X-0"].volume == 5

    trades = find_best_arbitrage(bids, asks, min_profit_per_unit=0.05)
    assert len(trades) == 1


def test_sample_books_trade_sequence(sample_store: QuoteStore) -> None:
    trades = find_best_arbitrage(sample_store.bids, sample_store.asks)

    assert [(t.buy_venue, t.sell_venue, t.volume) for t in trades] == [
        ("ex5", "ex4", 3),
        ("ex1", "ex4", 1),
        ("ex1", "ex3", 5),
        ("ex1", "ex2", 10),
    ]
    assert trades[0].profit_per_unit == pytest.approx(0.059745)
    assert trades[1].profit_per_unit == pytest.approx(0.0595146)
    assert trades[2].profit_per_unit == pytest.approx(0.0395696)
    assert trades[3].profit_per_unit == pytest.approx(0.0192796)
    assert sum(t.net_profit for t in trades) == pytest.approx(0.6293936)

    assert sample_store.volumes() == {
        "bids": {"ex1-0.00024": 10, "ex2-0.0005": 0, "ex3-0.0002": 0, "ex4-0.00025": 0, "ex5-0": 11},
        "asks": {"ex1-0.00024": 34, "ex2-0.0005": 8, "ex3-0.0002": 2, "ex4-0.00025": 5, "ex5-0": 0},
    }


@pytest.mark.parametrize("seed", range(25))
def test_random_books_invariants(seed: int) -> None:
    raw_bids, raw_asks = random_books(seed)
    store = QuoteStore.from_raw(raw_bids, raw_asks)
    before = store.volumes()
    initial_volume = store.total_volume("bids") + store.total_volume("asks")

    trades = find_best_arbitrage(store.bids, store.asks)

    assert len(trades) <= len(store.bids) + len(store.asks)
    assert len(trades) <= initial_volume
    for trade in trades:
        assert trade.volume > 0
        assert trade.profit_per_unit > 0
        assert trade.net_profit > 0
        assert trade.buy_venue != trade.sell_venue

    bought: dict[str, int] = defaultdict(int)
    sold: dict[str, int] = defaultdict(int)
    for trade in trades:
        bought[trade.buy_venue] += trade.volume
        sold[trade.sell_venue] += trade.volume

    # one quote per venue per side, so venue identifies the quote
    for key, quote in store.asks.items():
        assert quote.volume >= 0
        assert before["asks"][key] - quote.volume == bought[quote.venue]
    for key, quote in store.bids.items():
        assert quote.volume >= 0
        assert before["bids"][key] - quote.volume == sold[quote.venue]

    after = store.volumes()
    assert find_best_arbitrage(store.bids, store.asks) == []
    assert store.volumes() == after


def test_matcher_runs_on_store(sample_store: QuoteStore, caplog: pytest.LogCaptureFixture) -> None:
    settings = Settings.model_validate({"thresholds": {"min_profit_per_unit": 0.0}})
    matcher = ArbitrageMatcher(sample_store, settings)
    assert matcher.latest.is_empty

    with caplog.at_level(logging.INFO, logger="arbitrage_sim.services.arbitrage_engine"):
        result = matcher.run()

    assert len(result) == 4
    assert result.total_volume == 19
    assert result.total_net_profit == pytest.approx(0.6293936)
    assert matcher.latest is result
    assert "Executed 4 arbitrage trades" in caplog.text

    second = matcher.run()
    assert second.is_empty
    assert second.total_net_profit == 0


def test_matcher_uses_configured_threshold(sample_store: QuoteStore) -> None:
    settings = Settings.model_validate({"thresholds": {"min_profit_per_unit": 0.05}})
    result = ArbitrageMatcher(sample_store, settings).run()

    assert [(t.buy_venue, t.sell_venue, t.volume) for t in result.trades] == [
        ("ex5", "ex4", 3),
        ("ex1", "ex4", 1),
    ]

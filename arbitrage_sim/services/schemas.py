from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


@dataclass(slots=True)
class Quote:
    venue: str
    fee_rate: float  # fractional, e.g. 0.00024
    price: float
    volume: int  # remaining tradable quantity, only ever decreases

    @property
    def exhausted(self) -> bool:
        return self.volume <= 0

    def effective_cost(self) -> float:
        """Per-unit cost of buying at this quote, fee included."""
        return self.price * (1.0 + self.fee_rate)

    def effective_proceeds(self) -> float:
        """Per-unit amount received when selling at this quote, fee included."""
        return self.price * (1.0 - self.fee_rate)

    def matches(self, venue: str, fee_rate: float, price: float) -> bool:
        return self.venue == venue and self.fee_rate == fee_rate and self.price == price


QuoteBook = dict[str, Quote]
RawBook = Mapping[str, tuple[float, int]]


@dataclass(slots=True, frozen=True)
class Trade:
    buy_venue: str
    sell_venue: str
    buy_fee: float
    sell_fee: float
    buy_price: float
    sell_price: float
    volume: int
    profit_per_unit: float
    net_profit: float


@dataclass(slots=True, frozen=True)
class MatchResult:
    trades: tuple[Trade, ...] = ()

    @property
    def total_net_profit(self) -> float:
        return sum(trade.net_profit for trade in self.trades)

    @property
    def total_volume(self) -> int:
        return sum(trade.volume for trade in self.trades)

    @property
    def is_empty(self) -> bool:
        return not self.trades

    def __len__(self) -> int:
        return len(self.trades)

from __future__ import annotations

import logging
import math
from typing import Literal

from arbitrage_sim.core.exceptions import InvalidQuoteError, MalformedKeyError
from arbitrage_sim.services.schemas import Quote, QuoteBook, RawBook

log = logging.getLogger(__name__)

Side = Literal["bids", "asks"]


def parse_key(key: str, delimiter: str = "-") -> tuple[str, float]:
    """Split a composite ``"<venue>-<fee_rate>"`` key into venue and fee rate.

    The key is split on the first delimiter, so the fee segment keeps any
    further delimiters and fails to parse.
    """
    venue, sep, fee_text = key.partition(delimiter)
    if not sep:
        raise MalformedKeyError(key, f"missing {delimiter!r} delimiter")
    try:
        fee_rate = float(fee_text)
    except ValueError as exc:
        raise MalformedKeyError(key, f"fee segment {fee_text!r} is not a number") from exc
    if not math.isfinite(fee_rate):
        raise MalformedKeyError(key, f"fee segment {fee_text!r} is not finite")
    if fee_rate < 0:
        raise MalformedKeyError(key, f"fee rate {fee_rate} is negative")
    return venue, fee_rate


def _check_quote(key: str, price: float, volume: float) -> tuple[float, int]:
    try:
        price = float(price)
    except (TypeError, ValueError) as exc:
        raise InvalidQuoteError(key, f"price {price!r} is not a number") from exc
    if not math.isfinite(price) or price <= 0:
        raise InvalidQuoteError(key, f"price {price} is not a positive finite number")

    if isinstance(volume, bool) or not isinstance(volume, (int, float)):
        raise InvalidQuoteError(key, f"volume {volume!r} is not a number")
    if isinstance(volume, float) and not volume.is_integer():
        raise InvalidQuoteError(key, f"volume {volume} is not a whole number")
    if volume < 0:
        raise InvalidQuoteError(key, f"volume {volume} is negative")
    return price, int(volume)


def build_quotes(raw: RawBook, delimiter: str = "-") -> QuoteBook:
    """Convert raw ``key -> (price, volume)`` entries into a quote book.

    Any malformed key or unusable price/volume aborts construction; nothing
    is returned for the entries parsed before it. Volumes are never rounded.
    """
    quotes: QuoteBook = {}
    for key, (price, volume) in raw.items():
        venue, fee_rate = parse_key(key, delimiter)
        price, volume = _check_quote(key, price, volume)
        quotes[key] = Quote(venue=venue, fee_rate=fee_rate, price=price, volume=volume)
    return quotes


class QuoteStore:
    """Holds the bid and ask books for one matching run.

    The books are handed to the matcher by reference and mutated in place,
    so after a run they show the remaining liquidity.
    """

    def __init__(self, bids: QuoteBook | None = None, asks: QuoteBook | None = None) -> None:
        self._books: dict[str, QuoteBook] = {
            "bids": bids if bids is not None else {},
            "asks": asks if asks is not None else {},
        }

    @classmethod
    def from_raw(cls, raw_bids: RawBook, raw_asks: RawBook, delimiter: str = "-") -> QuoteStore:
        bids = build_quotes(raw_bids, delimiter)
        asks = build_quotes(raw_asks, delimiter)
        log.info("Built quote store: %d bids, %d asks", len(bids), len(asks))
        return cls(bids=bids, asks=asks)

    @property
    def bids(self) -> QuoteBook:
        return self._books["bids"]

    @property
    def asks(self) -> QuoteBook:
        return self._books["asks"]

    def book(self, side: Side) -> QuoteBook:
        try:
            return self._books[side]
        except KeyError:
            raise ValueError(f"Unknown book side: {side!r}") from None

    def get(self, side: Side, key: str) -> Quote | None:
        return self.book(side).get(key)

    def remaining(self, side: Side) -> list[Quote]:
        return [quote for quote in self.book(side).values() if not quote.exhausted]

    def total_volume(self, side: Side) -> int:
        return sum(quote.volume for quote in self.book(side).values())

    def volumes(self) -> dict[str, dict[str, int]]:
        """Snapshot of remaining volume per key for both sides."""
        return {
            side: {key: quote.volume for key, quote in book.items()}
            for side, book in self._books.items()
        }

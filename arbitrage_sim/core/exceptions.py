class ArbitrageError(Exception):
    """Base error for the arbitrage simulator."""


class MalformedKeyError(ArbitrageError, ValueError):
    """Raised when a composite quote key cannot be split into venue and fee."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Malformed quote key {key!r}: {reason}")
        self.key = key
        self.reason = reason


class InvalidQuoteError(ArbitrageError, ValueError):
    """Raised when a raw quote carries an unusable price or volume."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Invalid quote {key!r}: {reason}")
        self.key = key
        self.reason = reason


class ConfigurationError(ArbitrageError):
    """Raised when settings fail validation."""

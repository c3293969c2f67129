from .exceptions import ArbitrageError, ConfigurationError, InvalidQuoteError, MalformedKeyError
from .logging import configure_logging

__all__ = ["configure_logging", "ArbitrageError", "ConfigurationError", "InvalidQuoteError", "MalformedKeyError"]

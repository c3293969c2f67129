from __future__ import annotations

import logging
from typing import Annotated

from pydantic import BaseModel, Field, NonNegativeInt, field_validator

Price = Annotated[float, Field(gt=0, allow_inf_nan=False)]
RawQuote = tuple[Price, NonNegativeInt]

# Sample order books: composite "<venue>-<fee_rate>" key -> (price, volume)
DEFAULT_BIDS: dict[str, tuple[float, int]] = {
    "ex1-0.00024": (0.95, 10),
    "ex2-0.0005": (0.98, 10),
    "ex3-0.0002": (1.00, 5),
    "ex4-0.00025": (1.02, 4),
    "ex5-0": (0.94, 11),
}

DEFAULT_ASKS: dict[str, tuple[float, int]] = {
    "ex1-0.00024": (0.96, 50),
    "ex2-0.0005": (1.03, 8),
    "ex3-0.0002": (1.01, 2),
    "ex4-0.00025": (1.04, 5),
    "ex5-0": (0.96, 3),
}


class ThresholdsConfig(BaseModel):
    min_profit_per_unit: float = Field(default=0.0, ge=0.0)


class ReportConfig(BaseModel):
    precision: int = Field(default=8, ge=0, le=16)
    show_books: bool = True


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    json_format: bool = Field(default=False, alias="json")
    directory: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: object) -> object:
        """Normalise to an upper-case name the logging module knows."""
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in logging.getLevelNamesMapping():
                raise ValueError(f"Unknown log level: {v}")
        return v


class Settings(BaseModel):
    bids: dict[str, RawQuote] = Field(default_factory=lambda: dict(DEFAULT_BIDS))
    asks: dict[str, RawQuote] = Field(default_factory=lambda: dict(DEFAULT_ASKS))
    key_delimiter: str = Field(default="-", min_length=1, max_length=1)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

"""AQI trend series construction.

A trend is six points labelled by clients as ``SERIES_LABELS``: four hours of
history, the current hour and one forecast hour. ``HistoricalAlignedBuilder``
samples the provider's hourly series around the current hour.
``SyntheticWalkBuilder`` only exists so a location without any hourly data
still renders a chart; its output carries no forecasting meaning.
"""

import math
import random
from abc import ABC, abstractmethod
from datetime import UTC, datetime

from airaware.schemas.environment import HourlySeries

SERIES_LENGTH = 6
SERIES_LABELS = ("4h ago", "3h ago", "2h ago", "1h ago", "Now", "Forecast")
HISTORY_HOURS = 4

# "Moderate" midpoint used whenever a real value is unavailable
NEUTRAL_AQI = 50

SYNTHETIC_SPREAD = 10


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def _as_aqi(value: float) -> int:
    return max(0, round_half_up(value))


def _value_at(values: list[float | None], index: int) -> float | None:
    if 0 <= index < len(values):
        return values[index]
    return None


def build_series(hourly: HourlySeries, now_utc: datetime) -> list[int]:
    """
    Sample an hourly AQI series around the current hour.

    Args:
        hourly: Provider timestamps and values, oldest first
        now_utc: Reference instant; naive values are read as UTC

    Returns:
        Six non-negative AQI values; all ``NEUTRAL_AQI`` if no timestamp is at or after now
    """
    if now_utc.tzinfo is None:
        now_utc = now_utc.replace(tzinfo=UTC)

    current = next((i for i, stamp in enumerate(hourly.timestamps) if stamp >= now_utc), None)
    if current is None:
        return [NEUTRAL_AQI] * SERIES_LENGTH

    values = hourly.values
    anchor = _value_at(values, current)
    if anchor is None:
        anchor = NEUTRAL_AQI

    series = []
    for offset in range(HISTORY_HOURS, -1, -1):
        value = _value_at(values, current - offset)
        series.append(_as_aqi(anchor if value is None else value))

    upcoming = _value_at(values, current + 1)
    series.append(series[-1] if upcoming is None else _as_aqi(upcoming))
    return series


def synthesize_series(current_aqi: int, rng: random.Random | None = None) -> list[int]:
    """Perturb the current AQI with bounded noise; never used when hourly data exists."""
    rng = rng or random.Random()
    return [
        _as_aqi(current_aqi + rng.uniform(-SYNTHETIC_SPREAD, SYNTHETIC_SPREAD))
        for _ in range(SERIES_LENGTH)
    ]


class ForecastSeriesBuilder(ABC):
    """Strategy producing the six point AQI trend."""

    @abstractmethod
    def build(self, current_aqi: int, hourly: HourlySeries | None, now_utc: datetime) -> list[int]:
        """Return exactly ``SERIES_LENGTH`` non-negative AQI values."""


class HistoricalAlignedBuilder(ForecastSeriesBuilder):
    """Trend taken from real hourly readings aligned to the current hour."""

    def build(self, current_aqi: int, hourly: HourlySeries | None, now_utc: datetime) -> list[int]:
        return build_series(hourly or HourlySeries(), now_utc)


class SyntheticWalkBuilder(ForecastSeriesBuilder):
    """Degraded trend for locations with only a current reading."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def build(self, current_aqi: int, hourly: HourlySeries | None, now_utc: datetime) -> list[int]:
        return synthesize_series(current_aqi, self.rng)

"""Environment service for weather and air quality logic."""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime

import httpx
import structlog

from airaware.config import settings
from airaware.core.exceptions import AirQualityUnavailableError, WeatherUnavailableError
from airaware.core.http_client import provider_client
from airaware.schemas.environment import Conditions, HourlySeries
from airaware.schemas.location import Location
from airaware.services.forecast import (
    ForecastSeriesBuilder,
    HistoricalAlignedBuilder,
    SyntheticWalkBuilder,
    round_half_up,
)

logger = structlog.get_logger(__name__)

NO_COVERAGE_MESSAGE = (
    "Air quality data is not available for this location. Please try a different city."
)

MS_TO_KPH = 3.6

DEFAULT_WEATHER_LABEL = "Clear"

# WMO weather interpretation codes
WEATHER_CODES = {
    0: "Clear",
    1: "Mainly Clear",
    2: "Partly Cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Depositing Rime Fog",
    51: "Light Drizzle",
    53: "Moderate Drizzle",
    55: "Dense Drizzle",
    56: "Light Freezing Drizzle",
    57: "Dense Freezing Drizzle",
    61: "Slight Rain",
    63: "Moderate Rain",
    65: "Heavy Rain",
    66: "Light Freezing Rain",
    67: "Heavy Freezing Rain",
    71: "Slight Snow",
    73: "Moderate Snow",
    75: "Heavy Snow",
    77: "Snow Grains",
    80: "Slight Rain Showers",
    81: "Moderate Rain Showers",
    82: "Violent Rain Showers",
    85: "Slight Snow Showers",
    86: "Heavy Snow Showers",
    95: "Thunderstorm",
    96: "Thunderstorm with Hail",
    99: "Thunderstorm with Heavy Hail",
}


def describe_weather(code: int | None) -> str:
    """Map a WMO weather code to a short label; unknown codes read as clear."""
    return WEATHER_CODES.get(code, DEFAULT_WEATHER_LABEL)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _reading(value: object) -> float:
    """Return a numeric provider reading, rejecting strings and booleans."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _or_zero(value: object) -> float:
    return max(0.0, _reading(value)) if value is not None else 0.0


class ConditionsAggregator:
    """Service merging Open-Meteo weather and air quality into Conditions."""

    WEATHER_FIELDS = "temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code"
    AIR_QUALITY_FIELDS = "us_aqi,pm2_5,pm10,ozone"

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        historical: ForecastSeriesBuilder | None = None,
        synthetic: ForecastSeriesBuilder | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.client = client
        self.historical = historical or HistoricalAlignedBuilder()
        self.synthetic = synthetic or SyntheticWalkBuilder()
        self.clock = clock or _utc_now

    async def fetch_conditions(self, location: Location) -> Conditions:
        """
        Fetch current weather and air quality for a location.

        Both providers are queried concurrently. When both fail the weather
        error is the one reported.

        Args:
            location: Resolved location

        Returns:
            Merged conditions including the six point AQI trend

        Raises:
            WeatherUnavailableError: If weather retrieval fails
            AirQualityUnavailableError: If AQI retrieval fails or the location has no coverage
        """
        async with provider_client(self.client) as client:
            weather, air = await asyncio.gather(
                self._fetch_weather(client, location),
                self._fetch_air_quality(client, location),
                return_exceptions=True,
            )

        for result in (weather, air):
            if isinstance(result, BaseException):
                raise result

        aqi = air["aqi"]
        hourly = air["hourly"]

        now = self.clock().replace(minute=0, second=0, microsecond=0)
        if hourly is not None and hourly.timestamps:
            forecast = self.historical.build(aqi, hourly, now)
        else:
            logger.info("forecast_synthesized", city=location.city_name, aqi=aqi)
            forecast = self.synthetic.build(aqi, None, now)

        return Conditions(
            city=location.city_name,
            country=location.country_code,
            aqi=aqi,
            temperature_c=weather["temperature_c"],
            humidity_pct=weather["humidity_pct"],
            wind_kph=weather["wind_kph"],
            pm25=air["pm25"],
            pm10=air["pm10"],
            ozone=air["ozone"],
            weather_label=weather["weather_label"],
            forecast=forecast,
        )

    async def _fetch_weather(self, client: httpx.AsyncClient, location: Location) -> dict:
        try:
            response = await client.get(
                settings.open_meteo_weather_url,
                params={
                    "latitude": location.latitude,
                    "longitude": location.longitude,
                    "current": self.WEATHER_FIELDS,
                    "wind_speed_unit": "ms",
                    "timezone": "auto",
                },
            )
            response.raise_for_status()
            current = response.json()["current"]
            return {
                "temperature_c": round_half_up(current["temperature_2m"]),
                "humidity_pct": round_half_up(current["relative_humidity_2m"]),
                "wind_kph": round_half_up(current["wind_speed_10m"] * MS_TO_KPH),
                "weather_label": describe_weather(current.get("weather_code")),
            }
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning("weather_fetch_failed", city=location.city_name, error=str(e))
            raise WeatherUnavailableError() from e

    async def _fetch_air_quality(self, client: httpx.AsyncClient, location: Location) -> dict:
        try:
            response = await client.get(
                settings.open_meteo_air_quality_url,
                params={
                    "latitude": location.latitude,
                    "longitude": location.longitude,
                    "current": self.AIR_QUALITY_FIELDS,
                    "hourly": "us_aqi",
                    "past_days": 1,
                    "forecast_days": 2,
                    "timezone": "GMT",
                },
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("air_quality_fetch_failed", city=location.city_name, error=str(e))
            raise AirQualityUnavailableError() from e

        current = data.get("current") if isinstance(data, dict) else None
        if current is not None and not isinstance(current, dict):
            logger.warning("air_quality_malformed", city=location.city_name, current=current)
            raise AirQualityUnavailableError()
        if not current or current.get("us_aqi") is None:
            logger.info("air_quality_no_coverage", city=location.city_name)
            raise AirQualityUnavailableError(NO_COVERAGE_MESSAGE)

        try:
            return {
                "aqi": max(0, round_half_up(_reading(current["us_aqi"]))),
                "pm25": _or_zero(current.get("pm2_5")),
                "pm10": _or_zero(current.get("pm10")),
                "ozone": _or_zero(current.get("ozone")),
                "hourly": self._parse_hourly(data.get("hourly")),
            }
        except (TypeError, ValueError) as e:
            logger.warning("air_quality_malformed", city=location.city_name, error=str(e))
            raise AirQualityUnavailableError() from e

    def _parse_hourly(self, hourly: dict | None) -> HourlySeries | None:
        """Parse the hourly block; an unreadable block counts as no hourly data."""
        if not isinstance(hourly, dict) or not hourly:
            return None
        try:
            return HourlySeries(timestamps=hourly.get("time"), values=hourly.get("us_aqi") or [])
        except (TypeError, ValueError) as e:
            logger.warning("hourly_series_unreadable", error=str(e))
            return None

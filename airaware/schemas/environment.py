"""Environment schemas for weather, air quality and advisories."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from airaware.schemas.location import Location


class AqiBand(str, Enum):
    """Health advisory band enumeration."""

    GOOD = "Good"
    MODERATE = "Moderate"
    UNHEALTHY = "Unhealthy"
    HAZARDOUS = "Hazardous"


class HourlySeries(BaseModel):
    """Hourly AQI readings as returned by the air quality provider."""

    timestamps: list[datetime] = Field(default_factory=list)
    values: list[float | None] = Field(default_factory=list)

    model_config = {"frozen": True}

    @field_validator("timestamps", mode="before")
    @classmethod
    def parse_timestamps(cls, v: list) -> list[datetime]:
        """Parse ISO timestamps, reading naive ones as UTC."""
        parsed = []
        for item in v or []:
            stamp = item if isinstance(item, datetime) else datetime.fromisoformat(item)
            if stamp.tzinfo is None:
                stamp = stamp.replace(tzinfo=UTC)
            parsed.append(stamp)
        return parsed


class Conditions(BaseModel):
    """Merged weather and air quality readings for one location."""

    city: str
    country: str = ""
    aqi: int = Field(..., ge=0, description="US AQI")
    temperature_c: int
    humidity_pct: int = Field(..., ge=0, le=100)
    wind_kph: int = Field(..., ge=0)
    pm25: float = Field(default=0.0, ge=0, description="PM2.5 in µg/m³")
    pm10: float = Field(default=0.0, ge=0, description="PM10 in µg/m³")
    ozone: float = Field(default=0.0, ge=0)
    weather_label: str
    forecast: list[int] = Field(
        ...,
        min_length=6,
        max_length=6,
        description="AQI trend: 4h ago, 3h ago, 2h ago, 1h ago, now, forecast",
    )

    model_config = {"frozen": True}


class Advisory(BaseModel):
    """Health advisory derived from conditions."""

    band: AqiBand
    text: str

    model_config = {"frozen": True}


class DashboardReport(BaseModel):
    """Response model bundling a location, its conditions and the advisory."""

    location: Location
    conditions: Conditions
    advisory: Advisory

    model_config = {"frozen": True}

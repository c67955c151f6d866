from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import httpx
import pytest
import pytest_asyncio
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from airaware.schemas.location import Location  # noqa: E402

SEARCH_PATH = "/search"
REVERSE_PATH = "/reverse"
WEATHER_PATH = "/v1/forecast"
AIR_QUALITY_PATH = "/v1/air-quality"

# Fixed reference hour used by aggregator tests
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


class ProviderStub:
    """Fake upstream providers keyed by request path."""

    def __init__(self) -> None:
        self.routes: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []

    def respond(self, path: str, json=None, status_code: int = 200) -> None:
        self.routes[path] = {"json": json, "status_code": status_code, "error": None}

    def fail(self, path: str, error: type[httpx.HTTPError] = httpx.ConnectError) -> None:
        self.routes[path] = {"json": None, "status_code": 0, "error": error}

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "no route"})
        if route["error"] is not None:
            raise route["error"]("provider unreachable", request=request)
        return httpx.Response(route["status_code"], json=route["json"])


def hourly_block(start: datetime, values: list[float | None]) -> dict:
    """Build an Open-Meteo hourly block with one value per hour from start."""
    return {
        "time": [(start + timedelta(hours=i)).strftime("%Y-%m-%dT%H:%M") for i in range(len(values))],
        "us_aqi": values,
    }


def air_quality_payload(
    now: datetime = NOW,
    us_aqi: float | None = 42.6,
    hourly: dict | None = None,
) -> dict:
    """Open-Meteo air quality body; defaults to 24h of history and 48h of forecast."""
    if hourly is None:
        start = now - timedelta(hours=24)
        hourly = hourly_block(start, [float(i) for i in range(72)])
    return {
        "latitude": 51.5,
        "longitude": -0.12,
        "current": {
            "time": now.strftime("%Y-%m-%dT%H:%M"),
            "us_aqi": us_aqi,
            "pm2_5": 8.3,
            "pm10": 14.1,
            "ozone": 61.0,
        },
        "hourly": hourly,
    }


def weather_payload(
    temperature: float = 21.4,
    humidity: float = 64.6,
    wind: float = 10.0,
    code: int | None = 3,
) -> dict:
    return {
        "latitude": 51.5,
        "longitude": -0.12,
        "current": {
            "temperature_2m": temperature,
            "relative_humidity_2m": humidity,
            "wind_speed_10m": wind,
            "weather_code": code,
        },
    }


def search_match(address: dict | None = None) -> list[dict]:
    return [
        {
            "lat": "51.5073219",
            "lon": "-0.1276474",
            "display_name": "London, Greater London, England, United Kingdom",
            "address": {"city": "London", "country_code": "gb"} if address is None else address,
        }
    ]


@pytest.fixture
def stub() -> ProviderStub:
    """Provider stub with happy-path responses for every route."""
    provider = ProviderStub()
    provider.respond(SEARCH_PATH, json=search_match())
    provider.respond(
        REVERSE_PATH,
        json={
            "display_name": "Camden, London, England, United Kingdom",
            "address": {"city": "London", "country_code": "gb"},
        },
    )
    provider.respond(WEATHER_PATH, json=weather_payload())
    provider.respond(AIR_QUALITY_PATH, json=air_quality_payload())
    return provider


@pytest_asyncio.fixture
async def http_client(stub: ProviderStub) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client routed to the provider stub."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(stub.handler)) as client:
        yield client


@pytest.fixture
def london() -> Location:
    return Location(
        latitude=51.5073219,
        longitude=-0.1276474,
        city_name="London",
        country_code="GB",
        display_name="London, Greater London, England, United Kingdom",
    )

"""Location service for forward and reverse geocoding."""

import httpx
import structlog

from airaware.config import settings
from airaware.core.exceptions import NotFoundError, ServiceUnavailableError
from airaware.core.http_client import provider_client
from airaware.schemas.location import Location

logger = structlog.get_logger(__name__)

CURRENT_LOCATION = "Current Location"

# Nominatim address keys, most specific first
CITY_KEYS = ("city", "town", "village", "municipality")


def pick_city_name(address: dict, fallback: str) -> str:
    """Return the first populated city-like address component, else the fallback."""
    for key in CITY_KEYS:
        if address.get(key):
            return address[key]
    return fallback


def pick_country_code(address: dict) -> str:
    """Return the upper-cased 2-letter country code, or an empty string."""
    code = address.get("country_code")
    return code.upper() if code else ""


class LocationResolver:
    """Service for turning city names or coordinates into a Location via Nominatim."""

    def __init__(self, client: httpx.AsyncClient | None = None):
        self.client = client

    @property
    def search_url(self) -> str:
        return f"{settings.nominatim_url.rstrip('/')}/search"

    @property
    def reverse_url(self) -> str:
        return f"{settings.nominatim_url.rstrip('/')}/reverse"

    async def resolve_by_name(self, query: str) -> Location:
        """
        Resolve a free-text place name to its best matching location.

        Args:
            query: City or place name as typed by the user

        Returns:
            Location of the top-ranked match

        Raises:
            NotFoundError: If the query is blank or nothing matches
            ServiceUnavailableError: If the geocoding service cannot be reached
        """
        query = (query or "").strip()
        if not query:
            raise NotFoundError()

        async with provider_client(self.client) as client:
            try:
                response = await client.get(
                    self.search_url,
                    params={"q": query, "format": "json", "limit": 1, "addressdetails": 1},
                    headers={"User-Agent": settings.geocoder_user_agent},
                )
                response.raise_for_status()
                matches = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning("geocode_failed", query=query, error=str(e))
                raise ServiceUnavailableError() from e

        if not matches:
            logger.info("geocode_no_match", query=query)
            raise NotFoundError()

        try:
            match = matches[0]
            address = match.get("address") or {}
            city_name = pick_city_name(address, query)
            return Location(
                latitude=float(match["lat"]),
                longitude=float(match["lon"]),
                city_name=city_name,
                country_code=pick_country_code(address),
                display_name=match.get("display_name") or city_name,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("geocode_malformed", query=query, error=str(e))
            raise ServiceUnavailableError() from e

    async def resolve_by_coordinates(self, lat: float, lon: float) -> Location:
        """
        Resolve coordinates to a named location, degrading instead of failing.

        A missing name never blocks the pipeline: any provider failure yields a
        "Current Location" record with the input coordinates.
        """
        degraded = Location(
            latitude=lat,
            longitude=lon,
            city_name=CURRENT_LOCATION,
            country_code="",
            display_name=CURRENT_LOCATION,
        )

        async with provider_client(self.client) as client:
            try:
                response = await client.get(
                    self.reverse_url,
                    params={"lat": lat, "lon": lon, "format": "json", "addressdetails": 1},
                    headers={"User-Agent": settings.geocoder_user_agent},
                )
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning("reverse_geocode_degraded", lat=lat, lon=lon, error=str(e))
                return degraded

        address = payload.get("address") if isinstance(payload, dict) else None
        if not address:
            logger.warning(
                "reverse_geocode_degraded",
                lat=lat,
                lon=lon,
                error=payload.get("error") if isinstance(payload, dict) else "no address",
            )
            return degraded

        try:
            city_name = pick_city_name(address, CURRENT_LOCATION)
            return Location(
                latitude=lat,
                longitude=lon,
                city_name=city_name,
                country_code=pick_country_code(address),
                display_name=payload.get("display_name") or city_name,
            )
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("reverse_geocode_degraded", lat=lat, lon=lon, error=str(e))
            return degraded

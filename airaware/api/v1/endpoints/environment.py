from fastapi import APIRouter, Query, status

from airaware.dependencies import DashboardServiceDep
from airaware.schemas.environment import DashboardReport

router = APIRouter()


@router.get(
    "/search",
    response_model=DashboardReport,
    status_code=status.HTTP_200_OK,
    tags=["Environment"],
    summary="Get AQI, weather and advice by city name",
)
async def search_city_conditions(
    service: DashboardServiceDep,
    city: str = Query(..., min_length=1, max_length=200),
) -> DashboardReport:
    """
    Resolve a city name and report its air quality, weather and health advice.

    Args:
        service: Dashboard pipeline
        city: Free-text city or place name

    Returns:
        Location, conditions with the six point AQI trend, and advisory

    Raises:
        NotFoundError: If the city cannot be found
        ServiceUnavailableError: If the geocoding service is unreachable
        WeatherUnavailableError: If weather data is unavailable
        AirQualityUnavailableError: If air quality data is unavailable
    """
    return await service.report_for_city(city)


@router.get(
    "/conditions",
    response_model=DashboardReport,
    status_code=status.HTTP_200_OK,
    tags=["Environment"],
    summary="Get AQI, weather and advice by coordinates",
)
async def get_environmental_conditions(
    service: DashboardServiceDep,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
) -> DashboardReport:
    """
    Report air quality, weather and health advice for a device location.

    The place name degrades to "Current Location" when it cannot be looked up.
    """
    return await service.report_for_coordinates(lat, lng)

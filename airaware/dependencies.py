"""FastAPI dependencies."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from airaware.services.dashboard_service import DashboardService
from airaware.services.environment_service import ConditionsAggregator
from airaware.services.health_advisor import HealthAdvisor
from airaware.services.location_service import LocationResolver


def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Get the provider HTTP client opened by the application lifespan.

    Args:
        request: Incoming request

    Returns:
        Shared async HTTP client
    """
    return request.app.state.http_client


HttpClient = Annotated[httpx.AsyncClient, Depends(get_http_client)]


def get_location_resolver(client: HttpClient) -> LocationResolver:
    """Build a location resolver bound to the shared client."""
    return LocationResolver(client)


def get_conditions_aggregator(client: HttpClient) -> ConditionsAggregator:
    """Build a conditions aggregator bound to the shared client."""
    return ConditionsAggregator(client)


def get_health_advisor() -> HealthAdvisor:
    """Build a health advisor."""
    return HealthAdvisor()


def get_dashboard_service(
    resolver: Annotated[LocationResolver, Depends(get_location_resolver)],
    aggregator: Annotated[ConditionsAggregator, Depends(get_conditions_aggregator)],
    advisor: Annotated[HealthAdvisor, Depends(get_health_advisor)],
) -> DashboardService:
    """Compose the dashboard pipeline for one request."""
    return DashboardService(resolver, aggregator, advisor)


# Type aliases for dependency injection
DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]

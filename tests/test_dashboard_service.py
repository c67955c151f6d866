"""Tests for the dashboard pipeline and request sequencing."""

import asyncio
from datetime import timedelta

import pytest

from airaware.core.exceptions import NotFoundError, RequestSupersededError
from airaware.schemas.environment import AqiBand
from airaware.services.dashboard_service import DashboardService, LatestRequestGate
from airaware.services.environment_service import ConditionsAggregator
from airaware.services.health_advisor import HealthAdvisor
from airaware.services.location_service import CURRENT_LOCATION, LocationResolver
from tests.conftest import AIR_QUALITY_PATH, NOW, REVERSE_PATH, SEARCH_PATH, WEATHER_PATH


def make_service(client) -> DashboardService:
    return DashboardService(
        LocationResolver(client),
        ConditionsAggregator(client, clock=lambda: NOW + timedelta(minutes=5)),
        HealthAdvisor(),
    )


@pytest.mark.asyncio
async def test_report_for_city(stub, http_client):
    """Test a city name flows through resolution, aggregation and advice."""
    report = await make_service(http_client).report_for_city("London")

    assert report.location.city_name == "London"
    assert report.conditions.city == "London"
    assert report.conditions.aqi == 43
    assert report.conditions.forecast == [20, 21, 22, 23, 24, 25]
    assert report.advisory.band == AqiBand.GOOD
    assert "21°C" in report.advisory.text


@pytest.mark.asyncio
async def test_report_for_city_not_found_skips_providers(stub, http_client):
    """Test an unresolvable city stops before any weather or AQI request."""
    stub.respond(SEARCH_PATH, json=[])

    with pytest.raises(NotFoundError):
        await make_service(http_client).report_for_city("Nowhere")

    assert stub.requests_to(WEATHER_PATH) == []
    assert stub.requests_to(AIR_QUALITY_PATH) == []


@pytest.mark.asyncio
async def test_report_for_coordinates_with_failed_reverse_lookup(stub, http_client):
    """Test coordinates still produce a report when naming fails."""
    stub.fail(REVERSE_PATH)

    report = await make_service(http_client).report_for_coordinates(28.61, 77.21)

    assert report.location.city_name == CURRENT_LOCATION
    assert report.conditions.city == CURRENT_LOCATION
    assert report.conditions.country == ""
    assert len(report.conditions.forecast) == 6


@pytest.mark.asyncio
async def test_gate_superseded_request_never_delivers():
    """Test a newer request cancels the one still in flight."""
    gate = LatestRequestGate()
    release = asyncio.Event()

    async def slow() -> str:
        await release.wait()
        return "stale"

    async def fast() -> str:
        return "fresh"

    first = asyncio.create_task(gate.run(slow()))
    await asyncio.sleep(0)
    assert gate.in_flight

    assert await gate.run(fast()) == "fresh"
    release.set()

    with pytest.raises(RequestSupersededError):
        await first
    assert not gate.in_flight


@pytest.mark.asyncio
async def test_gate_sequential_requests_both_complete():
    """Test requests that finish before the next one starts are unaffected."""
    gate = LatestRequestGate()

    async def value(result: int) -> int:
        await asyncio.sleep(0)
        return result

    assert await gate.run(value(1)) == 1
    assert await gate.run(value(2)) == 2


@pytest.mark.asyncio
async def test_gate_propagates_errors_of_latest_request():
    """Test failures of the winning request are reported unchanged."""
    gate = LatestRequestGate()

    async def missing() -> None:
        raise NotFoundError()

    with pytest.raises(NotFoundError):
        await gate.run(missing())


@pytest.mark.asyncio
async def test_gate_caller_cancellation_is_not_superseded():
    """Test cancelling the caller itself propagates plain cancellation."""
    gate = LatestRequestGate()

    async def forever() -> None:
        await asyncio.Event().wait()

    caller = asyncio.create_task(gate.run(forever()))
    await asyncio.sleep(0)
    caller.cancel()

    with pytest.raises(asyncio.CancelledError):
        await caller
    assert not gate.in_flight


@pytest.mark.asyncio
async def test_gate_with_dashboard_service(stub, http_client):
    """Test the latest city search wins when searches overlap."""
    gate = LatestRequestGate()
    service = make_service(http_client)

    first = asyncio.create_task(gate.run(service.report_for_city("Paris")))
    await asyncio.sleep(0)
    report = await gate.run(service.report_for_city("London"))

    assert report.location.city_name == "London"
    with pytest.raises(RequestSupersededError):
        await first

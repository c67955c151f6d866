"""Dashboard service composing resolution, aggregation and advice."""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import structlog

from airaware.core.exceptions import RequestSupersededError
from airaware.schemas.environment import DashboardReport
from airaware.schemas.location import Location
from airaware.services.environment_service import ConditionsAggregator
from airaware.services.health_advisor import HealthAdvisor
from airaware.services.location_service import LocationResolver

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class LatestRequestGate:
    """
    Sequencer where the most recently issued request wins.

    Starting a request cancels whichever request is still in flight, so a slow
    stale response can never be delivered after a newer one.
    """

    def __init__(self) -> None:
        self._current: asyncio.Task | None = None

    @property
    def in_flight(self) -> bool:
        """Check whether a request is still running."""
        return self._current is not None and not self._current.done()

    async def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """
        Run the coroutine, superseding any earlier one.

        Raises:
            RequestSupersededError: If a newer request started before this one finished
        """
        previous = self._current
        task = asyncio.ensure_future(coro)
        self._current = task

        if previous is not None and not previous.done():
            logger.info("request_superseded")
            previous.cancel()

        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled() and self._current is not task:
                raise RequestSupersededError() from None
            raise
        finally:
            if self._current is task:
                self._current = None


class DashboardService:
    """Service producing a full dashboard report for one location."""

    def __init__(
        self,
        resolver: LocationResolver,
        aggregator: ConditionsAggregator,
        advisor: HealthAdvisor,
    ):
        self.resolver = resolver
        self.aggregator = aggregator
        self.advisor = advisor

    async def report_for_city(self, query: str) -> DashboardReport:
        """Resolve a city name and build its report."""
        location = await self.resolver.resolve_by_name(query)
        return await self._report(location)

    async def report_for_coordinates(self, lat: float, lon: float) -> DashboardReport:
        """Resolve coordinates (never failing on naming) and build their report."""
        location = await self.resolver.resolve_by_coordinates(lat, lon)
        return await self._report(location)

    async def _report(self, location: Location) -> DashboardReport:
        conditions = await self.aggregator.fetch_conditions(location)
        advisory = self.advisor.analyze(conditions)

        logger.info(
            "dashboard_report_built",
            city=location.city_name,
            country=location.country_code,
            aqi=conditions.aqi,
            band=advisory.band.value,
        )
        return DashboardReport(location=location, conditions=conditions, advisory=advisory)

"""Shared HTTP client helpers for upstream providers."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from airaware.config import settings


def create_http_client() -> httpx.AsyncClient:
    """
    Create an HTTP client configured for the upstream providers.

    Returns:
        Async client carrying the identifying User-Agent and the configured timeout
    """
    return httpx.AsyncClient(
        timeout=settings.http_timeout,
        headers={"User-Agent": settings.geocoder_user_agent},
    )


@asynccontextmanager
async def provider_client(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one closed on exit."""
    if client is not None:
        yield client
        return

    async with create_http_client() as owned:
        yield owned

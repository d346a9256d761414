# shopfront/services/health_checker.py

"""Connectivity health check against the remote shop API."""

import asyncio
import logging
import time
from dataclasses import dataclass

from shopfront.gateway.errors import GatewayError
from shopfront.gateway.http_gateway import HttpGateway

logger = logging.getLogger("shopfront.health")


@dataclass
class HealthResult:
    """Outcome of one API health probe."""

    base_url: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_api(gateway: HttpGateway) -> HealthResult:
    """Time a one-product listing call through ``gateway``."""
    slow_ms = gateway.settings.HEALTH_SLOW_MS
    start = time.monotonic()
    try:
        gateway.request("GET", "/products?limit=1&select=id")
    except GatewayError as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            base_url=gateway.base_url,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )
    elapsed_ms = (time.monotonic() - start) * 1000

    if elapsed_ms > slow_ms:
        return HealthResult(
            base_url=gateway.base_url,
            status="slow",
            latency_ms=elapsed_ms,
            message="High latency",
        )
    return HealthResult(
        base_url=gateway.base_url,
        status="ok",
        latency_ms=elapsed_ms,
        message="",
    )


class HealthChecker:
    """Runs the API probe off the event loop."""

    def __init__(self, gateway: HttpGateway) -> None:
        self.gateway = gateway

    async def check(self) -> HealthResult:
        result = await asyncio.to_thread(probe_api, self.gateway)
        logger.info(
            "Health check %s: %s (%.0fms) %s",
            result.base_url,
            result.status,
            result.latency_ms,
            result.message,
        )
        return result

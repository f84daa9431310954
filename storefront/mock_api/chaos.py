"""Chaos controller for the mock product API.

Injects per-route latency and failures so clients can be exercised
against slow, out-of-order, and failing responses.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

import structlog

logger = structlog.get_logger()


class FailureMode(str, Enum):
    """How a route fails when chaos is armed."""

    HTTP_ERROR = "http_error"
    UNSUCCESSFUL = "unsuccessful"


class Route(str, Enum):
    """Routes that accept chaos configuration."""

    LISTING = "listing"
    COUNT = "count"
    FILTERS = "filters"
    CATEGORIES = "categories"


@dataclass
class RouteChaos:
    """Chaos settings for one route."""

    delay_seconds: float = 0.0
    failure: FailureMode | None = None


@dataclass
class ChaosEvent:
    """Log entry for an injected behavior."""

    route: Route
    delay_seconds: float
    failure: FailureMode | None


class ChaosController:
    """Controls injected latency and failures per route.

    Delays can also be queued: ``queue_delays(Route.LISTING, [0.2, 0.0])``
    makes the next two listing requests take 0.2s and 0s, which lets a
    test make an earlier request finish after a later one.
    """

    MAX_EVENT_LOG_SIZE = 100

    def __init__(self) -> None:
        self._routes: dict[Route, RouteChaos] = {}
        self._queued_delays: dict[Route, list[float]] = {}
        self._event_log: list[ChaosEvent] = []

    @property
    def events(self) -> list[ChaosEvent]:
        return list(self._event_log)

    def configure(
        self,
        route: Route,
        delay_seconds: float = 0.0,
        failure: FailureMode | None = None,
    ) -> None:
        """Set the standing chaos for a route."""
        self._routes[route] = RouteChaos(delay_seconds=delay_seconds, failure=failure)
        logger.info(
            "Chaos configured",
            route=route.value,
            delay_seconds=delay_seconds,
            failure=failure.value if failure else None,
        )

    def queue_delays(self, route: Route, delays: list[float]) -> None:
        """Queue one-shot delays for the next requests on a route."""
        self._queued_delays.setdefault(route, []).extend(delays)

    def reset(self) -> None:
        self._routes.clear()
        self._queued_delays.clear()
        self._event_log.clear()

    async def apply(self, route: Route) -> FailureMode | None:
        """Sleep for the configured delay and report any forced failure.

        Args:
            route: Route being served.

        Returns:
            The failure mode to answer with, or None to answer normally.
        """
        chaos = self._routes.get(route, RouteChaos())
        queued = self._queued_delays.get(route)
        delay = queued.pop(0) if queued else chaos.delay_seconds

        if delay or chaos.failure:
            self._event_log.append(
                ChaosEvent(route=route, delay_seconds=delay, failure=chaos.failure)
            )
            if len(self._event_log) > self.MAX_EVENT_LOG_SIZE:
                self._event_log = self._event_log[-self.MAX_EVENT_LOG_SIZE:]

        if delay:
            await asyncio.sleep(delay)
        return chaos.failure


# Global instance (for simplicity in mock)
_chaos_controller: ChaosController | None = None


def get_chaos_controller() -> ChaosController:
    """Get or create chaos controller instance."""
    global _chaos_controller
    if _chaos_controller is None:
        _chaos_controller = ChaosController()
    return _chaos_controller


def reset_chaos_controller() -> None:
    """Reset chaos controller instance (for testing)."""
    global _chaos_controller
    _chaos_controller = None

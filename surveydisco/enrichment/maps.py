"""Google Maps address validation and drive-time calculation.

Both calls are best-effort: missing configuration, network errors and
empty results all come back as ``None`` and are logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from surveydisco.config import MapsConfig

logger = logging.getLogger(__name__)

METERS_TO_MILES = 0.000621371


@dataclass(frozen=True)
class TravelInfo:
    duration: str  # "1 hr 5 min" / "42 min"
    distance: str  # "12.3 mi"


def format_duration(seconds: int) -> str:
    hours, remainder = divmod(int(seconds), 3600)
    minutes = remainder // 60
    if hours > 0:
        return f"{hours} hr {minutes} min"
    return f"{minutes} min"


def format_distance(meters: float) -> str:
    return f"{meters * METERS_TO_MILES:.1f} mi"


def _parse_seconds(value: Any) -> int | None:
    """Routes API durations are strings like ``"1234s"``."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return int(float(value.rstrip("s")))
    except ValueError:
        return None


class MapsClient:
    """Thin async wrapper over the Geocoding and Routes APIs."""

    def __init__(self, config: MapsConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def validate_address(self, address: str) -> str | None:
        """Return Google's formatted address for ``address`` or ``None``."""
        if not self.config.api_key or not address:
            return None

        try:
            response = await self._client.get(
                self.config.geocode_url,
                params={"address": address, "key": self.config.api_key},
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("address_validation_failed: address=%r error=%s", address, e)
            return None

        if not isinstance(data, dict):
            data = {}
        results = data.get("results")
        if data.get("status") == "OK" and results:
            formatted = results[0].get("formatted_address")
            return formatted or None

        logger.info("address_not_geocoded: address=%r status=%s", address, data.get("status"))
        return None

    async def calculate_travel(self, destination: str) -> TravelInfo | None:
        """Traffic-aware drive from the configured origin to ``destination``."""
        if not self.config.api_key or not self.config.origin_address or not destination:
            return None

        body = {
            "origin": {"address": self.config.origin_address},
            "destination": {"address": destination},
            "travelMode": "DRIVE",
            "routingPreference": "TRAFFIC_AWARE",
            "computeAlternativeRoutes": False,
            "routeModifiers": {
                "avoidTolls": False,
                "avoidHighways": False,
                "avoidFerries": False,
            },
            "languageCode": "en-US",
            "units": "IMPERIAL",
        }
        headers = {
            "X-Goog-Api-Key": self.config.api_key,
            "X-Goog-FieldMask": "routes.duration,routes.distanceMeters,routes.staticDuration",
        }

        try:
            response = await self._client.post(self.config.routes_url, json=body, headers=headers)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("travel_calculation_failed: destination=%r error=%s", destination, e)
            return None

        routes = data.get("routes") if isinstance(data, dict) else None
        if not routes:
            logger.info("travel_no_route: destination=%r", destination)
            return None

        route = routes[0]
        seconds = _parse_seconds(route.get("duration")) or _parse_seconds(route.get("staticDuration"))
        meters = route.get("distanceMeters")
        if not seconds or not isinstance(meters, (int, float)) or not meters:
            logger.warning("travel_malformed_route: destination=%r route=%s", destination, route)
            return None

        return TravelInfo(duration=format_duration(seconds), distance=format_distance(meters))

    async def aclose(self) -> None:
        await self._client.aclose()

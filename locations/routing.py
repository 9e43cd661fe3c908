"""Driving routes from an OSRM server. Used for display only."""

from typing import Optional, Sequence

import requests
from django.conf import settings

from .geometry import Coordinate


class RoutingError(Exception):
    """Raised when no route can be computed between the given points."""


class OsrmRouter:
    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        profile: str = "driving",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or getattr(settings, "ROUTER_URL", "https://router.project-osrm.org")).rstrip("/")
        self.profile = profile
        self.timeout = timeout or getattr(settings, "LOCATION_TIMEOUT", 10)
        self.session = session or requests.Session()

    def route(self, points: Sequence[Coordinate]) -> list[Coordinate]:
        """Return the route polyline through ``points`` as coordinates."""

        if len(points) < 2:
            raise RoutingError("A route needs at least two points")
        # OSRM takes lon,lat pairs
        waypoints = ";".join(f"{p.lon},{p.lat}" for p in points)
        try:
            resp = self.session.get(
                f"{self.base_url}/route/v1/{self.profile}/{waypoints}",
                params={"overview": "full", "geometries": "geojson"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise RoutingError(f"Routing failed: {exc}") from exc
        except ValueError as exc:
            raise RoutingError("Routing returned invalid JSON") from exc
        if data.get("code") != "Ok" or not data.get("routes"):
            raise RoutingError(f"No route: {data.get('code')}")
        coordinates = data["routes"][0].get("geometry", {}).get("coordinates") or []
        return [Coordinate(lat, lon) for lon, lat in coordinates]

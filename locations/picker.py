"""Map state for choosing a delivery point and following a delivery.

These objects hold what a map widget shows (markers, lines, bounds) without
depending on any rendering toolkit. The API layer serializes them.
"""

import logging
import threading
from concurrent.futures import Executor
from typing import Callable, Optional

from .geocoding import GeocodingError, NominatimGeocoder
from .geometry import Bounds, Coordinate, fit_bounds
from .routing import OsrmRouter, RoutingError

logger = logging.getLogger("foodhub.locations")

PLACEHOLDER_ADDRESS = "Selected Location"


class LocationPicker:
    """Single delivery marker placed by clicking on the map.

    ``click`` moves the marker at once and reports the address through
    ``on_select`` when the geocoder answers. If a newer click happens before
    an older lookup returns, the older answer is discarded.
    """

    def __init__(
        self,
        geocoder: NominatimGeocoder,
        on_select: Callable[[Coordinate, str], None],
        *,
        executor: Optional[Executor] = None,
    ):
        self.geocoder = geocoder
        self.on_select = on_select
        self.executor = executor
        self.marker: Optional[Coordinate] = None
        self.address: Optional[str] = None
        self._lock = threading.Lock()
        self._generation = 0

    def click(self, lat: float, lon: float):
        coord = Coordinate(float(lat), float(lon)).validate()
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.marker = coord
        if self.executor is not None:
            return self.executor.submit(self._resolve, coord, generation)
        self._resolve(coord, generation)
        return None

    def _resolve(self, coord: Coordinate, generation: int) -> None:
        try:
            address = self.geocoder.resolve(coord.lat, coord.lon)
        except GeocodingError:
            logger.warning(
                "location.reverse_failed",
                extra={"event": "location.reverse_failed", "lat": coord.lat, "lon": coord.lon},
                exc_info=True,
            )
            address = PLACEHOLDER_ADDRESS
        with self._lock:
            if generation != self._generation:
                return
            self.address = address
        self.on_select(coord, address)

    def bounds(self) -> Optional[Bounds]:
        if self.marker is None:
            return None
        return fit_bounds([self.marker])


class CheckoutMap(LocationPicker):
    """Delivery picker with the restaurant shown as a fixed marker."""

    def __init__(
        self,
        geocoder: NominatimGeocoder,
        on_select: Callable[[Coordinate, str], None],
        *,
        restaurant: Coordinate,
        executor: Optional[Executor] = None,
    ):
        super().__init__(geocoder, on_select, executor=executor)
        self.restaurant = restaurant

    @property
    def line(self) -> list[Coordinate]:
        # straight restaurant to delivery segment, not a route
        if self.marker is None:
            return []
        return [self.restaurant, self.marker]

    def bounds(self) -> Bounds:
        points = [self.restaurant]
        if self.marker is not None:
            points.append(self.marker)
        return fit_bounds(points)


class OrderTrackingMap:
    """Restaurant, delivery point and, once known, the rider's position."""

    def __init__(
        self,
        router: OsrmRouter,
        restaurant: Coordinate,
        delivery: Coordinate,
        current: Optional[Coordinate] = None,
    ):
        self.router = router
        self.restaurant = restaurant
        self.delivery = delivery
        self.current = current
        self.route: list[Coordinate] = []
        self.bounds: Bounds = fit_bounds(self._markers())
        self.refresh()

    def _markers(self) -> list[Coordinate]:
        points = [self.restaurant, self.delivery]
        if self.current is not None:
            points.append(self.current)
        return points

    def waypoints(self) -> list[Coordinate]:
        start = self.current if self.current is not None else self.restaurant
        return [start, self.delivery]

    def refresh(self) -> None:
        try:
            self.route = self.router.route(self.waypoints())
        except RoutingError:
            logger.warning("location.route_failed", extra={"event": "location.route_failed"}, exc_info=True)
            self.route = []
        self.bounds = fit_bounds(self._markers() + self.route)

    def set_current_position(self, position: Coordinate) -> None:
        self.current = position
        self.refresh()

    def to_dict(self) -> dict:
        return {
            "restaurant": self.restaurant.as_list(),
            "delivery": self.delivery.as_list(),
            "current": self.current.as_list() if self.current is not None else None,
            "route": [point.as_list() for point in self.route],
            "bounds": self.bounds.as_dict(),
        }

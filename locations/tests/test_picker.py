from unittest.mock import MagicMock

import pytest
from locations.geocoding import GeocodingError
from locations.geometry import Coordinate
from locations.picker import PLACEHOLDER_ADDRESS, CheckoutMap, LocationPicker, OrderTrackingMap
from locations.routing import RoutingError

RESTAURANT = Coordinate(14.5547, 121.0244)
DELIVERY = Coordinate(14.56, 121.03)


class DeferredExecutor:
    """Collects submitted lookups so a test decides when each one finishes."""

    def __init__(self):
        self.calls = []

    def submit(self, fn, *args):
        self.calls.append((fn, args))


def _geocoder(**kwargs):
    geocoder = MagicMock()
    geocoder.resolve.configure_mock(**kwargs)
    return geocoder


def test_click_selects_point_and_address():
    selected = []
    picker = LocationPicker(_geocoder(return_value="Ayala Ave"), lambda c, a: selected.append((c, a)))

    picker.click(14.5547, 121.0244)

    assert picker.marker == RESTAURANT
    assert picker.address == "Ayala Ave"
    assert selected == [(RESTAURANT, "Ayala Ave")]


def test_geocoder_failure_falls_back_to_placeholder():
    selected = []
    picker = LocationPicker(_geocoder(side_effect=GeocodingError("down")), lambda c, a: selected.append(a))

    picker.click(1.0, 2.0)

    assert selected == [PLACEHOLDER_ADDRESS]
    assert picker.marker == Coordinate(1.0, 2.0)


def test_out_of_range_click_is_rejected():
    picker = LocationPicker(_geocoder(return_value="x"), lambda c, a: None)
    with pytest.raises(ValueError):
        picker.click(95.0, 0.0)
    assert picker.marker is None


def test_late_answer_for_older_click_is_discarded():
    selected = []
    executor = DeferredExecutor()
    geocoder = _geocoder(side_effect=lambda lat, lon: f"addr {lat}")
    picker = LocationPicker(geocoder, lambda c, a: selected.append(a), executor=executor)

    picker.click(1.0, 1.0)
    picker.click(2.0, 2.0)
    assert picker.marker == Coordinate(2.0, 2.0)

    second, first = executor.calls[1], executor.calls[0]
    second[0](*second[1])
    first[0](*first[1])

    assert selected == ["addr 2.0"]
    assert picker.address == "addr 2.0"


def test_picker_bounds_follow_marker():
    picker = LocationPicker(_geocoder(return_value="x"), lambda c, a: None)
    assert picker.bounds() is None
    picker.click(10.0, 10.0)
    assert picker.bounds().center == pytest.approx((10.0, 10.0))


def test_checkout_map_draws_straight_line_to_restaurant():
    checkout = CheckoutMap(_geocoder(return_value="x"), lambda c, a: None, restaurant=RESTAURANT)
    assert checkout.line == []
    assert checkout.bounds().south < RESTAURANT.lat

    checkout.click(*DELIVERY)

    assert checkout.line == [RESTAURANT, DELIVERY]
    bounds = checkout.bounds()
    assert bounds.south < RESTAURANT.lat and bounds.north > DELIVERY.lat


def test_tracking_routes_from_restaurant_until_position_known():
    router = MagicMock()
    router.route.return_value = [RESTAURANT, DELIVERY]

    tracking = OrderTrackingMap(router, restaurant=RESTAURANT, delivery=DELIVERY)

    router.route.assert_called_once_with([RESTAURANT, DELIVERY])
    assert tracking.to_dict()["current"] is None
    assert tracking.to_dict()["route"] == [RESTAURANT.as_list(), DELIVERY.as_list()]

    rider = Coordinate(14.557, 121.027)
    tracking.set_current_position(rider)

    assert router.route.call_args.args[0] == [rider, DELIVERY]
    assert tracking.to_dict()["current"] == rider.as_list()


def test_tracking_route_failure_keeps_markers():
    router = MagicMock()
    router.route.side_effect = RoutingError("no route")

    tracking = OrderTrackingMap(router, restaurant=RESTAURANT, delivery=DELIVERY)

    assert tracking.route == []
    assert tracking.bounds.south < RESTAURANT.lat
    assert tracking.bounds.north > DELIVERY.lat

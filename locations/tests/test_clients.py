from unittest.mock import MagicMock

import pytest
import requests
from locations.geocoding import GeocodingError, NominatimGeocoder
from locations.geometry import Coordinate
from locations.routing import OsrmRouter, RoutingError


def _session(payload=None, exc=None):
    session = MagicMock()
    if exc is not None:
        session.get.side_effect = exc
    else:
        session.get.return_value.json.return_value = payload
    return session


def test_geocoder_returns_display_name():
    session = _session({"display_name": "Ayala Avenue, Makati"})
    geocoder = NominatimGeocoder(base_url="http://geo.test/", session=session, timeout=3)

    assert geocoder.resolve(14.5547, 121.0244) == "Ayala Avenue, Makati"
    session.get.assert_called_once_with(
        "http://geo.test/reverse",
        params={"format": "json", "lat": 14.5547, "lon": 121.0244},
        timeout=3,
    )


@pytest.mark.parametrize(
    "session",
    [
        _session(exc=requests.ConnectionError("down")),
        _session({"error": "Unable to geocode"}),
        _session([]),
    ],
)
def test_geocoder_failures_raise(session):
    with pytest.raises(GeocodingError):
        NominatimGeocoder(session=session).resolve(0.0, 0.0)


def test_geocoder_invalid_json():
    session = MagicMock()
    session.get.return_value.json.side_effect = ValueError("bad json")
    with pytest.raises(GeocodingError):
        NominatimGeocoder(session=session).resolve(0.0, 0.0)


def test_router_requests_lon_lat_pairs_and_flips_result():
    session = _session(
        {"code": "Ok", "routes": [{"geometry": {"coordinates": [[121.0244, 14.5547], [121.03, 14.56]]}}]}
    )
    router = OsrmRouter(base_url="http://osrm.test", session=session, timeout=2)

    route = router.route([Coordinate(14.5547, 121.0244), Coordinate(14.56, 121.03)])

    assert route == [Coordinate(14.5547, 121.0244), Coordinate(14.56, 121.03)]
    session.get.assert_called_once_with(
        "http://osrm.test/route/v1/driving/121.0244,14.5547;121.03,14.56",
        params={"overview": "full", "geometries": "geojson"},
        timeout=2,
    )


def test_router_needs_two_points():
    session = _session({})
    with pytest.raises(RoutingError):
        OsrmRouter(session=session).route([Coordinate(0.0, 0.0)])
    session.get.assert_not_called()


@pytest.mark.parametrize(
    "session",
    [
        _session({"code": "NoRoute", "routes": []}),
        _session({"code": "Ok", "routes": []}),
        _session(exc=requests.Timeout("slow")),
    ],
)
def test_router_failures_raise(session):
    with pytest.raises(RoutingError):
        OsrmRouter(session=session).route([Coordinate(0.0, 0.0), Coordinate(1.0, 1.0)])

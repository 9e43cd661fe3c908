from unittest.mock import patch

import pytest
from locations.geocoding import GeocodingError
from locations.geometry import Coordinate
from locations.routing import RoutingError
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


@pytest.fixture
def client():
    return APIClient()


def test_reverse_geocode_returns_address(client):
    with patch("locations.geocoding.NominatimGeocoder.resolve", return_value="Ayala Ave, Makati"):
        resp = client.get("/api/v1/locations/reverse/", {"lat": "14.5547", "lon": "121.0244"})
    assert resp.status_code == 200
    assert resp.json() == {"coordinates": [14.5547, 121.0244], "address": "Ayala Ave, Makati"}


def test_reverse_geocode_failure_still_selects_point(client):
    with patch("locations.geocoding.NominatimGeocoder.resolve", side_effect=GeocodingError("down")):
        resp = client.get("/api/v1/locations/reverse/", {"lat": "1", "lon": "2"})
    assert resp.status_code == 200
    assert resp.json() == {"coordinates": [1.0, 2.0], "address": "Selected Location"}


@pytest.mark.parametrize("params", [{"lat": "91", "lon": "0"}, {"lat": "abc", "lon": "0"}, {"lat": "1"}])
def test_reverse_geocode_rejects_bad_query(client, params):
    resp = client.get("/api/v1/locations/reverse/", params)
    assert resp.status_code == 400


def test_route_between_points(client):
    polyline = [Coordinate(14.5547, 121.0244), Coordinate(14.56, 121.03)]
    with patch("locations.routing.OsrmRouter.route", return_value=polyline):
        resp = client.get("/api/v1/locations/route/", {"start": "14.5547,121.0244", "end": "14.56,121.03"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["route"] == [[14.5547, 121.0244], [14.56, 121.03]]
    assert set(body["bounds"]) == {"south", "west", "north", "east"}


def test_route_failure_returns_empty_route(client):
    with patch("locations.routing.OsrmRouter.route", side_effect=RoutingError("down")):
        resp = client.get("/api/v1/locations/route/", {"start": "1,1", "end": "2,2"})
    assert resp.status_code == 200
    assert resp.json()["route"] == []


def test_route_rejects_malformed_points(client):
    resp = client.get("/api/v1/locations/route/", {"start": "1", "end": "2,2"})
    assert resp.status_code == 400
    assert "start" in resp.json()

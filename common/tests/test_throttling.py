from unittest.mock import patch

import pytest
from rest_framework.test import APIClient


@pytest.fixture
def tight_rates(settings):
    settings.REST_FRAMEWORK = {
        **settings.REST_FRAMEWORK,
        "DEFAULT_THROTTLE_RATES": {"user": "100/min", "anon": "100/min", "catalog": "1/min", "locations": "1/min"},
    }


@pytest.mark.django_db
@pytest.mark.parametrize("url", ["/api/v1/catalog/restaurants/", "/api/v1/locations/route/?start=1,1&end=2,2"])
def test_public_scope_throttling_hits_limit_quickly(tight_rates, url):
    client = APIClient()
    with patch("locations.routing.OsrmRouter.route", return_value=[]):
        assert client.get(url).status_code == 200
        assert client.get(url).status_code == 429

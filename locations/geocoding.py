"""Reverse geocoding through an OpenStreetMap Nominatim server."""

from typing import Optional

import requests
from django.conf import settings

from .geometry import Coordinate


class GeocodingError(Exception):
    """Raised when an address cannot be resolved for a coordinate."""


class NominatimGeocoder:
    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or getattr(settings, "GEOCODER_URL", "https://nominatim.openstreetmap.org")).rstrip(
            "/"
        )
        self.timeout = timeout or getattr(settings, "LOCATION_TIMEOUT", 10)
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent or getattr(settings, "GEOCODER_USER_AGENT", "foodhub/1.0")

    def resolve(self, lat: float, lon: float) -> str:
        """Return a human-readable address for ``(lat, lon)``."""

        coord = Coordinate(float(lat), float(lon))
        try:
            resp = self.session.get(
                f"{self.base_url}/reverse",
                params={"format": "json", "lat": coord.lat, "lon": coord.lon},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise GeocodingError(f"Reverse geocoding failed: {exc}") from exc
        except ValueError as exc:
            raise GeocodingError("Reverse geocoding returned invalid JSON") from exc
        address = data.get("display_name") if isinstance(data, dict) else None
        if not address:
            raise GeocodingError((data or {}).get("error", "No address found") if isinstance(data, dict) else "")
        return str(address)

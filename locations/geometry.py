"""Coordinates and map bounds."""

from typing import Iterable, NamedTuple, Sequence


class Coordinate(NamedTuple):
    lat: float
    lon: float

    @classmethod
    def from_value(cls, value) -> "Coordinate":
        """Build from a ``[lat, lon]`` pair or a ``{"lat", "lon"}`` mapping.

        Raises ValueError when the value is malformed or out of range.
        """
        if isinstance(value, dict):
            lat, lon = value.get("lat"), value.get("lon", value.get("lng"))
        else:
            try:
                lat, lon = value
            except (TypeError, ValueError):
                raise ValueError(f"Invalid coordinate: {value!r}")
        try:
            coord = cls(float(lat), float(lon))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid coordinate: {value!r}")
        coord.validate()
        return coord

    @classmethod
    def parse(cls, text: str) -> "Coordinate":
        """Parse ``"lat,lon"``."""
        return cls.from_value(str(text).split(","))

    def validate(self) -> "Coordinate":
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"Longitude out of range: {self.lon}")
        return self

    def as_list(self) -> list[float]:
        return [self.lat, self.lon]


class Bounds(NamedTuple):
    south: float
    west: float
    north: float
    east: float

    @property
    def center(self) -> Coordinate:
        return Coordinate((self.south + self.north) / 2, (self.west + self.east) / 2)

    def as_dict(self) -> dict:
        return {"south": self.south, "west": self.west, "north": self.north, "east": self.east}


def fit_bounds(points: Iterable[Sequence[float]], padding: float = 0.1) -> Bounds:
    """Smallest box containing ``points``, grown by ``padding`` of its span per side.

    A single point gets a small fixed margin so the view never collapses.
    """

    pts = [Coordinate(*p) for p in points]
    if not pts:
        raise ValueError("Cannot fit bounds to no points")
    south = min(p.lat for p in pts)
    north = max(p.lat for p in pts)
    west = min(p.lon for p in pts)
    east = max(p.lon for p in pts)
    lat_pad = max((north - south) * padding, 0.001)
    lon_pad = max((east - west) * padding, 0.001)
    return Bounds(
        max(south - lat_pad, -90.0),
        max(west - lon_pad, -180.0),
        min(north + lat_pad, 90.0),
        min(east + lon_pad, 180.0),
    )

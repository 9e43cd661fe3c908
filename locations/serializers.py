"""Serializers for location lookups."""

from rest_framework import serializers

from .geometry import Coordinate


class CoordinateQueryField(serializers.CharField):
    """Parse a ``"lat,lon"`` string into a Coordinate."""

    def to_internal_value(self, data):
        text = super().to_internal_value(data)
        try:
            return Coordinate.parse(text)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc))


class ReverseGeocodeQuerySerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lon = serializers.FloatField(min_value=-180, max_value=180)


class RouteQuerySerializer(serializers.Serializer):
    start = CoordinateQueryField()
    end = CoordinateQueryField()

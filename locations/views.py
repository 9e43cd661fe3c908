"""DRF views for map lookups: reverse geocoding and display routes."""

import logging

from common.throttling import SettingsScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .geocoding import NominatimGeocoder
from .geometry import fit_bounds
from .picker import LocationPicker
from .routing import OsrmRouter, RoutingError
from .serializers import ReverseGeocodeQuerySerializer, RouteQuerySerializer

logger = logging.getLogger("foodhub.locations")


class ReverseGeocodeView(APIView):
    """Resolve a clicked map point to an address.

    Geocoder failures are not errors for the caller: the point is still
    selected and the placeholder address is returned.
    """

    permission_classes = [AllowAny]
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "locations"

    @extend_schema(
        tags=["Location Endpoints"],
        summary="Reverse geocode a map point",
        parameters=[
            OpenApiParameter(name="lat", required=True, type=float),
            OpenApiParameter(name="lon", required=True, type=float),
        ],
        responses={
            200: inline_serializer(
                name="ReverseGeocodeResponse",
                fields={
                    "coordinates": rf_serializers.ListField(child=rf_serializers.FloatField()),
                    "address": rf_serializers.CharField(),
                },
            ),
            400: inline_serializer(name="LocationQueryError", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[
            OpenApiExample(
                "Address",
                value={"coordinates": [14.5547, 121.0244], "address": "Makati, Metro Manila, Philippines"},
                response_only=True,
            )
        ],
    )
    def get(self, request):
        query = ReverseGeocodeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        selected = {}

        def on_select(coordinate, address):
            selected["coordinates"] = coordinate.as_list()
            selected["address"] = address

        picker = LocationPicker(NominatimGeocoder(), on_select)
        picker.click(query.validated_data["lat"], query.validated_data["lon"])
        return Response(selected, status=status.HTTP_200_OK)


class RouteView(APIView):
    """Driving route between two points for display on a map."""

    permission_classes = [AllowAny]
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "locations"

    @extend_schema(
        tags=["Location Endpoints"],
        summary="Route between two points",
        parameters=[
            OpenApiParameter(name="start", description="lat,lon", required=True, type=str),
            OpenApiParameter(name="end", description="lat,lon", required=True, type=str),
        ],
        responses={
            200: inline_serializer(
                name="RouteResponse",
                fields={
                    "route": rf_serializers.ListField(child=rf_serializers.ListField()),
                    "bounds": rf_serializers.DictField(),
                },
            ),
            400: inline_serializer(name="LocationQueryError", fields={"detail": rf_serializers.CharField()}),
        },
    )
    def get(self, request):
        query = RouteQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        start, end = query.validated_data["start"], query.validated_data["end"]
        try:
            route = OsrmRouter().route([start, end])
        except RoutingError:
            logger.warning("location.route_failed", extra={"event": "location.route_failed"}, exc_info=True)
            route = []
        bounds = fit_bounds([start, end, *route])
        return Response(
            {"route": [point.as_list() for point in route], "bounds": bounds.as_dict()},
            status=status.HTTP_200_OK,
        )

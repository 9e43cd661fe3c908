"""Read-only views for the restaurant catalog."""

from common.throttling import SettingsScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from . import selectors
from .serializers import RestaurantDetailSerializer, RestaurantListSerializer


class RestaurantListView(APIView):
    """List restaurants, optionally filtered by a name search."""

    permission_classes = [AllowAny]
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "catalog"

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="List restaurants",
        parameters=[
            OpenApiParameter(name="search", description="Case-insensitive name filter", required=False, type=str)
        ],
        examples=[
            OpenApiExample(
                "Restaurants",
                value=[
                    {
                        "slug": "jollibee",
                        "name": "Jollibee",
                        "logo": "/assets/Jollibee/logo.png",
                        "description": "Jollibee is a Filipino multinational chain of fast food restaurants.",
                    }
                ],
                response_only=True,
            )
        ],
    )
    def get(self, request):
        restaurants = selectors.list_restaurants(search=request.query_params.get("search"))
        return Response(RestaurantListSerializer(restaurants, many=True).data, status=status.HTTP_200_OK)


class RestaurantDetailView(APIView):
    """Return a restaurant with its menu; `search` filters menu items by name."""

    permission_classes = [AllowAny]
    throttle_classes = [SettingsScopedRateThrottle]
    throttle_scope = "catalog"

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="Get restaurant by slug",
        parameters=[
            OpenApiParameter(name="search", description="Case-insensitive menu item filter", required=False, type=str)
        ],
        examples=[
            OpenApiExample(
                "Restaurant",
                value={
                    "slug": "jollibee",
                    "name": "Jollibee",
                    "logo": "/assets/Jollibee/logo.png",
                    "description": "Jollibee is a Filipino multinational chain of fast food restaurants.",
                    "location": [14.5547, 121.0244],
                    "menu": [
                        {
                            "id": "jollibee:peach-mango-pie",
                            "name": "Peach Mango Pie",
                            "price": {"amount": "35.00", "currency": "PHP", "display": "₱35.00"},
                            "image": "/assets/Jollibee/item-3-peachmangopie.png",
                        }
                    ],
                },
                response_only=True,
            )
        ],
    )
    def get(self, request, slug: str):
        restaurant = selectors.get_restaurant(slug)
        if restaurant is None:
            return Response({"detail": "Restaurant not found."}, status=status.HTTP_404_NOT_FOUND)
        menu = selectors.filter_menu(restaurant, request.query_params.get("search"))
        data = RestaurantDetailSerializer(restaurant, context={"menu": menu}).data
        return Response(data, status=status.HTTP_200_OK)

"""Location URL routes (v1)."""

from django.urls import path

from .views import ReverseGeocodeView, RouteView

app_name = "locations"

urlpatterns = [
    path("reverse/", ReverseGeocodeView.as_view(), name="reverse"),
    path("route/", RouteView.as_view(), name="route"),
]

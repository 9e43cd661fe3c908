"""URL routes for the catalog app."""

from django.urls import path

from .views import RestaurantDetailView, RestaurantListView

app_name = "catalog"

urlpatterns = [
    path("restaurants/", RestaurantListView.as_view(), name="restaurant-list"),
    path("restaurants/<slug:slug>/", RestaurantDetailView.as_view(), name="restaurant-detail"),
]

"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import OrderDetailView, OrderListStreamView, OrderListView, OrderRouteView, OrderStreamView

app_name = "orders"

urlpatterns = [
    path("", OrderListView.as_view(), name="order-list"),
    path("stream/", OrderListStreamView.as_view(), name="order-list-stream"),
    path("<slug:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<slug:order_id>/route/", OrderRouteView.as_view(), name="order-route"),
    path("<slug:order_id>/stream/", OrderStreamView.as_view(), name="order-stream"),
]

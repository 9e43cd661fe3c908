"""Orders API endpoints.

Orders live in the record store under ``orders/<user id>``. List and detail
are point reads; the ``stream`` endpoints push a full snapshot as a
Server-Sent Event every time the stored value changes.
"""

import json
import logging
import queue

from catalog.selectors import get_restaurant
from django.conf import settings
from django.http import StreamingHttpResponse
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema, inline_serializer
from locations.picker import OrderTrackingMap
from locations.routing import OsrmRouter
from records.store import RecordStoreError, get_record_store
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import BaseRenderer, JSONRenderer
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import UnreadableOrder, get_order, list_orders
from .serializers import OrderSerializer
from .tracking import OrderListWatcher, OrderWatcher

logger = logging.getLogger("foodhub.orders")

EMPTY_ORDERS_MESSAGE = "You haven't placed any orders yet."
ORDER_NOT_FOUND = "Order not found"
STORE_UNAVAILABLE = "Orders are temporarily unavailable."
ORDER_UNREADABLE = "This order could not be read."

ORDER_EXAMPLE = {
    "id": "4f1c2a9e0b7d4e0c9a8b6f5e4d3c2b1a",
    "items": [
        {
            "id": "jollibee:peach-mango-pie",
            "name": "Peach Mango Pie",
            "restaurant_name": "Jollibee",
            "restaurant_slug": "jollibee",
            "image": "/assets/Jollibee/item-3-peachmangopie.png",
            "quantity": 2,
            "unit_price": {"amount": "35.00", "currency": "PHP", "display": "₱35.00"},
            "line_total": {"amount": "70.00", "currency": "PHP", "display": "₱70.00"},
        }
    ],
    "total_price": {"amount": "70.00", "currency": "PHP", "display": "₱70.00"},
    "delivery": {
        "address": "Ayala Ave, Makati",
        "phone_number": "09171234567",
        "instructions": "",
        "coordinates": [14.5547, 121.0244],
    },
    "payment": {"method": "cod", "account_number": "", "card_last4": "", "expiry_date": ""},
    "status": "preparing",
    "status_display": {"color": "amber", "label": "Preparing"},
    "created_at": "2024-05-01T10:00:00Z",
    "estimated_delivery_time": "2024-05-01T10:30:00Z",
    "current_location": None,
}


class EventStreamRenderer(BaseRenderer):
    """Lets clients negotiate ``text/event-stream``; error bodies stay JSON."""

    media_type = "text/event-stream"
    format = "sse"
    charset = "utf-8"

    def render(self, data, accepted_media_type=None, renderer_context=None):
        if data is None:
            return b""
        return json.dumps(data).encode(self.charset)


def _sse(payload) -> str:
    return f"data: {json.dumps(payload)}\n\n"


def _event_stream(open_watcher, snapshot):
    """Yield one SSE message per watcher emission until the client goes away.

    ``open_watcher(on_change)`` must return a watcher; it is closed when the
    generator is closed.
    """

    events: queue.Queue = queue.Queue()
    keepalive = getattr(settings, "ORDER_STREAM_KEEPALIVE_SECONDS", 15)
    watcher = open_watcher(lambda w: events.put(snapshot(w)))
    try:
        while True:
            try:
                payload = events.get(timeout=keepalive)
            except queue.Empty:
                yield ": keep-alive\n\n"
                continue
            yield _sse(payload)
    finally:
        watcher.close()


def _streaming_response(stream) -> StreamingHttpResponse:
    response = StreamingHttpResponse(stream, content_type="text/event-stream")
    response["Cache-Control"] = "no-cache"
    response["X-Accel-Buffering"] = "no"
    return response


def _list_snapshot(watcher: OrderListWatcher) -> dict:
    orders = watcher.orders()
    return {
        "orders": OrderSerializer(orders, many=True).data,
        "message": EMPTY_ORDERS_MESSAGE if not orders else "",
    }


def _order_snapshot(watcher: OrderWatcher) -> dict:
    if watcher.not_found or watcher.order is None:
        return {"order": None, "detail": ORDER_NOT_FOUND}
    return {"order": OrderSerializer(watcher.order).data}


def _read_order(request, order_id: str):
    """Load one of the caller's orders as ``(order, None)`` or ``(None, error response)``."""
    try:
        order = get_order(user_id=request.user.id, order_id=order_id)
    except RecordStoreError:
        logger.exception(
            "order.read_failed",
            extra={"event": "order.read_failed", "user_id": request.user.id, "order_id": order_id},
        )
        return None, Response({"detail": STORE_UNAVAILABLE}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    except UnreadableOrder:
        body = {"detail": ORDER_UNREADABLE, "code": "unreadable_order"}
        return None, Response(body, status=status.HTTP_422_UNPROCESSABLE_ENTITY)
    if order is None:
        return None, Response({"detail": ORDER_NOT_FOUND}, status=status.HTTP_404_NOT_FOUND)
    return order, None


class OrderListView(APIView):
    """List the authenticated user's orders, most recent first."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"

    @extend_schema(
        tags=["Orders"],
        summary="List my orders",
        responses={
            200: inline_serializer(
                name="OrderListResponse",
                fields={
                    "orders": OrderSerializer(many=True),
                    "message": rf_serializers.CharField(),
                },
            ),
            503: inline_serializer(name="OrdersUnavailable", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[OpenApiExample("Empty", value={"orders": [], "message": EMPTY_ORDERS_MESSAGE})],
    )
    def get(self, request):
        try:
            orders = list_orders(user_id=request.user.id)
        except RecordStoreError:
            logger.exception("order.list_failed", extra={"event": "order.list_failed", "user_id": request.user.id})
            return Response({"detail": STORE_UNAVAILABLE}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(
            {
                "orders": OrderSerializer(orders, many=True).data,
                "message": EMPTY_ORDERS_MESSAGE if not orders else "",
            },
            status=status.HTTP_200_OK,
        )


class OrderDetailView(APIView):
    """Retrieve a single order of the authenticated user."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"

    @extend_schema(
        tags=["Orders"],
        summary="Get order detail",
        responses={
            200: OrderSerializer,
            404: OpenApiResponse(description=ORDER_NOT_FOUND),
            422: OpenApiResponse(description=ORDER_UNREADABLE),
            503: OpenApiResponse(description=STORE_UNAVAILABLE),
        },
        examples=[OpenApiExample("Order", value=ORDER_EXAMPLE, response_only=True)],
    )
    def get(self, request, order_id: str):
        order, error = _read_order(request, order_id)
        if error is not None:
            return error
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


class OrderRouteView(APIView):
    """Map data for tracking an order: markers, display route and bounds."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"

    @extend_schema(
        tags=["Orders"],
        summary="Get order tracking map",
        responses={
            200: inline_serializer(
                name="OrderRouteResponse",
                fields={
                    "restaurant": rf_serializers.ListField(child=rf_serializers.FloatField()),
                    "delivery": rf_serializers.ListField(child=rf_serializers.FloatField()),
                    "current": rf_serializers.ListField(child=rf_serializers.FloatField(), allow_null=True),
                    "route": rf_serializers.ListField(child=rf_serializers.ListField()),
                    "bounds": rf_serializers.DictField(),
                },
            ),
            404: OpenApiResponse(description=ORDER_NOT_FOUND),
            422: OpenApiResponse(description=ORDER_UNREADABLE),
        },
    )
    def get(self, request, order_id: str):
        order, error = _read_order(request, order_id)
        if error is not None:
            return error
        restaurant = get_restaurant(order.items[0].restaurant_slug) if order.items else None
        if restaurant is None:
            return Response({"detail": "Restaurant not found."}, status=status.HTTP_404_NOT_FOUND)
        tracking = OrderTrackingMap(
            OsrmRouter(),
            restaurant=restaurant.location,
            delivery=order.delivery.coordinates,
            current=order.current_location,
        )
        return Response(tracking.to_dict(), status=status.HTTP_200_OK)


class OrderListStreamView(APIView):
    """Server-Sent Events with the full order list on every change."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"
    renderer_classes = [JSONRenderer, EventStreamRenderer]

    @extend_schema(
        tags=["Orders"],
        summary="Stream my orders",
        responses={(200, "text/event-stream"): OpenApiResponse(description="SSE stream of order list snapshots")},
    )
    def get(self, request):
        store, user_id = get_record_store(), request.user.id
        stream = _event_stream(lambda on_change: OrderListWatcher(store, user_id, on_change), _list_snapshot)
        return _streaming_response(stream)


class OrderStreamView(APIView):
    """Server-Sent Events with one order's snapshot on every change."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"
    renderer_classes = [JSONRenderer, EventStreamRenderer]

    @extend_schema(
        tags=["Orders"],
        summary="Stream an order",
        responses={(200, "text/event-stream"): OpenApiResponse(description="SSE stream of order snapshots")},
    )
    def get(self, request, order_id: str):
        store, user_id = get_record_store(), request.user.id
        stream = _event_stream(lambda on_change: OrderWatcher(store, user_id, order_id, on_change), _order_snapshot)
        return _streaming_response(stream)

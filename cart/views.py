"""DRF views for cart operations.

The cart is kept client-side in a signed cookie per user. Each view loads it
through a ``CookieSlot`` and writes any change back onto its response.
"""

from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from orders.serializers import CheckoutSerializer, OrderSerializer
from orders.services import (
    CheckoutValidationError,
    OrderSubmissionFailed,
    SubmissionInProgress,
    place_order,
)
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import AddItemSerializer, CartLineReadSerializer, CartReadSerializer, UpdateItemQuantitySerializer
from .services import MenuItemNotFound, add_catalog_item, load_cart
from .slots import CookieSlot

CART_EXAMPLE = {
    "items": [
        {
            "id": "jollibee:chickenjoy-with-coke-float",
            "name": "Chickenjoy with Coke Float",
            "restaurant_name": "Jollibee",
            "restaurant_slug": "jollibee",
            "image": "/assets/Jollibee/item-1-chickenjoy-cokefloat.png",
            "quantity": 2,
            "unit_price": {"amount": "124.00", "currency": "PHP", "display": "₱124.00"},
            "line_total": {"amount": "248.00", "currency": "PHP", "display": "₱248.00"},
        }
    ],
    "total_items": 2,
    "total_price": {"amount": "248.00", "currency": "PHP", "display": "₱248.00"},
}

CartMutationError = inline_serializer(name="CartMutationError", fields={"detail": rf_serializers.CharField()})


class CartViewMixin:
    """Open the requesting user's cart on its cookie slot."""

    permission_classes = [IsAuthenticated]

    def open_cart(self, request):
        slot = CookieSlot(request)
        return slot, load_cart(slot=slot, user=request.user)


class CartDetailView(CartViewMixin, APIView):
    """Return the authenticated user's cart."""

    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the cart lines with derived item count and total price.",
        responses={200: CartReadSerializer},
        examples=[OpenApiExample("Cart", value=CART_EXAMPLE, response_only=True)],
    )
    def get(self, request):
        slot, cart = self.open_cart(request)
        data = CartReadSerializer.from_store(store=cart).data
        return slot.apply(Response(data, status=status.HTTP_200_OK))


class CartAddItemView(CartViewMixin, APIView):
    """Add a menu item to the cart."""

    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description="Adds the catalog item `quantity` times; an item already in the cart is incremented.",
        request=AddItemSerializer,
        responses={201: CartLineReadSerializer, 400: CartMutationError, 404: CartMutationError},
        examples=[
            OpenApiExample("Add", value={"item_id": "jollibee:peach-mango-pie", "quantity": 1}, request_only=True)
        ],
    )
    def post(self, request):
        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slot, cart = self.open_cart(request)
        try:
            line = add_catalog_item(
                store=cart,
                item_id=serializer.validated_data["item_id"],
                quantity=serializer.validated_data["quantity"],
            )
        except MenuItemNotFound:
            return slot.apply(Response({"detail": "Menu item not found."}, status=status.HTTP_404_NOT_FOUND))
        return slot.apply(Response(CartLineReadSerializer(line).data, status=status.HTTP_201_CREATED))


class CartItemUpdateView(CartViewMixin, APIView):
    """Set a cart line's quantity or remove the line."""

    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update cart item quantity",
        description=(
            "Overwrites the quantity of a line. A quantity below 1 removes the line "
            "and is not an error when the line is absent."
        ),
        request=UpdateItemQuantitySerializer,
        responses={200: CartReadSerializer, 400: CartMutationError, 404: CartMutationError},
        examples=[OpenApiExample("Update", value={"quantity": 3}, request_only=True)],
    )
    def patch(self, request, item_id: str):
        serializer = UpdateItemQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slot, cart = self.open_cart(request)
        quantity = serializer.validated_data["quantity"]
        if quantity >= 1 and cart.get(item_id) is None:
            return slot.apply(Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND))
        cart.set_quantity(item_id, quantity)
        return slot.apply(Response(CartReadSerializer.from_store(store=cart).data, status=status.HTTP_200_OK))

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Remove cart item",
        description="Removes a line from the cart. Removing an absent line is not an error.",
        responses={204: None},
    )
    def delete(self, request, item_id: str):
        slot, cart = self.open_cart(request)
        cart.remove_item(item_id)
        return slot.apply(Response(status=status.HTTP_204_NO_CONTENT))


class CartClearView(CartViewMixin, APIView):
    """Empty the cart."""

    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        responses={
            200: inline_serializer(name="CartClearedResponse", fields={"status": rf_serializers.CharField()}),
        },
        examples=[OpenApiExample("Cleared", value={"status": "cleared"}, response_only=True)],
    )
    def post(self, request):
        slot, cart = self.open_cart(request)
        cart.clear()
        return slot.apply(Response({"status": "cleared"}, status=status.HTTP_200_OK))


class CartCheckoutView(CartViewMixin, APIView):
    """Place an order from the cart.

    Validation failures return 400 with the first failing message. A second
    submission while one is still being written returns 409. A record store
    failure returns 503 and leaves the cart as it was.
    """

    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Checkout cart",
        request=CheckoutSerializer,
        responses={
            201: inline_serializer(
                name="CheckoutResponse",
                fields={
                    "order_id": rf_serializers.CharField(),
                    "order": OrderSerializer(),
                    "message": rf_serializers.CharField(),
                    "redirect": inline_serializer(
                        name="CheckoutRedirect",
                        fields={"url": rf_serializers.CharField(), "delay_ms": rf_serializers.IntegerField()},
                    ),
                },
            ),
            400: inline_serializer(
                name="CheckoutError",
                fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField()},
            ),
            409: CartMutationError,
            503: CartMutationError,
        },
        examples=[
            OpenApiExample(
                "GCash checkout",
                value={
                    "delivery": {
                        "address": "Ayala Ave, Makati",
                        "phone_number": "09171234567",
                        "instructions": "Leave at the lobby",
                        "coordinates": [14.5547, 121.0244],
                    },
                    "payment": {"method": "gcash", "account_number": "09171234567"},
                },
                request_only=True,
            ),
            OpenApiExample(
                "Validation error",
                value={"detail": "Please enter your phone number", "code": "phone_required"},
                response_only=True,
                status_codes=["400"],
            ),
        ],
    )
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        delivery, payment = serializer.forms()
        slot, cart = self.open_cart(request)
        try:
            result = place_order(user_id=request.user.id, cart=cart, delivery=delivery, payment=payment)
        except CheckoutValidationError as exc:
            body, code = {"detail": exc.message, "code": exc.code}, status.HTTP_400_BAD_REQUEST
        except SubmissionInProgress as exc:
            body, code = {"detail": exc.message, "code": exc.code}, status.HTTP_409_CONFLICT
        except OrderSubmissionFailed as exc:
            body, code = {"detail": exc.message, "code": exc.code}, status.HTTP_503_SERVICE_UNAVAILABLE
        else:
            body = {
                "order_id": result.order.order_id,
                "order": OrderSerializer(result.order).data,
                "message": result.message,
                "redirect": {"url": result.redirect_url, "delay_ms": int(result.redirect_delay_seconds * 1000)},
            }
            code = status.HTTP_201_CREATED
        return slot.apply(Response(body, status=code))

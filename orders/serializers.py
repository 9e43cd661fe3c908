"""DRF serializers for checkout input and order records.

Checkout fields are accepted blank on purpose: completeness is checked by
``validate_checkout`` so callers get one message for the first missing field.
"""

from catalog.serializers import CoordinateField, MoneyField
from common.choices import PaymentMethod
from locations.geometry import Coordinate
from rest_framework import serializers

from .services import DeliveryForm, PaymentForm
from .tracking import status_display


class CoordinateInputField(serializers.Field):
    """Accept ``[lat, lon]`` or ``{"lat": .., "lon": ..}``."""

    def to_internal_value(self, data):
        try:
            return Coordinate.from_value(data)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc))

    def to_representation(self, value):
        return value.as_list()


class DeliveryInputSerializer(serializers.Serializer):
    address = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)
    phone_number = serializers.CharField(required=False, allow_blank=True, default="", max_length=32)
    instructions = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)
    coordinates = CoordinateInputField(required=False, allow_null=True, default=None)


class PaymentInputSerializer(serializers.Serializer):
    method = serializers.CharField(required=False, default=PaymentMethod.CASH_ON_DELIVERY.value, max_length=16)
    account_number = serializers.CharField(required=False, allow_blank=True, default="", max_length=32)
    card_number = serializers.CharField(required=False, allow_blank=True, default="", max_length=32)
    expiry_date = serializers.CharField(required=False, allow_blank=True, default="", max_length=7)
    cvv = serializers.CharField(required=False, allow_blank=True, default="", max_length=4, write_only=True)


class CheckoutSerializer(serializers.Serializer):
    delivery = DeliveryInputSerializer(required=False)
    payment = PaymentInputSerializer(required=False)

    def forms(self) -> tuple[DeliveryForm, PaymentForm]:
        data = self.validated_data
        delivery = data.get("delivery") or {}
        payment = data.get("payment") or {}
        return DeliveryForm(**delivery), PaymentForm(**payment)


class OrderLineSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    restaurant_name = serializers.CharField()
    restaurant_slug = serializers.CharField()
    image = serializers.CharField()
    quantity = serializers.IntegerField()
    unit_price = MoneyField()
    line_total = MoneyField()


class DeliveryDetailsSerializer(serializers.Serializer):
    address = serializers.CharField()
    phone_number = serializers.CharField()
    instructions = serializers.CharField()
    coordinates = CoordinateField()


class PaymentDetailsSerializer(serializers.Serializer):
    method = serializers.CharField()
    account_number = serializers.CharField()
    card_last4 = serializers.CharField()
    expiry_date = serializers.CharField()


class OrderSerializer(serializers.Serializer):
    """API representation of a stored order with its status badge."""

    id = serializers.CharField(source="order_id")
    items = OrderLineSerializer(many=True)
    total_price = MoneyField()
    delivery = DeliveryDetailsSerializer()
    payment = PaymentDetailsSerializer()
    status = serializers.CharField()
    status_display = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField()
    estimated_delivery_time = serializers.DateTimeField(allow_null=True)
    current_location = serializers.SerializerMethodField()

    def get_status_display(self, obj) -> dict:
        display = status_display(obj.status)
        return {"color": display.color, "label": display.label}

    def get_current_location(self, obj):
        return obj.current_location.as_list() if obj.current_location is not None else None

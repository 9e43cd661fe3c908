"""Cart serializers for read and write operations."""

from catalog.serializers import MoneyField
from rest_framework import serializers


class CartLineReadSerializer(serializers.Serializer):
    """Read serializer for a cart line."""

    id = serializers.CharField()
    name = serializers.CharField()
    restaurant_name = serializers.CharField()
    restaurant_slug = serializers.CharField()
    image = serializers.CharField()
    quantity = serializers.IntegerField()
    unit_price = MoneyField()
    line_total = MoneyField()


class CartReadSerializer(serializers.Serializer):
    """Read serializer for the cart lines and totals."""

    items = CartLineReadSerializer(many=True)
    total_items = serializers.IntegerField()
    total_price = MoneyField()

    @classmethod
    def from_store(cls, *, store):
        return cls(
            {
                "items": list(store.items),
                "total_items": store.total_item_count(),
                "total_price": store.total_price(),
            }
        )


class AddItemSerializer(serializers.Serializer):
    """Write serializer for adding a catalog item to the cart."""

    item_id = serializers.CharField(max_length=200)
    quantity = serializers.IntegerField(min_value=1, max_value=99, default=1)


class UpdateItemQuantitySerializer(serializers.Serializer):
    """Quantity below 1 removes the line."""

    quantity = serializers.IntegerField(max_value=99)

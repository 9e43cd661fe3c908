"""Serializers for the catalog app (read-only)."""

from rest_framework import serializers


class MoneyField(serializers.Field):
    """Render ``Money`` as its display string plus exact decimal amount."""

    def to_representation(self, value):
        return {"amount": str(value.decimal), "currency": value.currency, "display": value.format()}


class CoordinateField(serializers.Field):
    def to_representation(self, value):
        return value.as_list()


class MenuItemSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    price = MoneyField()
    image = serializers.CharField()


class RestaurantListSerializer(serializers.Serializer):
    slug = serializers.CharField()
    name = serializers.CharField()
    logo = serializers.CharField()
    description = serializers.CharField()


class RestaurantDetailSerializer(RestaurantListSerializer):
    location = CoordinateField()
    menu = serializers.SerializerMethodField()

    def get_menu(self, obj) -> list:
        items = self.context.get("menu", obj.menu)
        return MenuItemSerializer(items, many=True).data

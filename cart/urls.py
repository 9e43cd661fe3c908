"""Cart URL routes (v1)."""

from django.urls import path

from .views import CartAddItemView, CartCheckoutView, CartClearView, CartDetailView, CartItemUpdateView

app_name = "cart"

urlpatterns = [
    path("", CartDetailView.as_view(), name="cart-detail"),
    path("items/", CartAddItemView.as_view(), name="cart-add-item"),
    path("items/<str:item_id>/", CartItemUpdateView.as_view(), name="cart-item"),
    path("checkout/", CartCheckoutView.as_view(), name="cart-checkout"),
    path("clear/", CartClearView.as_view(), name="cart-clear"),
]

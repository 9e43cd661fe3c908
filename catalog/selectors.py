"""Selectors for the catalog domain.

Read-only lookups over the static restaurant catalog. They return the frozen
catalog objects directly and never mutate them.
"""

from typing import Optional

from .restaurants import RESTAURANTS, MenuItem, Restaurant


def list_restaurants(search: Optional[str] = None) -> list[Restaurant]:
    """Return restaurants in catalog order, optionally filtered by name."""

    restaurants = list(RESTAURANTS.values())
    query = (search or "").strip().lower()
    if query:
        restaurants = [r for r in restaurants if query in r.name.lower()]
    return restaurants


def get_restaurant(slug: str) -> Optional[Restaurant]:
    """Return a restaurant by slug, or None if not found."""

    return RESTAURANTS.get((slug or "").strip().lower())


def filter_menu(restaurant: Restaurant, query: Optional[str] = None) -> list[MenuItem]:
    query = (query or "").strip().lower()
    if not query:
        return list(restaurant.menu)
    return [item for item in restaurant.menu if query in item.name.lower()]


def get_menu_item(item_id: str) -> Optional[tuple[Restaurant, MenuItem]]:
    """Resolve a menu item id (``<restaurant-slug>:<item-slug>``)."""

    slug, sep, _ = (item_id or "").partition(":")
    if not sep:
        return None
    restaurant = get_restaurant(slug)
    if restaurant is None:
        return None
    for item in restaurant.menu:
        if item.id == item_id:
            return restaurant, item
    return None


from catalog.selectors import filter_menu, get_menu_item, get_restaurant, list_restaurants
from common.money import Money


def test_get_restaurant_by_slug():
    restaurant = get_restaurant("jollibee")
    assert restaurant.name == "Jollibee"
    assert [item.name for item in restaurant.menu] == [
        "Chickenjoy with Coke Float",
        "Yum Burger with drinks",
        "Peach Mango Pie",
    ]
    assert restaurant.menu[0].price == Money(12400, "PHP")


def test_unknown_slug_is_none():
    assert get_restaurant("kfc") is None
    assert get_restaurant("") is None


def test_list_restaurants_search_is_case_insensitive():
    assert [r.slug for r in list_restaurants()] == ["jollibee", "mcdo", "potato-corner", "gong-cha"]
    assert [r.slug for r in list_restaurants(search="GONG")] == ["gong-cha"]
    assert list_restaurants(search="pizza") == []


def test_filter_menu_by_item_name():
    restaurant = get_restaurant("gong-cha")
    assert [item.name for item in filter_menu(restaurant, "milk tea")] == [
        "Milk Tea with pearl",
        "Wintermelon Milk Tea",
        "Brown Sugar Milk Tea",
    ]
    assert [item.name for item in filter_menu(restaurant, "brown")] == ["Brown Sugar Milk Tea"]
    assert len(filter_menu(restaurant, "  ")) == 3


def test_menu_item_ids_are_stable_and_resolvable():
    restaurant, item = get_menu_item("potato-corner:giga-pack")
    assert restaurant.slug == "potato-corner"
    assert item.price == Money(12000, "PHP")
    assert get_menu_item("potato-corner:unknown") is None
    assert get_menu_item("giga-pack") is None

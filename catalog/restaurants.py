"""Static restaurant catalog.

Menus are fixed at deploy time. Prices are parsed into ``Money`` when this
module is imported and never re-parsed afterwards.
"""

from dataclasses import dataclass, field

from common.money import Money
from django.utils.text import slugify
from locations.geometry import Coordinate


@dataclass(frozen=True)
class MenuItem:
    id: str
    name: str
    price: Money
    image: str


@dataclass(frozen=True)
class Restaurant:
    slug: str
    name: str
    logo: str
    description: str
    location: Coordinate
    menu: tuple[MenuItem, ...] = field(default_factory=tuple)


def _restaurant(slug, name, logo, description, location, menu) -> Restaurant:
    items = tuple(
        MenuItem(id=f"{slug}:{slugify(item_name)}", name=item_name, price=Money.parse(price), image=image)
        for item_name, price, image in menu
    )
    return Restaurant(
        slug=slug,
        name=name,
        logo=logo,
        description=description,
        location=Coordinate(*location),
        menu=items,
    )


RESTAURANTS: dict[str, Restaurant] = {
    r.slug: r
    for r in (
        _restaurant(
            "jollibee",
            "Jollibee",
            "/assets/Jollibee/logo.png",
            "Jollibee is a Filipino multinational chain of fast food restaurants.",
            (14.5547, 121.0244),
            [
                ("Chickenjoy with Coke Float", "₱124.00", "/assets/Jollibee/item-1-chickenjoy-cokefloat.png"),
                ("Yum Burger with drinks", "₱99.00", "/assets/Jollibee/item-2-yumburger-cokefloat.png"),
                ("Peach Mango Pie", "₱35.00", "/assets/Jollibee/item-3-peachmangopie.png"),
            ],
        ),
        _restaurant(
            "mcdo",
            "McDonald's",
            "/assets/Mcdo/logo.png",
            "McDonald's is an American multinational fast food chain.",
            (14.5866, 120.9761),
            [
                ("Chicken Mcdo ala carte", "₱89.00", "/assets/Mcdo/item-1-chickenMcdo-alacarte.png"),
                ("Chicken Mcdo with fries and drinks", "₱149.00", "/assets/Mcdo/item-2-Chicken-McDo-Drink-Fries.png"),
                ("Chicken Mcdo with spaghetti", "₱129.00", "/assets/Mcdo/item-3-chicken-spaghetti.png"),
            ],
        ),
        _restaurant(
            "potato-corner",
            "Potato Corner",
            "/assets/PotatoCorner/logo.png",
            "Potato Corner is a Filipino fast food chain specializing in flavored french fries.",
            (14.6091, 121.0223),
            [
                ("Jumbo Fries", "₱45.00", "/assets/PotatoCorner/item-1-jumbo.png"),
                ("Mega Fries", "₱75.00", "/assets/PotatoCorner/item-2-mega.png"),
                ("Giga Pack", "₱120.00", "/assets/PotatoCorner/item-3-giga.png"),
            ],
        ),
        _restaurant(
            "gong-cha",
            "Gong Cha",
            "/assets/GongCha/logo.png",
            "Gong Cha is a Taiwanese bubble tea chain.",
            (14.5995, 120.9842),
            [
                ("Milk Tea with pearl", "₱120.00", "/assets/GongCha/item-1-Milk-Tea-with-Pearl.png"),
                ("Wintermelon Milk Tea", "₱110.00", "/assets/GongCha/item-2-Milk-Tea.png"),
                ("Brown Sugar Milk Tea", "₱130.00", "/assets/GongCha/item-3-brownsugar.png"),
            ],
        ),
    )
}

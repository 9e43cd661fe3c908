import factory
from cart.store import CartCandidate
from common.money import Money


class CartCandidateFactory(factory.Factory):
    class Meta:
        model = CartCandidate

    id = factory.Sequence(lambda n: f"testaurant:item-{n}")
    name = factory.Sequence(lambda n: f"Item {n}")
    restaurant_name = "Testaurant"
    restaurant_slug = "testaurant"
    unit_price = Money(12400, "PHP")
    image = "/assets/test.png"

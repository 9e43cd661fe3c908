import factory
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory


class UserFactory(DjangoModelFactory):
    class Meta:
        model = get_user_model()

    email = factory.Sequence(lambda n: f"diner{n}@example.com")
    username = factory.SelfAttribute("email")
    first_name = "Juan"
    last_name = "Dela Cruz"
    password = factory.django.Password("pass")

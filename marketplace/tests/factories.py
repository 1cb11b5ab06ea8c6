import uuid

import factory
from factory import fuzzy
from django.contrib.auth import get_user_model

from infrastructure.images.memory_adapter import MEMORY_URL_PREFIX
from marketplace.models import Order, Product

User = get_user_model()


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    id = factory.LazyFunction(uuid.uuid4)
    username = factory.Sequence(lambda n: f"user_{n}")
    email = factory.Sequence(lambda n: f"user_{n}@example.com")
    name = factory.Faker("name")
    password = factory.PostGenerationMethodCall("set_password", "defaultpassword")
    is_active = True


class SellerFactory(UserFactory):
    username = factory.Sequence(lambda n: f"seller_{n}")
    email = factory.Sequence(lambda n: f"seller_{n}@example.com")


class ProductFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Product

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.Sequence(lambda n: f"Product {n}")
    description = factory.Faker("paragraph", nb_sentences=3)
    image_urls = factory.LazyFunction(lambda: [f"{MEMORY_URL_PREFIX}{uuid.uuid4().hex}"])
    price = fuzzy.FuzzyDecimal(10, 500)
    year = factory.Faker("random_int", min=1950, max=2020)
    category = factory.Iterator([choice[0] for choice in Product.CATEGORY_CHOICES])
    condition = factory.Iterator([choice[0] for choice in Product.CONDITION_CHOICES])
    is_sold = False

    seller = factory.SubFactory(SellerFactory)


class OrderFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Order

    id = factory.LazyFunction(uuid.uuid4)
    buyer = factory.SubFactory(UserFactory)
    product = factory.SubFactory(ProductFactory)
    status = "pending"

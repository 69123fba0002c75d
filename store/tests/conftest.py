from unittest import mock

import pytest
from django.contrib.auth import get_user_model

from store.models import Order, OrderItem, OrderStatus, Product

UPLOADED_URL = "https://res.cloudinary.com/presento/image/upload/v1/presento/item.jpg"


@pytest.fixture(autouse=True)
def store_settings(settings):
    settings.STORE_NOTIFICATIONS_ASYNC = False
    settings.STORE_FREE_DELIVERY_THRESHOLD = 999
    settings.STORE_DELIVERY_CHARGE = 499
    settings.ORDER_NOTIFY_EMAILS = "orders@presento.test"
    settings.DEFAULT_FROM_EMAIL = "Presento Treasure <no-reply@presento.test>"
    return settings


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user("asha", "asha@example.com", "pw")


@pytest.fixture
def other_user(db):
    return get_user_model().objects.create_user("ravi", "ravi@example.com", "pw")


@pytest.fixture
def staff_user(db):
    return get_user_model().objects.create_user("admin", "admin@presento.test", "pw", is_staff=True)


@pytest.fixture
def make_product(db):
    def _make(**kwargs):
        fields = {"name": "Personalized Name Ring", "price": 300, "stock": 50, "category": "Jewelry"}
        fields.update(kwargs)
        return Product.objects.create(**fields)
    return _make


@pytest.fixture
def product(make_product):
    return make_product()


@pytest.fixture
def make_order(db):
    def _make(user, product, quantity=1, status=OrderStatus.PENDING):
        order = Order.objects.create(user=user, status=status)
        OrderItem.objects.create(order=order, product=product, quantity=quantity, price=product.price)
        return order
    return _make


@pytest.fixture
def cloudinary_upload():
    with mock.patch("cloudinary.uploader.upload") as upload:
        upload.return_value = {"secure_url": UPLOADED_URL}
        yield upload

from unittest import mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command

from store.exceptions import ConflictError, MediaUploadError, NotFoundError, ValidationError
from store.inventory import reserve_stock, restore_stock, set_stock
from store.models import Product
from store.products import create_product, delete_product, list_products, update_product

from .conftest import UPLOADED_URL

pytestmark = pytest.mark.django_db

LAMP = {
    "name": "Anniversary LED Lamp",
    "description": "Customizable LED lamp.",
    "price": "899",
    "stock": "45",
    "category": "Home Decor",
}


def _image():
    return SimpleUploadedFile("lamp.png", b"\x89PNG", content_type="image/png")


def test_create_product_with_image(cloudinary_upload):
    product = create_product(LAMP, image=_image())

    assert product.pk
    assert product.price == 899
    assert product.image_url == UPLOADED_URL
    assert cloudinary_upload.call_args.kwargs["folder"] == "presento_products"


def test_failed_upload_rejects_creation():
    with mock.patch("cloudinary.uploader.upload", side_effect=Exception("quota exceeded")):
        with pytest.raises(MediaUploadError, match="quota exceeded"):
            create_product(LAMP, image=_image())
    assert Product.objects.count() == 0


@pytest.mark.parametrize("field,value", [("price", "0"), ("stock", "-1"), ("name", ""), ("discount", "150")])
def test_invalid_product_fields(field, value):
    with pytest.raises(ValidationError):
        create_product({**LAMP, field: value})


def test_update_keeps_old_image_when_upload_fails(make_product):
    product = make_product(image_url="https://res.cloudinary.com/presento/old.jpg")

    with mock.patch("cloudinary.uploader.upload", side_effect=Exception("timeout")):
        updated = update_product(product.pk, {"name": "Silver Name Ring"}, image=_image())

    assert updated.name == "Silver Name Ring"
    assert updated.image_url == "https://res.cloudinary.com/presento/old.jpg"
    assert updated.price == product.price


def test_list_filters(make_product):
    make_product(name="Ring", category="Jewelry", featured=True)
    make_product(name="Hamper", category="Gift Hampers")

    assert [p.name for p in list_products(category="gift hampers")] == ["Hamper"]
    assert [p.name for p in list_products(featured=True)] == ["Ring"]


def test_delete_product(product):
    delete_product(product.pk)
    assert not Product.objects.exists()
    with pytest.raises(NotFoundError):
        delete_product(product.pk)


def test_delete_product_with_orders_rejected(user, product, make_order):
    make_order(user, product)
    with pytest.raises(ConflictError):
        delete_product(product.pk)
    assert Product.objects.filter(pk=product.pk).exists()


def test_sale_price(make_product):
    assert make_product(price=1000, discount=15).sale_price() == 850
    assert make_product(price=1000).sale_price() == 1000


# -------------------------------
# Inventory ledger
# -------------------------------
def test_reserve_stock_never_goes_negative(make_product):
    product = make_product(stock=3)

    assert reserve_stock(product.pk, 2) is True
    assert reserve_stock(product.pk, 2) is False

    product.refresh_from_db()
    assert product.stock == 1


def test_restore_stock(make_product):
    product = make_product(stock=1)
    restore_stock(product.pk, 4)
    product.refresh_from_db()
    assert product.stock == 5

    with pytest.raises(NotFoundError):
        restore_stock(987654, 1)


@pytest.mark.parametrize("value", [None, "", "-3", "lots"])
def test_set_stock_validation(product, value):
    with pytest.raises(ValidationError):
        set_stock(product.pk, value)


def test_set_stock(product):
    assert set_stock(product.pk, "12").stock == 12
    with pytest.raises(NotFoundError):
        set_stock(555555, 1)


def test_seed_products_is_idempotent():
    call_command("seed_products")
    count = Product.objects.count()
    call_command("seed_products")

    assert count == 5
    assert Product.objects.count() == 5
    assert Product.objects.filter(featured=True).count() == 2

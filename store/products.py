"""Catalogue management."""
import logging

from django.db.models import ProtectedError
from django.forms.models import model_to_dict

from .exceptions import ConflictError, MediaUploadError, NotFoundError, ValidationError
from .forms import ProductForm, first_error
from .media import upload_product_image
from .models import Product

logger = logging.getLogger(__name__)


def list_products(category=None, featured=None):
    products = Product.objects.all().order_by('-created_at')
    if category:
        products = products.filter(category__iexact=category)
    if featured is not None:
        products = products.filter(featured=featured)
    return products


def get_product(product_id):
    try:
        product = Product.objects.filter(pk=int(product_id)).first()
    except (TypeError, ValueError):
        product = None
    if product is None:
        raise NotFoundError("Product not found")
    return product


def create_product(data, image=None):
    """
    Create a product. When an image is supplied it must reach the media host,
    otherwise nothing is saved.
    """
    form = ProductForm(data)
    if not form.is_valid():
        raise ValidationError(first_error(form))

    product = form.save(commit=False)
    if image is not None:
        product.image_url = upload_product_image(image)
    product.save()
    logger.info("Product created: %s (ID: %s)", product.name, product.id)
    return product


def update_product(product_id, data, image=None):
    """
    Apply the supplied fields. A failed image upload keeps the old image and
    still saves the other changes.
    """
    product = get_product(product_id)
    merged = model_to_dict(product, fields=ProductForm.Meta.fields)
    merged.update({k: v for k, v in data.items() if k in ProductForm.Meta.fields})

    form = ProductForm(merged, instance=product)
    if not form.is_valid():
        raise ValidationError(first_error(form))
    product = form.save(commit=False)

    if image is not None:
        try:
            product.image_url = upload_product_image(image)
        except MediaUploadError:
            logger.warning("Keeping previous image for product %s after failed upload", product.id)
    product.save()
    logger.info("Updated product %s: %s", product.id, product.name)
    return product


def delete_product(product_id):
    product = get_product(product_id)
    try:
        product.delete()
    except ProtectedError:
        raise ConflictError(
            f'Product "{product.name}" has orders and cannot be deleted; set its stock to 0 instead'
        )
    logger.info("Product deleted: %s (ID: %s)", product.name, product_id)

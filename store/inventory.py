"""
Stock ledger for products.

All writes go through single-row ``UPDATE`` statements with ``F()``
expressions so concurrent requests never overwrite each other's counts.
"""
import logging

from django.db.models import F

from .exceptions import NotFoundError, ValidationError
from .models import Product

logger = logging.getLogger(__name__)


def reserve_stock(product_id, quantity):
    """
    Take ``quantity`` units off the product, but only if that many are on
    hand. Returns False when the row did not match.
    """
    updated = (
        Product.objects
        .filter(pk=product_id, stock__gte=quantity)
        .update(stock=F('stock') - quantity)
    )
    if updated:
        logger.debug("Reserved %s units of product %s", quantity, product_id)
    return bool(updated)


def restore_stock(product_id, quantity):
    updated = Product.objects.filter(pk=product_id).update(stock=F('stock') + quantity)
    if not updated:
        raise NotFoundError(f"Product {product_id} not found")
    logger.info("Stock restored for product %s: +%s", product_id, quantity)


def set_stock(product_id, stock):
    """Admin override of the on-hand count."""
    if stock is None or stock == "":
        raise ValidationError("Stock amount is required")
    try:
        stock = int(stock)
    except (TypeError, ValueError):
        raise ValidationError("Stock must be a non-negative number")
    if stock < 0:
        raise ValidationError("Stock must be a non-negative number")

    product = Product.objects.filter(pk=product_id).first()
    if not product:
        raise NotFoundError("Product not found")

    product.stock = stock
    product.save(update_fields=['stock', 'updated_at'])
    logger.info("Stock updated for %s - New stock: %s", product.name, stock)
    return product

"""
Order placement and the order status workflow.

Stock moves in the same database transaction as the order change it belongs
to. Emails are queued with ``transaction.on_commit`` so they only go out for
changes that were actually saved.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Prefetch

from .exceptions import ConflictError, InsufficientStockError, NotFoundError, ValidationError
from .inventory import reserve_stock, restore_stock
from .models import Address, Order, OrderItem, OrderStatus, Product
from .notifications import CANCELLATION, ORDER_CONFIRMATION, OUT_FOR_DELIVERY, enqueue

logger = logging.getLogger(__name__)

ITEM_ERROR = "Each item must have productId and quantity > 0"

DELIVERY_FIELDS = [
    ("fullName", "Name"),
    ("phone", "Phone"),
    ("email", "Email"),
    ("address", "Address"),
    ("city", "City"),
    ("state", "State"),
    ("pincode", "Pincode"),
]


def order_queryset():
    return Order.objects.select_related('user').prefetch_related(
        Prefetch('items', queryset=OrderItem.objects.select_related('product').order_by('pk'))
    )


def build_delivery_message(customer_details=None):
    if not customer_details:
        return "Order received and confirmed"
    lines = ["Order received and confirmed.", ""]
    for key, label in DELIVERY_FIELDS:
        value = customer_details.get(key)
        if value:
            lines.append(f"{label}: {value}")
    return "\n".join(lines)


def _positive_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    try:
        value = int(value)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def clean_order_items(items):
    """Normalise ``[{"productId": .., "quantity": ..}]`` into (id, qty) pairs."""
    if not isinstance(items, (list, tuple)) or not items:
        raise ValidationError("items array is required and must not be empty")

    lines = []
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError(ITEM_ERROR)
        product_id = _positive_int(item.get("productId"))
        quantity = _positive_int(item.get("quantity"))
        if product_id is None or quantity is None:
            raise ValidationError(ITEM_ERROR)
        lines.append((product_id, quantity))
    return lines


def create_order(user_id, items, customer_details=None, address_id=None):
    """
    Validate every line against current stock, then create the order with
    price snapshots and take the stock, all or nothing.
    """
    if not user_id:
        raise ValidationError("userId is required")
    user = get_user_model().objects.filter(pk=user_id).first()
    if user is None:
        raise NotFoundError("User not found")

    lines = clean_order_items(items)

    if address_id:
        address_pk = _positive_int(address_id)
        address = Address.objects.filter(pk=address_pk, user=user).first() if address_pk else None
        if address is None:
            raise NotFoundError("Address not found or unauthorized")
        customer_details = address.as_delivery_details()

    with transaction.atomic():
        # Lock in primary-key order so two checkouts cannot deadlock.
        product_ids = sorted({product_id for product_id, _ in lines})
        products = {
            p.pk: p
            for p in Product.objects.select_for_update().filter(pk__in=product_ids).order_by('pk')
        }

        for product_id, quantity in lines:
            product = products.get(product_id)
            if product is None:
                raise NotFoundError(f"Product {product_id} not found")
            if product.stock < quantity:
                raise InsufficientStockError(product, quantity)

        order = Order.objects.create(
            user=user,
            status=OrderStatus.PENDING,
            message=build_delivery_message(customer_details),
        )
        OrderItem.objects.bulk_create([
            OrderItem(order=order, product=products[product_id], quantity=quantity, price=products[product_id].price)
            for product_id, quantity in lines
        ])

        for product_id, quantity in lines:
            if not reserve_stock(product_id, quantity):
                product = products[product_id]
                product.refresh_from_db(fields=['stock'])
                raise InsufficientStockError(product, quantity)

        enqueue(ORDER_CONFIRMATION, order.id)

    logger.info("Order %s created for user %s with %s line(s)", order.id, user.pk, len(lines))
    return order_queryset().get(pk=order.id)


def update_order_status(order_id, status, message=None):
    """
    Move an order to ``status``. Cancelling puts every item's quantity back
    on the shelf before the new status is written; if that fails nothing is
    saved.
    """
    try:
        target = OrderStatus(status)
    except ValueError:
        raise ValidationError("Invalid status")

    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            raise NotFoundError("Order not found")

        current = order.order_status
        if not current.can_transition_to(target):
            raise ConflictError(f"Cannot change order status from {current.value} to {target.value}")
        changed = current != target

        if target == OrderStatus.CANCELLED and changed:
            for item in order.items.select_related('product'):
                restore_stock(item.product_id, item.quantity)
                logger.info(
                    "Stock restored for product %s: +%s (Order #%s cancelled)",
                    item.product.name, item.quantity, order.id,
                )

        order.status = target
        order.message = message or target.default_message
        order.save(update_fields=['status', 'message', 'updated_at'])

        if changed and target == OrderStatus.OUT_FOR_DELIVERY:
            enqueue(OUT_FOR_DELIVERY, order.id)
        elif changed and target == OrderStatus.CANCELLED:
            enqueue(CANCELLATION, order.id, reason=message)

    logger.info("Order %s moved from %s to %s", order.id, current.value, target.value)
    return order_queryset().get(pk=order.id)


def get_order(order_id, user=None):
    """Fetch one order; non-staff users only ever see their own."""
    qs = order_queryset()
    if user is not None and not user.is_staff:
        qs = qs.filter(user=user)
    order = qs.filter(pk=order_id).first()
    if order is None:
        raise NotFoundError("Order not found")
    return order


def orders_for_user(user_id):
    return order_queryset().filter(user_id=user_id).order_by('-updated_at')


def all_orders():
    return order_queryset().order_by('-updated_at')

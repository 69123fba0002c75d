"""Cart and order price totals."""
from dataclasses import dataclass

from django.conf import settings

from .exceptions import ValidationError


@dataclass(frozen=True)
class PriceSummary:
    subtotal: int
    delivery_charge: int
    total: int
    item_count: int
    threshold: int

    def amount_to_free_delivery(self):
        if self.delivery_charge == 0:
            return 0
        return self.threshold - self.subtotal

    def as_dict(self):
        return {
            "subtotal": self.subtotal,
            "deliveryCharge": self.delivery_charge,
            "total": self.total,
            "itemCount": self.item_count,
            "freeDeliveryThreshold": self.threshold,
            "amountToFreeDelivery": self.amount_to_free_delivery(),
        }


def _line_value(line, key):
    if isinstance(line, dict):
        return line[key]
    return getattr(line, key)


def calculate_subtotal(items):
    subtotal = 0
    count = 0
    for line in items:
        price = int(_line_value(line, "price"))
        quantity = int(_line_value(line, "quantity"))
        if price < 0 or quantity < 0:
            raise ValidationError("Price and quantity must not be negative")
        subtotal += price * quantity
        count += quantity
    return subtotal, count


def calculate_totals(items, threshold=None, fee=None):
    """
    Price a selection of lines, each a dict or object exposing ``price`` and
    ``quantity``. Delivery is free once the subtotal reaches the threshold;
    an empty selection costs nothing.
    """
    if threshold is None:
        threshold = settings.STORE_FREE_DELIVERY_THRESHOLD
    if fee is None:
        fee = settings.STORE_DELIVERY_CHARGE

    subtotal, count = calculate_subtotal(items)
    if subtotal == 0 or subtotal >= threshold:
        delivery_charge = 0
    else:
        delivery_charge = fee

    return PriceSummary(
        subtotal=subtotal,
        delivery_charge=delivery_charge,
        total=subtotal + delivery_charge,
        item_count=count,
        threshold=threshold,
    )

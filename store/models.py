from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q


# ------------------------------
# PRODUCT MODEL
# ------------------------------
class Product(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    stock = models.PositiveIntegerField(default=0)
    category = models.CharField(max_length=100, db_index=True)

    discount = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MaxValueValidator(100)],
        help_text="Discount percentage shown on the product card",
    )
    badge = models.CharField(max_length=50, blank=True, default="")
    featured = models.BooleanField(default=False)

    image_url = models.URLField(max_length=500, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(condition=Q(stock__gte=0), name="product_stock_non_negative"),
            models.CheckConstraint(condition=Q(price__gt=0), name="product_price_positive"),
        ]

    def __str__(self):
        return self.name

    @property
    def in_stock(self):
        return self.stock > 0

    def sale_price(self):
        if self.discount:
            return int(round(self.price * (100 - self.discount) / 100))
        return self.price


# ------------------------------
# ORDER MODEL
# ------------------------------
class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PLACED = 'placed', 'Placed'
    READY = 'ready', 'Ready'
    OUT_FOR_DELIVERY = 'out_for_delivery', 'Out for delivery'
    DELIVERED = 'delivered', 'Delivered'
    CANCELLED = 'cancelled', 'Cancelled'

    @property
    def default_message(self):
        return DEFAULT_STATUS_MESSAGES[self.value]

    def can_transition_to(self, target):
        """
        Re-applying the current status is always allowed. Orders only move
        forward along the delivery flow (steps may be skipped). Delivered and
        cancelled are terminal, so a delivered order can never be cancelled.
        """
        target = OrderStatus(target)
        if target == self:
            return True
        if self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
            return False
        if target == OrderStatus.CANCELLED:
            return True
        return FLOW.index(target) > FLOW.index(self)


FLOW = [
    OrderStatus.PENDING,
    OrderStatus.PLACED,
    OrderStatus.READY,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]


DEFAULT_STATUS_MESSAGES = {
    OrderStatus.PENDING.value: "Your order has been received.",
    OrderStatus.PLACED.value: "Your order has been confirmed and is being prepared.",
    OrderStatus.READY.value: "Your order is ready for pickup/shipment!",
    OrderStatus.OUT_FOR_DELIVERY.value: "Your order is out for delivery. It will arrive soon!",
    OrderStatus.DELIVERED.value: "Your order has been delivered. Thank you for shopping!",
    OrderStatus.CANCELLED.value: "Your order has been cancelled.",
}


class Order(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='orders')

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    message = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-updated_at']

    def __str__(self):
        return f"Order #{self.id or 'unsaved'} - {self.user.get_username()}"

    @property
    def order_status(self):
        return OrderStatus(self.status)

    def get_total_price(self):
        return sum(item.price * item.quantity for item in self.items.all())

    def total_items(self):
        return sum(item.quantity for item in self.items.all())


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='order_items')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    # Unit price captured when the order was placed.
    price = models.PositiveIntegerField()

    class Meta:
        constraints = [
            models.CheckConstraint(condition=Q(quantity__gt=0), name="order_item_quantity_positive"),
        ]

    def __str__(self):
        return f"{self.product.name} × {self.quantity}"

    def line_total(self):
        return self.price * self.quantity


# ------------------------------
# ADDRESS MODEL
# ------------------------------
class Address(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='addresses')
    full_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20)
    email = models.EmailField()
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=12)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = "addresses"

    def __str__(self):
        return f"{self.full_name}, {self.city}"

    def as_delivery_details(self):
        """Plain copy used for the order's delivery message."""
        return {
            "fullName": self.full_name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
        }


# ------------------------------
# REVIEW MODEL
# ------------------------------
class Review(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='reviews')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(null=True, blank=True)
    media_urls = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'product'], name="one_review_per_user_product"),
            models.CheckConstraint(condition=Q(rating__gte=1) & Q(rating__lte=5), name="review_rating_range"),
        ]

    def __str__(self):
        return f"{self.product.name} - {self.rating}★ by {self.user.get_username()}"

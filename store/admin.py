import logging

from django.contrib import admin, messages
from django.utils.html import format_html

from .exceptions import StoreError
from .models import Address, Order, OrderItem, OrderStatus, Product, Review
from .orders import update_order_status

logger = logging.getLogger(__name__)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category', 'price', 'stock', 'discount', 'badge', 'featured', 'preview_image')
    list_filter = ('category', 'featured')
    search_fields = ('name', 'category')
    list_editable = ('stock', 'featured')

    def preview_image(self, obj):
        if obj.image_url:
            return format_html('<img src="{}" width="80" style="border-radius:8px;" />', obj.image_url)
        return "No Image"
    preview_image.short_description = "Image"


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ('product', 'quantity', 'price')
    can_delete = False


def _status_action(status):
    def action(modeladmin, request, queryset):
        changed = 0
        for order in queryset:
            try:
                update_order_status(order.pk, status)
                changed += 1
            except StoreError as e:
                modeladmin.message_user(request, f"Order #{order.pk}: {e.message}", level=messages.ERROR)
        if changed:
            modeladmin.message_user(request, f"{changed} order(s) marked as {OrderStatus(status).label}.")
    action.__name__ = f"mark_as_{status}"
    action.short_description = f"Mark as {OrderStatus(status).label}"
    return action


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'status', 'created_at', 'updated_at')
    list_filter = ('status', 'created_at')
    search_fields = ('user__username', 'user__email', 'id')
    # Status changes go through the actions so stock and emails follow.
    readonly_fields = ('user', 'status', 'created_at', 'updated_at')
    inlines = [OrderItemInline]

    actions = [_status_action(status) for status in OrderStatus.values]


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'user', 'city', 'state', 'pincode', 'created_at')
    search_fields = ('full_name', 'email', 'phone', 'city')


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('product', 'user', 'rating', 'created_at')
    list_filter = ('rating',)
    search_fields = ('product__name', 'user__username', 'comment')

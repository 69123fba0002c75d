from django.urls import path
from . import views

urlpatterns = [
    path('products/', views.product_list, name='product_list'),
    path('products/<int:pk>/', views.product_detail, name='product_detail'),
    path('products/<int:pk>/edit/', views.product_edit, name='product_edit'),
    path('products/<int:pk>/stock/', views.product_stock, name='product_stock'),
    path('cart/', views.cart_view, name='cart'),
    path('cart/items/', views.add_to_cart, name='add_to_cart'),
    path('cart/items/<int:product_id>/', views.cart_item, name='cart_item'),
    path('cart/items/<int:product_id>/toggle/', views.toggle_cart_item, name='toggle_cart_item'),
    path('cart/selected/', views.remove_selected, name='remove_selected'),
    path('cart/checkout/', views.checkout, name='checkout'),
    path('orders/', views.order_list, name='order_list'),
    path('orders/user/<int:user_id>/', views.user_orders, name='user_orders'),
    path('orders/<int:pk>/', views.order_detail, name='order_detail'),
    path('reviews/', views.review_list, name='review_list'),
    path('reviews/<int:pk>/', views.review_detail, name='review_detail'),
    path('reviews/can-review/<int:product_id>/', views.can_review, name='can_review'),
    path('reviews/product/<int:product_id>/', views.product_reviews, name='product_reviews'),
    path('addresses/', views.address_list, name='address_list'),
    path('addresses/<int:pk>/', views.address_detail, name='address_detail'),
]

from django.http import JsonResponse

from . import addresses, inventory, orders, products, reviews
from .cart import Cart
from .exceptions import NotFoundError, ValidationError
from .serializers import (
    serialize_address,
    serialize_order,
    serialize_product,
    serialize_review,
)
from .store_utils import (
    api_view,
    login_required_json,
    request_data,
    staff_required_json,
)


def _flag(value):
    if value is None or value == '':
        return None
    return str(value).lower() in ('1', 'true', 'yes')


# -------------------------------
# PRODUCTS
# -------------------------------
@api_view(['GET', 'POST'])
def product_list(request):
    if request.method == 'POST':
        return _create_product(request)
    items = products.list_products(
        category=request.GET.get('category'),
        featured=_flag(request.GET.get('featured')),
    )
    return JsonResponse([serialize_product(p) for p in items], safe=False)


@staff_required_json
def _create_product(request):
    product = products.create_product(request_data(request), image=request.FILES.get('image'))
    return JsonResponse(serialize_product(product), status=201)


@api_view(['GET', 'DELETE'])
def product_detail(request, pk):
    if request.method == 'DELETE':
        return _delete_product(request, pk)
    return JsonResponse(serialize_product(products.get_product(pk)))


@staff_required_json
def _delete_product(request, pk):
    products.delete_product(pk)
    return JsonResponse({'success': True, 'message': 'Product deleted successfully', 'deletedProductId': pk})


@api_view(['POST'])
@staff_required_json
def product_edit(request, pk):
    product = products.update_product(pk, request_data(request), image=request.FILES.get('image'))
    return JsonResponse(serialize_product(product))


@api_view(['PUT'])
@staff_required_json
def product_stock(request, pk):
    data = request_data(request)
    product = inventory.set_stock(pk, data.get('stock'))
    return JsonResponse({
        'success': True,
        'message': 'Stock updated successfully',
        'product': serialize_product(product),
    })


# -------------------------------
# CART SYSTEM
# -------------------------------
@api_view(['GET', 'DELETE'])
def cart_view(request):
    cart = Cart(request.session)
    if request.method == 'DELETE':
        cart.clear()
    return JsonResponse(cart.as_dict())


@api_view(['POST'])
def add_to_cart(request):
    data = request_data(request)
    product = products.get_product(data.get('productId'))
    try:
        quantity = int(data.get('quantity', 1))
    except (TypeError, ValueError):
        raise ValidationError("Quantity must be a whole number")
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")

    cart = Cart(request.session)
    cart.add(product, quantity)
    return JsonResponse({**cart.as_dict(), 'toast': f"{product.name} added to cart"})


@api_view(['PATCH', 'DELETE'])
def cart_item(request, product_id):
    cart = Cart(request.session)
    if product_id not in cart:
        raise NotFoundError("Item not in cart")

    if request.method == 'DELETE':
        cart.remove(product_id)
    else:
        data = request_data(request)
        try:
            cart.update_quantity(product_id, int(data.get('quantity')))
        except (TypeError, ValueError):
            raise ValidationError("Quantity must be a whole number")
    return JsonResponse(cart.as_dict())


@api_view(['POST'])
def toggle_cart_item(request, product_id):
    cart = Cart(request.session)
    if cart.toggle_selected(product_id) is None:
        raise NotFoundError("Item not in cart")
    return JsonResponse(cart.as_dict())


@api_view(['DELETE'])
def remove_selected(request):
    cart = Cart(request.session)
    cart.remove_selected()
    return JsonResponse(cart.as_dict())


@api_view(['POST'])
@login_required_json
def checkout(request):
    cart = Cart(request.session)
    items = cart.order_items()
    if not items:
        raise ValidationError("Your cart is empty.")

    data = request_data(request)
    order = orders.create_order(
        request.user.pk,
        items,
        customer_details=data.get('customerDetails'),
        address_id=data.get('addressId'),
    )
    # Only the lines that were ordered leave the cart.
    cart.remove_selected()
    return JsonResponse(serialize_order(order), status=201)


# -------------------------------
# ORDERS
# -------------------------------
@api_view(['GET', 'POST'])
@login_required_json
def order_list(request):
    if request.method == 'POST':
        data = request_data(request)
        user_id = data.get('userId') if request.user.is_staff else request.user.pk
        order = orders.create_order(
            user_id,
            data.get('items'),
            customer_details=data.get('customerDetails'),
            address_id=data.get('addressId'),
        )
        return JsonResponse(serialize_order(order), status=201)

    if request.user.is_staff:
        qs = orders.all_orders()
    else:
        qs = orders.orders_for_user(request.user.pk)
    return JsonResponse([serialize_order(o) for o in qs], safe=False)


@api_view(['GET'])
@login_required_json
def user_orders(request, user_id):
    if not request.user.is_staff and request.user.pk != user_id:
        raise NotFoundError("Orders not found or unauthorized")
    qs = orders.orders_for_user(user_id)
    return JsonResponse([serialize_order(o, include_user=False) for o in qs], safe=False)


@api_view(['GET', 'PUT'])
@login_required_json
def order_detail(request, pk):
    if request.method == 'PUT':
        return _update_order_status(request, pk)
    return JsonResponse(serialize_order(orders.get_order(pk, user=request.user)))


@staff_required_json
def _update_order_status(request, pk):
    data = request_data(request)
    order = orders.update_order_status(pk, data.get('status'), message=data.get('message'))
    return JsonResponse(serialize_order(order))


# -------------------------------
# REVIEWS
# -------------------------------
@api_view(['GET'])
@login_required_json
def can_review(request, product_id):
    return JsonResponse(reviews.review_eligibility(request.user.pk, product_id))


@api_view(['GET'])
def product_reviews(request, product_id):
    result = reviews.product_reviews(product_id)
    result['reviews'] = [serialize_review(r) for r in result['reviews']]
    return JsonResponse(result)


@api_view(['GET', 'POST'])
@login_required_json
def review_list(request):
    if request.method == 'GET':
        qs = reviews.user_reviews(request.user)
        return JsonResponse([serialize_review(r, with_user=False, with_product=True) for r in qs], safe=False)

    data = request_data(request)
    review = reviews.create_review(
        request.user,
        data.get('productId'),
        data.get('rating'),
        comment=data.get('comment'),
        media=request.FILES.getlist('media'),
    )
    return JsonResponse(serialize_review(review), status=201)


@api_view(['PUT', 'POST', 'DELETE'])
@login_required_json
def review_detail(request, pk):
    if request.method == 'DELETE':
        reviews.delete_review(request.user, pk)
        return JsonResponse({'message': 'Review deleted successfully'})

    data = request_data(request)
    review = reviews.update_review(
        request.user,
        pk,
        rating=data.get('rating'),
        comment=data['comment'] if 'comment' in data else reviews.UNSET,
        media=request.FILES.getlist('media'),
    )
    return JsonResponse(serialize_review(review))


# -------------------------------
# ADDRESSES
# -------------------------------
@api_view(['GET', 'POST'])
@login_required_json
def address_list(request):
    if request.method == 'POST':
        address = addresses.create_address(request.user, request_data(request))
        return JsonResponse(serialize_address(address), status=201)
    qs = addresses.list_addresses(request.user)
    return JsonResponse([serialize_address(a) for a in qs], safe=False)


@api_view(['PUT', 'DELETE'])
@login_required_json
def address_detail(request, pk):
    if request.method == 'DELETE':
        addresses.delete_address(request.user, pk)
        return JsonResponse({'message': 'Address deleted successfully'})
    address = addresses.update_address(request.user, pk, request_data(request))
    return JsonResponse(serialize_address(address))

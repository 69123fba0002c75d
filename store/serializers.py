"""Plain-dict projections of models for JSON responses."""


def serialize_user(user):
    if user is None:
        return None
    return {
        'id': user.pk,
        'name': user.get_full_name() or user.get_username(),
        'email': user.email,
    }


def serialize_product(product):
    return {
        'id': product.pk,
        'name': product.name,
        'description': product.description,
        'price': product.price,
        'salePrice': product.sale_price(),
        'stock': product.stock,
        'inStock': product.in_stock,
        'category': product.category,
        'discount': product.discount,
        'badge': product.badge or None,
        'featured': product.featured,
        'imageUrl': product.image_url or None,
        'createdAt': product.created_at.isoformat() if product.created_at else None,
    }


def serialize_order_item(item):
    product = item.product
    return {
        'id': item.pk,
        'productId': item.product_id,
        'quantity': item.quantity,
        'price': item.price,
        'product': {
            'id': product.pk,
            'name': product.name,
            'price': product.price,
            'imageUrl': product.image_url or None,
        },
    }


def serialize_order(order, include_user=True):
    data = {
        'id': order.pk,
        'userId': order.user_id,
        'status': order.status,
        'message': order.message,
        'createdAt': order.created_at.isoformat(),
        'updatedAt': order.updated_at.isoformat(),
        'items': [serialize_order_item(item) for item in order.items.all()],
        'total': order.get_total_price(),
    }
    if include_user:
        data['user'] = serialize_user(order.user)
    return data


def serialize_address(address):
    return {
        'id': address.pk,
        'fullName': address.full_name,
        'phone': address.phone,
        'email': address.email,
        'address': address.address,
        'city': address.city,
        'state': address.state,
        'pincode': address.pincode,
        'createdAt': address.created_at.isoformat(),
    }


def serialize_review(review, with_user=True, with_product=False):
    data = {
        'id': review.pk,
        'userId': review.user_id,
        'productId': review.product_id,
        'rating': review.rating,
        'comment': review.comment,
        'mediaUrls': list(review.media_urls or []),
        'createdAt': review.created_at.isoformat(),
        'updatedAt': review.updated_at.isoformat(),
    }
    if with_user:
        data['user'] = {'id': review.user_id, 'name': review.user.get_full_name() or review.user.get_username()}
    if with_product:
        data['product'] = {
            'id': review.product_id,
            'name': review.product.name,
            'imageUrl': review.product.image_url or None,
        }
    return data

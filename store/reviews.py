"""Product reviews, open only to customers who received the product."""
import logging

from django.db import IntegrityError, transaction
from django.db.models import Avg

from .exceptions import ConflictError, IneligibleReviewError, NotFoundError, ValidationError
from .media import upload_review_media
from .models import Order, OrderStatus, Product, Review

logger = logging.getLogger(__name__)

RATING_ERROR = "Rating must be between 1 and 5"
ALREADY_REVIEWED = "You have already reviewed this product"
NOT_FOUND = "Review not found or unauthorized"

# Marks an argument the caller did not send, as opposed to an explicit None.
UNSET = object()


def clean_rating(rating):
    if isinstance(rating, bool):
        raise ValidationError(RATING_ERROR)
    if isinstance(rating, float):
        if not rating.is_integer():
            raise ValidationError(RATING_ERROR)
        rating = int(rating)
    try:
        rating = int(rating)
    except (TypeError, ValueError):
        raise ValidationError(RATING_ERROR)
    if rating < 1 or rating > 5:
        raise ValidationError(RATING_ERROR)
    return rating


def can_review(user_id, product_id):
    return Order.objects.filter(
        user_id=user_id,
        status=OrderStatus.DELIVERED,
        items__product_id=product_id,
    ).exists()


def has_reviewed(user_id, product_id):
    return Review.objects.filter(user_id=user_id, product_id=product_id).exists()


def review_eligibility(user_id, product_id):
    existing = Review.objects.filter(user_id=user_id, product_id=product_id).only('id').first()
    return {
        "canReview": can_review(user_id, product_id),
        "hasReviewed": existing is not None,
        "reviewId": existing.id if existing else None,
    }


def create_review(user, product_id, rating, comment=None, media=()):
    rating = clean_rating(rating)
    try:
        product_id = int(product_id)
    except (TypeError, ValueError):
        raise ValidationError("productId is required")

    if not Product.objects.filter(pk=product_id).exists():
        raise NotFoundError("Product not found")
    if not can_review(user.pk, product_id):
        raise IneligibleReviewError("You can only review products from delivered orders")
    if has_reviewed(user.pk, product_id):
        raise ConflictError(ALREADY_REVIEWED)

    media_urls = upload_review_media(list(media)) if media else []

    try:
        with transaction.atomic():
            review = Review.objects.create(
                user=user,
                product_id=product_id,
                rating=rating,
                comment=comment or None,
                media_urls=media_urls,
            )
    except IntegrityError:
        # Lost a race with a concurrent submission for the same pair.
        raise ConflictError(ALREADY_REVIEWED)

    logger.info("Review %s created by user %s for product %s", review.id, user.pk, product_id)
    return review


def _owned_review(user, review_id):
    review = Review.objects.select_related('user', 'product').filter(pk=review_id).first()
    if review is None or review.user_id != user.pk:
        raise NotFoundError(NOT_FOUND)
    return review


def update_review(user, review_id, rating=None, comment=UNSET, media=()):
    if rating in (None, ""):
        rating = None
    else:
        rating = clean_rating(rating)

    review = _owned_review(user, review_id)
    if media:
        review.media_urls = list(review.media_urls) + upload_review_media(list(media))
    if rating is not None:
        review.rating = rating
    if comment is not UNSET:
        review.comment = comment or None
    review.save()
    return review


def delete_review(user, review_id):
    review = _owned_review(user, review_id)
    review.delete()
    logger.info("Review %s deleted by user %s", review_id, user.pk)


def product_reviews(product_id):
    reviews = Review.objects.filter(product_id=product_id).select_related('user').order_by('-created_at')
    average = reviews.aggregate(avg=Avg('rating'))['avg'] or 0
    return {
        "reviews": list(reviews),
        "averageRating": round(float(average), 2),
        "totalReviews": len(reviews),
    }


def user_reviews(user):
    return Review.objects.filter(user=user).select_related('product').order_by('-created_at')

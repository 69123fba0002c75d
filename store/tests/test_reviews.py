from unittest import mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from store.exceptions import (
    ConflictError,
    IneligibleReviewError,
    MediaUploadError,
    NotFoundError,
    ValidationError,
)
from store.models import OrderStatus, Review
from store.reviews import (
    can_review,
    create_review,
    delete_review,
    has_reviewed,
    product_reviews,
    review_eligibility,
    update_review,
)

from .conftest import UPLOADED_URL

pytestmark = pytest.mark.django_db


@pytest.fixture
def delivered(user, product, make_order):
    return make_order(user, product, status=OrderStatus.DELIVERED)


def test_rating_out_of_range_rejected_before_persistence(user, product, delivered):
    with pytest.raises(ValidationError, match="Rating must be between 1 and 5"):
        create_review(user, product.pk, 6)
    assert Review.objects.count() == 0


@pytest.mark.parametrize("rating", [0, -1, 6, 4.5, "five", None, True])
def test_invalid_ratings(user, product, delivered, rating):
    with pytest.raises(ValidationError):
        create_review(user, product.pk, rating)


def test_rating_checked_before_eligibility(user, product):
    # No delivered order either, but the rating problem is reported first.
    with pytest.raises(ValidationError):
        create_review(user, product.pk, 9)


def test_review_requires_delivered_order(user, product, make_order):
    make_order(user, product, status=OrderStatus.OUT_FOR_DELIVERY)

    assert can_review(user.pk, product.pk) is False
    with pytest.raises(IneligibleReviewError):
        create_review(user, product.pk, 5)
    assert Review.objects.count() == 0


def test_delivered_order_for_another_product_does_not_count(user, make_product, make_order):
    bought = make_product(name="Ring")
    other = make_product(name="Lamp")
    make_order(user, bought, status=OrderStatus.DELIVERED)

    assert can_review(user.pk, other.pk) is False


def test_create_review(user, product, delivered):
    assert can_review(user.pk, product.pk) is True
    assert has_reviewed(user.pk, product.pk) is False

    review = create_review(user, product.pk, "4", comment="Lovely packaging")

    assert review.rating == 4
    assert review.comment == "Lovely packaging"
    assert has_reviewed(user.pk, product.pk) is True
    assert review_eligibility(user.pk, product.pk) == {
        "canReview": True,
        "hasReviewed": True,
        "reviewId": review.pk,
    }


def test_second_review_rejected_first_unchanged(user, product, delivered):
    first = create_review(user, product.pk, 5, comment="Perfect")

    with pytest.raises(ConflictError, match="already reviewed"):
        create_review(user, product.pk, 1, comment="Changed my mind")

    first.refresh_from_db()
    assert Review.objects.count() == 1
    assert (first.rating, first.comment) == (5, "Perfect")


def test_unique_constraint_race_reported_as_already_reviewed(user, product, delivered):
    create_review(user, product.pk, 5)

    with mock.patch("store.reviews.has_reviewed", return_value=False):
        with pytest.raises(ConflictError, match="already reviewed"):
            create_review(user, product.pk, 3)

    assert Review.objects.count() == 1


def test_missing_product(user):
    with pytest.raises(NotFoundError):
        create_review(user, 123456, 5)


def test_media_is_uploaded_with_review(user, product, delivered, cloudinary_upload):
    photo = SimpleUploadedFile("unboxing.jpg", b"\xff\xd8\xff", content_type="image/jpeg")
    clip = SimpleUploadedFile("unboxing.mp4", b"\x00\x00", content_type="video/mp4")

    review = create_review(user, product.pk, 5, media=[photo, clip])

    assert review.media_urls == [UPLOADED_URL, UPLOADED_URL]
    assert cloudinary_upload.call_count == 2
    assert cloudinary_upload.call_args.kwargs["folder"] == "presento_reviews"


def test_unsupported_media_rejected(user, product, delivered, cloudinary_upload):
    notes = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")

    with pytest.raises(ValidationError):
        create_review(user, product.pk, 5, media=[notes])

    cloudinary_upload.assert_not_called()
    assert Review.objects.count() == 0


def test_failed_media_upload_rejects_review(user, product, delivered):
    photo = SimpleUploadedFile("unboxing.png", b"\x89PNG", content_type="image/png")

    with mock.patch("cloudinary.uploader.upload", side_effect=Exception("timeout")):
        with pytest.raises(MediaUploadError):
            create_review(user, product.pk, 5, media=[photo])

    assert Review.objects.count() == 0


def test_update_review(user, product, delivered):
    review = create_review(user, product.pk, 3, comment="ok")

    updated = update_review(user, review.pk, rating=5)
    assert (updated.rating, updated.comment) == (5, "ok")

    cleared = update_review(user, review.pk, comment="")
    assert cleared.comment is None

    with pytest.raises(ValidationError):
        update_review(user, review.pk, rating=7)


def test_only_owner_can_update_or_delete(user, other_user, product, delivered):
    review = create_review(user, product.pk, 4)

    with pytest.raises(NotFoundError, match="Review not found or unauthorized"):
        update_review(other_user, review.pk, rating=1)
    with pytest.raises(NotFoundError, match="Review not found or unauthorized"):
        delete_review(other_user, review.pk)
    with pytest.raises(NotFoundError):
        delete_review(user, 999999)

    delete_review(user, review.pk)
    assert not Review.objects.exists()


def test_product_reviews_average(user, other_user, product, make_order, delivered):
    make_order(other_user, product, status=OrderStatus.DELIVERED)
    create_review(user, product.pk, 5)
    create_review(other_user, product.pk, 2)

    result = product_reviews(product.pk)

    assert result["totalReviews"] == 2
    assert result["averageRating"] == 3.5


def test_product_without_reviews(product):
    result = product_reviews(product.pk)
    assert result == {"reviews": [], "averageRating": 0.0, "totalReviews": 0}

"""Uploads to Cloudinary. Callers get back a durable ``secure_url``."""
import logging
import os

import cloudinary.uploader
from django.conf import settings

from .exceptions import MediaUploadError, ValidationError

logger = logging.getLogger(__name__)

MAX_REVIEW_MEDIA_SIZE = 20 * 1024 * 1024
IMAGE_EXTENSIONS = {"jpeg", "jpg", "png", "webp"}
VIDEO_EXTENSIONS = {"mp4", "mov", "avi"}


def check_review_media(upload):
    """Only images (jpeg, jpg, png, webp) and videos (mp4, mov, avi) up to 20 MB."""
    ext = os.path.splitext(upload.name or "")[1].lower().lstrip(".")
    content_type = getattr(upload, "content_type", "") or ""

    is_image = ext in IMAGE_EXTENSIONS and content_type.startswith("image/")
    is_video = ext in VIDEO_EXTENSIONS and content_type.startswith("video/")
    if not (is_image or is_video):
        raise ValidationError(
            "Only image files (jpeg, jpg, png, webp) and video files (mp4, mov, avi) are allowed!"
        )
    if upload.size > MAX_REVIEW_MEDIA_SIZE:
        raise ValidationError(f"{upload.name} is larger than 20 MB")


def upload_media(upload, folder):
    """
    Push a file (Django ``UploadedFile`` or any file-like object) to the media
    host. Any failure becomes a MediaUploadError.
    """
    name = getattr(upload, "name", "upload")
    try:
        logger.info("Uploading %s to %s", name, folder)
        result = cloudinary.uploader.upload(upload, folder=folder, resource_type="auto")
    except Exception as e:
        logger.exception("Cloudinary upload failed for %s", name)
        raise MediaUploadError(f"Image upload failed: {e}") from e

    url = result.get("secure_url")
    if not url:
        raise MediaUploadError("Image upload failed: no URL returned")
    logger.info("Uploaded %s: %s", name, url)
    return url


def upload_product_image(upload):
    return upload_media(upload, settings.STORE_PRODUCT_MEDIA_FOLDER)


def upload_review_media(uploads):
    for upload in uploads:
        check_review_media(upload)
    return [upload_media(upload, settings.STORE_REVIEW_MEDIA_FOLDER) for upload in uploads]

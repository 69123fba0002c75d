from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class StoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "store"

    def ready(self):
        """
        Point the Cloudinary SDK at the configured account. Missing
        credentials are logged, not fatal: uploads will fail and be
        reported per request.
        """
        import cloudinary
        from django.conf import settings

        options = getattr(settings, "CLOUDINARY", {}) or {}
        cloudinary.config(**options)
        if not options.get("cloud_name"):
            logger.warning("CLOUDINARY_CLOUD_NAME is not set; media uploads will fail.")

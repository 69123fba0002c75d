"""Errors raised by the store services and turned into JSON responses by the views."""


class StoreError(Exception):
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(StoreError):
    """Bad input shape, rejected before anything is persisted."""
    status_code = 400


class NotFoundError(StoreError):
    """Missing resource, or one owned by somebody else."""
    status_code = 404


class ConflictError(StoreError):
    status_code = 409


class InsufficientStockError(ConflictError):
    status_code = 400

    def __init__(self, product, requested):
        super().__init__(
            f'Insufficient stock for product "{product.name}". '
            f"Available: {product.stock}, Requested: {requested}"
        )
        self.product_id = product.pk
        self.available = product.stock
        self.requested = requested


class IneligibleReviewError(StoreError):
    status_code = 403


class MediaUploadError(StoreError):
    status_code = 502

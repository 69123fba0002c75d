"""Saved delivery addresses, visible to their owner only."""
import logging

from .exceptions import NotFoundError, ValidationError
from .forms import AddressForm, first_error
from .models import Address

logger = logging.getLogger(__name__)

# Request keys as the storefront sends them, mapped to model fields.
FIELD_MAP = {
    "fullName": "full_name",
    "phone": "phone",
    "email": "email",
    "address": "address",
    "city": "city",
    "state": "state",
    "pincode": "pincode",
}


def _form_data(data):
    return {field: data.get(key, data.get(field)) for key, field in FIELD_MAP.items()}


def _owned_address(user, address_id):
    address = Address.objects.filter(pk=address_id, user=user).first()
    if address is None:
        raise NotFoundError("Address not found or unauthorized")
    return address


def _save(form):
    if not form.is_valid():
        missing = [f for f in FIELD_MAP.values() if not form.data.get(f)]
        if missing:
            raise ValidationError("All fields are required")
        raise ValidationError(first_error(form))
    return form.save()


def list_addresses(user):
    return Address.objects.filter(user=user).order_by('-created_at')


def create_address(user, data):
    form = AddressForm(_form_data(data), instance=Address(user=user))
    address = _save(form)
    logger.info("Address %s added for user %s", address.id, user.pk)
    return address


def update_address(user, address_id, data):
    address = _owned_address(user, address_id)
    form = AddressForm(_form_data(data), instance=address)
    return _save(form)


def delete_address(user, address_id):
    address = _owned_address(user, address_id)
    address.delete()
    logger.info("Address %s deleted for user %s", address_id, user.pk)

from django import forms

from .models import Address, Product


class AddressForm(forms.ModelForm):
    class Meta:
        model = Address
        fields = ['full_name', 'phone', 'email', 'address', 'city', 'state', 'pincode']


class ProductForm(forms.ModelForm):
    class Meta:
        model = Product
        fields = ['name', 'description', 'price', 'stock', 'category', 'discount', 'badge', 'featured']


def first_error(form):
    """Flatten a bound form's errors into one readable line."""
    for field, errors in form.errors.items():
        label = field if field != '__all__' else 'form'
        return f"{label}: {errors[0]}"
    return "Invalid input"

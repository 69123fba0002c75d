"""Load the starter gift catalogue."""
import logging

from django.core.management.base import BaseCommand

from store.models import Product

logger = logging.getLogger(__name__)

TRENDING_PRODUCTS = [
    {
        "name": "Personalized Name Ring",
        "description": "Elegant personalized name ring with timeless design. Perfect gift for loved ones.",
        "price": 1299,
        "stock": 50,
        "category": "Jewelry",
        "badge": "Trending",
        "featured": True,
    },
    {
        "name": "Luxury Gift Hamper",
        "description": "Perfect luxury gift hamper curated for her with premium items and elegant packaging.",
        "price": 2499,
        "stock": 30,
        "category": "Gift Hampers",
        "badge": "Bestseller",
        "featured": True,
    },
    {
        "name": "Anniversary LED Lamp",
        "description": "Capture special moments with this customizable LED lamp. Perfect anniversary gift.",
        "price": 899,
        "stock": 45,
        "category": "Home Decor",
        "discount": 10,
    },
    {
        "name": "Premium Mens Combo",
        "description": "Classy and functional combo set for men including wallet, pen, and keychain.",
        "price": 1799,
        "stock": 25,
        "category": "Mens Accessories",
    },
    {
        "name": "Ultimate Surprise Box",
        "description": "Limited edition surprise box to unwrap happiness. Curated with love and care.",
        "price": 3499,
        "stock": 15,
        "category": "Gift Hampers",
        "badge": "Limited",
    },
]


class Command(BaseCommand):
    help = "Seed the catalogue with trending gift products (existing names are skipped)."

    def handle(self, *args, **options):
        created = 0
        for data in TRENDING_PRODUCTS:
            product, was_created = Product.objects.get_or_create(name=data["name"], defaults=data)
            if was_created:
                created += 1
                self.stdout.write(f"Created product: {product.name} (ID: {product.id})")
            else:
                self.stdout.write(f"Skipped existing product: {product.name}")
        logger.info("Seeded %s product(s)", created)
        self.stdout.write(self.style.SUCCESS(f"Seeding completed! {created} new product(s)."))

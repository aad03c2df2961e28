# apps/catalog/models.py
from django.db import models


class Product(models.Model):
    """
    Purchasable item. Read-only to the storefront; rows come from the
    seed_catalog command or the admin.
    """
    name = models.CharField(max_length=255)
    price = models.PositiveIntegerField(
        help_text="Price in whole taka (no fractional unit)",
    )
    image = models.CharField(max_length=255, blank=True, null=True)
    description = models.TextField(blank=True, null=True)

    class Meta:
        db_table = "products"
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} (৳{self.price})"

    def as_snapshot(self):
        """Frozen copy stored on an order line."""
        return {"id": self.id, "name": self.name, "price": self.price}

from django.db import models
from apps.utils.models import TimestampedModel

__all__ = ["Order"]


class Order(TimestampedModel):
    """
    Placed order. Insert-only: `items` is a frozen snapshot of the
    products at checkout time and `total` their server-computed sum.
    """
    items = models.JSONField()
    total = models.PositiveIntegerField()
    payment_method = models.CharField(max_length=255)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]

    def __str__(self):
        return f"Order #{self.id} ({self.total}, {self.payment_method})"

    @property
    def item_count(self):
        return len(self.items)

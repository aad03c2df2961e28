from django.db import models
from apps.utils.models import TimestampedModel


class SellerApplication(TimestampedModel):
    """
    Intake record for a prospective boutique seller.
    Not linked to users or orders.
    """
    boutique_name = models.CharField(max_length=255)
    trade_license = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)

    class Meta:
        db_table = "seller_applications"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.boutique_name} ({self.trade_license})"

from django.db import models


class TimestampedModel(models.Model):
    """
    Insert-only rows: auto integer id (DEFAULT_AUTO_FIELD) plus creation time.
    """
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

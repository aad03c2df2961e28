import json
import logging
from pathlib import Path

from django.db import transaction, DatabaseError

from apps.utils.exceptions import StorageError, ValidationError
from apps.utils.utils import first_error
from .models import Product
from .serializers import ProductSeedSerializer

logger = logging.getLogger(__name__)


class ProductService:

    @staticmethod
    def list_products():
        """
        Full catalog, no pagination or filtering.
        """
        try:
            return list(Product.objects.all())
        except DatabaseError as e:
            logger.error(f"Catalog read failed: {e}")
            raise StorageError("Could not load products.") from e


class CatalogService:
    """
    Administrative seeding of the products table.
    """

    @staticmethod
    def read_seed_file(path) -> list:
        path = Path(path)
        if not path.exists():
            raise ValidationError(f"Seed file not found: {path}")

        try:
            entries = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValidationError(f"Seed file is not valid JSON: {e}") from e

        if not isinstance(entries, list):
            raise ValidationError("Seed file must contain a JSON array of products.")

        serializer = ProductSeedSerializer(data=entries, many=True)
        if not serializer.is_valid():
            raise ValidationError(f"Invalid seed entry: {first_error(serializer.errors)}")
        return serializer.validated_data

    @staticmethod
    def seed_from_file(path) -> int:
        """
        Insert every product in `path` when the table is empty.
        Returns the number of rows inserted (0 when the catalog already has data).
        """
        if Product.objects.exists():
            logger.info("Catalog already seeded, skipping.")
            return 0

        entries = CatalogService.read_seed_file(path)

        try:
            with transaction.atomic():
                Product.objects.bulk_create([
                    Product(
                        name=entry["name"],
                        price=entry["price"],
                        image=entry.get("image") or None,
                        description=entry.get("description") or None,
                    )
                    for entry in entries
                ])
        except DatabaseError as e:
            logger.error(f"Catalog seed failed: {e}")
            raise StorageError("Could not seed products.") from e

        logger.info(f"Catalog seeded with {len(entries)} products from {path}", extra={"product_count": len(entries)})
        return len(entries)

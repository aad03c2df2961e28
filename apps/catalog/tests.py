# apps/catalog/tests.py
import json
import tempfile
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from django.conf import settings
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.urls import reverse

from rest_framework.test import APITestCase, APIClient
from rest_framework import status

from apps.utils.exceptions import ValidationError
from .models import Product
from .receivers import seed_catalog_after_migrate
from .services import CatalogService


class ProductListAPITests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.panjabi = Product.objects.create(name="Panjabi", price=500, image="p.jpg", description="Cotton")
        self.saree = Product.objects.create(name="Saree", price=1200)

    def test_lists_full_catalog_as_array(self):
        resp = self.client.get(reverse("product-list"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIsInstance(resp.json(), list)
        self.assertEqual(
            resp.json(),
            [
                {"id": self.panjabi.id, "name": "Panjabi", "price": 500, "image": "p.jpg", "description": "Cotton"},
                {"id": self.saree.id, "name": "Saree", "price": 1200, "image": None, "description": None},
            ],
        )

    def test_path_has_no_trailing_slash(self):
        self.assertEqual(reverse("product-list"), "/api/products")

    def test_empty_catalog_is_empty_array(self):
        Product.objects.all().delete()
        resp = self.client.get(reverse("product-list"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json(), [])

    @patch("apps.catalog.services.Product.objects.all", side_effect=DatabaseError("db down"))
    def test_storage_failure_returns_500_with_error(self, _mock_all):
        resp = self.client.get(reverse("product-list"))
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.json(), {"error": "Could not load products."})

    def test_catalog_is_read_only(self):
        resp = self.client.post(reverse("product-list"), {"name": "X", "price": 1}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(Product.objects.count(), 2)


class CatalogSeedTests(TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def _write(self, payload, name="products.json"):
        path = Path(self.tmp.name) / name
        path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload, encoding="utf-8")
        return path

    def test_seeds_empty_table(self):
        path = self._write([
            {"name": "Kurti", "price": 1200, "image": "k.jpg", "description": "Linen"},
            {"name": "Lungi", "price": 500},
        ])

        count = CatalogService.seed_from_file(path)

        self.assertEqual(count, 2)
        self.assertEqual(
            list(Product.objects.values_list("name", "price", "image", "description")),
            [("Kurti", 1200, "k.jpg", "Linen"), ("Lungi", 500, None, None)],
        )

    def test_skips_when_table_has_rows(self):
        Product.objects.create(name="Existing", price=10)
        path = self._write([{"name": "Kurti", "price": 1200}])

        self.assertEqual(CatalogService.seed_from_file(path), 0)
        self.assertEqual(Product.objects.count(), 1)

    def test_rejects_negative_price(self):
        path = self._write([{"name": "Bad", "price": -5}])
        with self.assertRaises(ValidationError):
            CatalogService.seed_from_file(path)
        self.assertFalse(Product.objects.exists())

    def test_rejects_non_array(self):
        path = self._write({"name": "Kurti", "price": 1})
        with self.assertRaises(ValidationError):
            CatalogService.seed_from_file(path)

    def test_rejects_broken_json(self):
        path = self._write("[{", name="broken.json")
        with self.assertRaises(ValidationError):
            CatalogService.seed_from_file(path)

    def test_missing_file(self):
        with self.assertRaises(ValidationError):
            CatalogService.seed_from_file(Path(self.tmp.name) / "nope.json")

    def test_bundled_fixture_is_valid(self):
        entries = CatalogService.read_seed_file(settings.CATALOG_SEED_FILE)
        self.assertTrue(entries)
        self.assertTrue(all(entry["price"] >= 0 for entry in entries))

    def test_command_seeds_then_skips(self):
        path = self._write([{"name": "Polo", "price": 950}])

        out = StringIO()
        call_command("seed_catalog", str(path), stdout=out)
        self.assertIn("seeded with 1 products", out.getvalue())

        out = StringIO()
        call_command("seed_catalog", str(path), stdout=out)
        self.assertIn("nothing seeded", out.getvalue())
        self.assertEqual(Product.objects.count(), 1)

    def test_command_reports_bad_file(self):
        with self.assertRaises(CommandError):
            call_command("seed_catalog", str(Path(self.tmp.name) / "nope.json"), stdout=StringIO())

    def test_post_migrate_seed_is_opt_in(self):
        path = self._write([{"name": "Polo", "price": 950}])

        with override_settings(CATALOG_SEED_ON_MIGRATE=False, CATALOG_SEED_FILE=str(path)):
            seed_catalog_after_migrate(sender=None)
        self.assertFalse(Product.objects.exists())

        with override_settings(CATALOG_SEED_ON_MIGRATE=True, CATALOG_SEED_FILE=str(path)):
            seed_catalog_after_migrate(sender=None)
        self.assertEqual(Product.objects.count(), 1)

    def test_post_migrate_seed_swallows_bad_file(self):
        with override_settings(CATALOG_SEED_ON_MIGRATE=True, CATALOG_SEED_FILE=str(Path(self.tmp.name) / "nope.json")):
            seed_catalog_after_migrate(sender=None)
        self.assertFalse(Product.objects.exists())

# apps/orders/tests.py
from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse

from rest_framework.test import APITestCase, APIClient
from rest_framework import status

from apps.catalog.models import Product
from apps.utils.exceptions import StorageError, ValidationError
from apps.orders.models import Order
from apps.orders.services import OrderService


class PlaceOrderServiceTests(TestCase):
    def setUp(self):
        self.panjabi = Product.objects.create(name="Panjabi", price=500)
        self.saree = Product.objects.create(name="Saree", price=1200)

    def test_snapshot_keeps_cart_order_and_duplicates(self):
        items = [{"id": self.panjabi.id}, {"id": self.panjabi.id}, {"id": self.saree.id}]
        order = OrderService.place_order(items, 2200, "cash")

        self.assertEqual(order.total, 2200)
        self.assertEqual(order.payment_method, "cash")
        self.assertEqual(
            order.items,
            [
                {"id": self.panjabi.id, "name": "Panjabi", "price": 500},
                {"id": self.panjabi.id, "name": "Panjabi", "price": 500},
                {"id": self.saree.id, "name": "Saree", "price": 1200},
            ],
        )
        self.assertIsNotNone(order.created_at)

    def test_snapshot_is_frozen_against_price_changes(self):
        order = OrderService.place_order([{"id": self.saree.id}], 1200, "bkash")

        self.saree.price = 9999
        self.saree.name = "Renamed"
        self.saree.save()

        order.refresh_from_db()
        self.assertEqual(order.items, [{"id": self.saree.id, "name": "Saree", "price": 1200}])
        self.assertEqual(order.total, 1200)

    def test_empty_cart_rejected(self):
        with self.assertRaises(ValidationError):
            OrderService.place_order([], 0, "cash")
        self.assertFalse(Order.objects.exists())

    def test_blank_payment_rejected(self):
        with self.assertRaises(ValidationError):
            OrderService.place_order([{"id": self.panjabi.id}], 500, "   ")

    def test_tampered_total_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            OrderService.place_order([{"id": self.saree.id}], 1, "cash")
        self.assertIn("does not match", ctx.exception.message)
        self.assertFalse(Order.objects.exists())

    def test_unknown_product_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            OrderService.place_order([{"id": 424242}], 0, "cash")
        self.assertIn("424242", ctx.exception.message)

    @patch("apps.orders.services.Order.objects.create", side_effect=DatabaseError("disk full"))
    def test_insert_failure_is_storage_error(self, _mock_create):
        with self.assertRaises(StorageError):
            OrderService.place_order([{"id": self.panjabi.id}], 500, "cash")


class CreateOrderAPITests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = reverse("create-order")
        self.panjabi = Product.objects.create(name="Panjabi", price=500)
        self.saree = Product.objects.create(name="Saree", price=1200)

    def _cart_line(self, product):
        # What the storefront sends: the full product as it saw it
        return {"id": product.id, "name": product.name, "price": product.price, "image": None, "description": None}

    def test_url(self):
        self.assertEqual(self.url, "/api/orders")

    def test_create_order_returns_order_id(self):
        payload = {
            "items": [self._cart_line(self.panjabi), self._cart_line(self.panjabi), self._cart_line(self.saree)],
            "total": 2200,
            "payment": "cash",
        }
        resp = self.client.post(self.url, payload, format="json")

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        order = Order.objects.get()
        self.assertEqual(resp.json(), {"success": True, "orderId": order.id})
        self.assertEqual(order.total, 2200)
        self.assertEqual(len(order.items), 3)

    def test_client_price_is_not_trusted(self):
        line = self._cart_line(self.saree)
        line["price"] = 1
        resp = self.client.post(self.url, {"items": [line], "total": 1, "payment": "cash"}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.json()["success"])
        self.assertEqual(resp.json()["code"], "validation_error")
        self.assertFalse(Order.objects.exists())

    def test_empty_items(self):
        resp = self.client.post(self.url, {"items": [], "total": 0, "payment": "cash"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["message"], "Cart is empty.")

    def test_missing_total(self):
        resp = self.client.post(self.url, {"items": [self._cart_line(self.saree)], "payment": "cash"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("total", resp.json()["message"])

    def test_line_without_id(self):
        resp = self.client.post(self.url, {"items": [{"name": "Saree"}], "total": 0, "payment": "cash"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    @patch("apps.orders.services.Order.objects.create", side_effect=DatabaseError("disk full"))
    def test_storage_failure(self, _mock_create):
        payload = {"items": [self._cart_line(self.saree)], "total": 1200, "payment": "cash"}
        resp = self.client.post(self.url, payload, format="json")

        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.json(), {"error": "Could not place order."})

    def test_orders_are_create_only(self):
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

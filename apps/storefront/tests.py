import threading
from io import StringIO
from unittest.mock import Mock, patch

import requests
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import LiveServerTestCase, SimpleTestCase

from apps.catalog.models import Product as ProductRow
from apps.orders.models import Order
from apps.sellers.models import SellerApplication
from apps.utils.exceptions import (
    AuthError, ConflictError, FetchError, StorageError, ThrottledError, ValidationError,
)
from .cart import Cart
from .catalog import CatalogStore, Product
from .checkout import CheckoutService
from .client import ShopApiClient
from .session import StorefrontSession

CATALOG = [
    {"id": 1, "name": "Panjabi", "price": 500, "image": "p.jpg", "description": "Cotton"},
    {"id": 2, "name": "Saree", "price": 1200, "image": None, "description": None},
]


def stub_client(products=None, order_id=7):
    client = Mock(spec=ShopApiClient)
    client.list_products.return_value = list(CATALOG if products is None else products)
    client.create_order.return_value = order_id
    return client


def loaded_catalog(client=None):
    catalog = CatalogStore(client or stub_client())
    catalog.load()
    return catalog


class CatalogStoreTests(SimpleTestCase):

    def test_load_parses_products(self):
        catalog = CatalogStore(stub_client())
        products = catalog.load()

        self.assertEqual(len(products), 2)
        self.assertEqual(catalog.get(1), Product(1, "Panjabi", 500, "p.jpg", "Cotton"))
        self.assertIsNone(catalog.get(3))

    def test_failed_load_leaves_store_empty(self):
        client = stub_client()
        catalog = CatalogStore(client)
        catalog.load()

        client.list_products.side_effect = FetchError("down")
        with self.assertRaises(FetchError):
            catalog.load()

        self.assertEqual(len(catalog), 0)
        self.assertIsNone(catalog.get(1))

    def test_malformed_product_is_fetch_error(self):
        catalog = CatalogStore(stub_client(products=[{"id": 1, "name": "No price"}]))
        with self.assertRaises(FetchError):
            catalog.load()
        self.assertEqual(len(catalog), 0)

    def test_non_integer_id_or_price_is_rejected(self):
        bad_rows = [
            {"id": 1, "name": "Panjabi", "price": 499.9},
            {"id": 1.5, "name": "Panjabi", "price": 500},
            {"id": True, "name": "Panjabi", "price": 500},
            {"id": 1, "name": "Panjabi", "price": "500"},
        ]
        for row in bad_rows:
            catalog = CatalogStore(stub_client(products=[row]))
            with self.assertRaises(FetchError, msg=row):
                catalog.load()
            self.assertIsNone(catalog.get(1))


class CartTests(SimpleTestCase):

    def test_total_and_length_follow_adds(self):
        cart = Cart(loaded_catalog())
        for product_id in (1, 1, 2):
            cart.add(product_id)

        self.assertEqual(len(cart), 3)
        self.assertEqual(cart.total(), 2200)
        self.assertEqual([line.product.id for line in cart.lines], [1, 1, 2])

    def test_various_add_sequences(self):
        prices = {1: 500, 2: 1200}
        for sequence in ([], [2], [1, 2, 1, 2, 2], [1] * 10):
            cart = Cart(loaded_catalog())
            for product_id in sequence:
                cart.add(product_id)
            self.assertEqual(len(cart), len(sequence))
            self.assertEqual(cart.total(), sum(prices[i] for i in sequence))

    def test_unknown_product_is_ignored(self):
        changes = []
        cart = Cart(loaded_catalog(), on_change=changes.append)

        self.assertIsNone(cart.add(99))
        self.assertTrue(cart.is_empty)
        self.assertEqual(changes, [])

    def test_on_change_fires_for_add_and_clear(self):
        seen = []
        cart = Cart(loaded_catalog(), on_change=lambda c: seen.append((len(c), c.total())))

        cart.add(1)
        cart.add(2)
        cart.clear()

        self.assertEqual(seen, [(1, 500), (2, 1700), (0, 0)])

    def test_snapshot_is_independent_copy(self):
        cart = Cart(loaded_catalog())
        cart.add(1)
        snapshot = cart.snapshot()

        cart.add(2)
        snapshot[0]["price"] = 1

        self.assertEqual(len(snapshot), 1)
        self.assertEqual(cart.total(), 1700)


class CheckoutServiceTests(SimpleTestCase):

    def setUp(self):
        self.client = stub_client(order_id=7)
        self.cart = Cart(loaded_catalog(self.client))
        self.service = CheckoutService(self.client)

    def test_example_checkout(self):
        for product_id in (1, 1, 2):
            self.cart.add(product_id)

        result = self.service.checkout(self.cart, "cash")

        self.assertEqual(result.order_id, 7)
        self.assertEqual(result.total, 2200)
        self.assertEqual(len(self.cart), 0)
        payload = self.client.create_order.call_args[0][0]
        self.assertEqual(payload["total"], 2200)
        self.assertEqual(payload["payment"], "cash")
        self.assertEqual([item["id"] for item in payload["items"]], [1, 1, 2])

    def test_empty_cart_makes_no_call(self):
        with self.assertRaises(ValidationError):
            self.service.checkout(self.cart, "cash")
        self.client.create_order.assert_not_called()

    def test_blank_payment_makes_no_call(self):
        self.cart.add(1)
        with self.assertRaises(ValidationError):
            self.service.checkout(self.cart, " ")
        self.client.create_order.assert_not_called()
        self.assertEqual(len(self.cart), 1)

    def test_failure_keeps_cart(self):
        for product_id in (2, 1):
            self.cart.add(product_id)
        before = self.cart.lines

        for error in (FetchError("timeout"), StorageError("db"), ValidationError("mismatch")):
            self.client.create_order.side_effect = error
            with self.assertRaises(type(error)):
                self.service.checkout(self.cart, "cash")
            self.assertEqual(self.cart.lines, before)

        self.assertFalse(self.service.in_progress)

    def test_placed_order_items_do_not_follow_cart(self):
        self.cart.add(1)
        result = self.service.checkout(self.cart, "cash")

        self.cart.add(2)
        self.cart.add(2)

        self.assertEqual([item["id"] for item in result.items], [1])

    def test_concurrent_checkout_is_rejected(self):
        entered = threading.Event()
        release = threading.Event()
        results = []

        def slow_create(payload):
            entered.set()
            release.wait(5)
            return 9

        self.client.create_order.side_effect = slow_create
        self.cart.add(1)

        worker = threading.Thread(target=lambda: results.append(self.service.checkout(self.cart, "cash")))
        worker.start()
        self.assertTrue(entered.wait(5))

        with self.assertRaises(ConflictError):
            self.service.checkout(self.cart, "cash")

        release.set()
        worker.join(5)

        self.assertEqual(self.client.create_order.call_count, 1)
        self.assertEqual(results[0].order_id, 9)
        self.assertTrue(self.cart.is_empty)


def http_response(status_code, body=None, raw=False):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    if raw:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body
    return response


class ShopApiClientTests(SimpleTestCase):

    def setUp(self):
        self.session = Mock(spec=requests.Session)
        self.client = ShopApiClient(base_url="http://shop.test/api/", session=self.session)

    def test_list_products(self):
        self.session.request.return_value = http_response(200, CATALOG)

        self.assertEqual(self.client.list_products(), CATALOG)
        self.session.request.assert_called_once_with(
            "GET", "http://shop.test/api/products", json=None, timeout=None,
        )

    def test_transport_error_is_fetch_error(self):
        self.session.request.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(FetchError):
            self.client.list_products()

    def test_non_json_is_fetch_error(self):
        self.session.request.return_value = http_response(200, raw=True)
        with self.assertRaises(FetchError):
            self.client.create_order({"items": [], "total": 0, "payment": "cash"})

    def test_products_must_be_a_list(self):
        self.session.request.return_value = http_response(200, {"error": "nope"})
        with self.assertRaises(FetchError):
            self.client.list_products()

    def test_create_order_returns_id(self):
        self.session.request.return_value = http_response(200, {"success": True, "orderId": 7})
        self.assertEqual(self.client.create_order({"items": [{"id": 1}], "total": 500, "payment": "cash"}), 7)

    def test_success_without_order_id_is_malformed(self):
        self.session.request.return_value = http_response(200, {"success": True})
        with self.assertRaises(FetchError):
            self.client.create_order({})

    def test_status_maps_to_error_class(self):
        cases = [
            (400, {"success": False, "message": "Cart is empty."}, ValidationError),
            (401, {"success": False, "message": "Invalid email or password"}, AuthError),
            (409, {"success": False, "message": "Email already exists"}, ConflictError),
            (429, {"success": False, "message": "Request was throttled.", "code": "throttled"}, ThrottledError),
            (500, {"error": "Could not place order."}, StorageError),
        ]
        for status_code, body, error_class in cases:
            self.session.request.return_value = http_response(status_code, body)
            with self.assertRaises(error_class) as ctx:
                self.client.login("a@example.com", "x")
            self.assertEqual(ctx.exception.message, body.get("message") or body.get("error"))

    def test_apply_seller_uses_camel_case(self):
        self.session.request.return_value = http_response(200, {"success": True, "applicationId": 3})

        self.assertEqual(self.client.apply_seller("Rang", "TL-1", "Sarees"), 3)
        self.session.request.assert_called_once_with(
            "POST", "http://shop.test/api/apply-seller",
            json={"boutiqueName": "Rang", "tradeLicense": "TL-1", "description": "Sarees"},
            timeout=None,
        )


class StorefrontSessionTests(SimpleTestCase):

    def setUp(self):
        self.client = stub_client(order_id=7)
        self.session = StorefrontSession(client=self.client)

    def test_open_failure_notice(self):
        self.client.list_products.side_effect = FetchError("down")
        notice = self.session.open()

        self.assertFalse(notice.ok)
        self.assertEqual(notice.message, StorefrontSession.LOAD_FAILED)
        self.assertEqual(len(self.session.catalog), 0)

    def test_shopping_flow(self):
        self.assertTrue(self.session.open().ok)
        self.assertTrue(self.session.add_to_cart(2).ok)
        self.assertFalse(self.session.add_to_cart(99).ok)

        notice = self.session.place_order("cash")

        self.assertTrue(notice.ok)
        self.assertIn("Order ID: 7", notice.message)
        self.assertTrue(self.session.cart.is_empty)

    def test_empty_cart_notice(self):
        self.session.open()
        notice = self.session.place_order("cash")

        self.assertFalse(notice.ok)
        self.assertEqual(notice.message, StorefrontSession.EMPTY_CART)
        self.client.create_order.assert_not_called()

    def test_failed_checkout_notice_keeps_cart(self):
        self.session.open()
        self.session.add_to_cart(1)
        self.client.create_order.side_effect = FetchError("Could not reach the store.")

        notice = self.session.place_order("cash")

        self.assertFalse(notice.ok)
        self.assertEqual(notice.message, "Could not reach the store.")
        self.assertEqual(len(self.session.cart), 1)

    def test_blank_credentials_make_no_call(self):
        notice = self.session.login("  ", "secret")
        self.assertFalse(notice.ok)
        self.assertEqual(notice.message, "Please fill in both fields.")
        self.client.login.assert_not_called()

    def test_login_error_becomes_notice(self):
        self.client.login.side_effect = AuthError("Invalid email or password")
        notice = self.session.login("a@example.com", "wrong")
        self.assertFalse(notice.ok)
        self.assertEqual(notice.message, "Invalid email or password")

    def test_apply_seller_requires_all_fields(self):
        notice = self.session.apply_seller("Rang", "", "Sarees")
        self.assertFalse(notice.ok)
        self.client.apply_seller.assert_not_called()

        self.client.apply_seller.return_value = 4
        notice = self.session.apply_seller(" Rang ", "TL-1", "Sarees")
        self.assertTrue(notice.ok)
        self.assertEqual(notice.value, 4)
        self.client.apply_seller.assert_called_with("Rang", "TL-1", "Sarees")


class ShopCommandTests(SimpleTestCase):

    @patch("apps.storefront.management.commands.shop.ShopApiClient")
    def test_places_order(self, client_class):
        client_class.return_value = stub_client(order_id=7)
        out = StringIO()

        call_command("shop", "--add", "1", "--add", "2", "--payment", "bkash", stdout=out)

        self.assertIn("Order ID: 7", out.getvalue())
        payload = client_class.return_value.create_order.call_args[0][0]
        self.assertEqual(payload["payment"], "bkash")
        self.assertEqual(payload["total"], 1700)

    @patch("apps.storefront.management.commands.shop.ShopApiClient")
    def test_unreachable_store(self, client_class):
        client_class.return_value = stub_client()
        client_class.return_value.list_products.side_effect = FetchError("down")

        with self.assertRaises(CommandError):
            call_command("shop", stdout=StringIO())


class StorefrontEndToEndTests(LiveServerTestCase):
    """
    Real HTTP round trips from the storefront client to the API.
    """

    def setUp(self):
        self.panjabi = ProductRow.objects.create(name="Panjabi", price=500)
        self.saree = ProductRow.objects.create(name="Saree", price=1200)
        self.session = StorefrontSession(client=ShopApiClient(base_url=f"{self.live_server_url}/api"))

    def test_browse_and_checkout(self):
        self.assertTrue(self.session.open().ok)
        for product in (self.panjabi, self.panjabi, self.saree):
            self.assertTrue(self.session.add_to_cart(product.id).ok)

        notice = self.session.place_order("cash")

        self.assertTrue(notice.ok, notice.message)
        order = Order.objects.get()
        self.assertEqual(notice.value.order_id, order.id)
        self.assertEqual(order.total, 2200)
        self.assertTrue(self.session.cart.is_empty)

    def test_stale_price_is_rejected_and_cart_kept(self):
        self.session.open()
        self.session.add_to_cart(self.saree.id)

        ProductRow.objects.filter(pk=self.saree.pk).update(price=1500)
        notice = self.session.place_order("cash")

        self.assertFalse(notice.ok)
        self.assertEqual(len(self.session.cart), 1)
        self.assertFalse(Order.objects.exists())

    def test_register_login_and_apply(self):
        self.assertTrue(self.session.register("buyer@example.com", "right-pass").ok)
        self.assertFalse(self.session.register("buyer@example.com", "right-pass").ok)
        self.assertTrue(self.session.login("buyer@example.com", "right-pass").ok)
        self.assertFalse(self.session.login("buyer@example.com", "wrong-pass").ok)

        notice = self.session.apply_seller("Rang Boutique", "TL-2024-118", "Handloom")
        self.assertTrue(notice.ok)
        self.assertEqual(notice.value, SellerApplication.objects.get().id)

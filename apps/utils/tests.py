# apps/utils/tests.py
import json
import logging
import sys
from unittest.mock import patch

from django.core.cache import cache
from django.db import DatabaseError
from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase, TestCase
from rest_framework import status
from rest_framework.test import APIClient

from .exceptions import (
    AuthError, ConflictError, StorageError, ThrottledError, ValidationError,
    custom_exception_handler, error_for_status,
)
from .logging import JSONFormatter
from .middleware import GlobalExceptionMiddleware, RequestLogMiddleware
from .throttle import AuthRateThrottle
from .utils import first_error


class ExceptionHandlerTests(SimpleTestCase):

    def test_shop_error_uses_message_key_by_default(self):
        resp = custom_exception_handler(ConflictError("Email already exists"), {"view": object()})
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data, {"success": False, "message": "Email already exists", "code": "conflict"})

    def test_view_can_pick_error_key(self):
        class View:
            error_key = "error"

        resp = custom_exception_handler(ValidationError("All fields are required"), {"view": View()})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["error"], "All fields are required")

    def test_storage_error_is_generic_500(self):
        resp = custom_exception_handler(StorageError("Could not place order."), {})
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.data, {"error": "Could not place order."})

    def test_unhandled_exception_is_500(self):
        resp = custom_exception_handler(RuntimeError("boom"), {})
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.data["code"], "server_error")

    def test_error_for_status(self):
        self.assertIs(error_for_status(400), ValidationError)
        self.assertIs(error_for_status(401), AuthError)
        self.assertIs(error_for_status(409), ConflictError)
        self.assertIs(error_for_status(503), StorageError)
        self.assertIs(error_for_status(418), ValidationError)


class FirstErrorTests(SimpleTestCase):

    def test_field_prefix(self):
        self.assertEqual(first_error({"total": ["A valid integer is required."]}), "total: A valid integer is required.")

    def test_non_field_errors_are_plain(self):
        self.assertEqual(first_error({"non_field_errors": ["Email and password are required"]}),
                         "Email and password are required")

    def test_nested_list_skips_valid_entries(self):
        errors = {"items": [{}, {"id": ["This field is required."]}]}
        self.assertEqual(first_error(errors), "items: id: This field is required.")
        self.assertEqual(first_error(errors, include_field=False), "This field is required.")

    def test_default(self):
        self.assertEqual(first_error({}), "Invalid request")


class JSONFormatterTests(SimpleTestCase):

    def test_scrubs_sensitive_keys(self):
        record = logging.LogRecord(
            "apps.accounts", logging.INFO, __file__, 1,
            {"email": "a@example.com", "password": "hunter2", "nested": [{"tradeLicense": "TL-1"}]},
            None, None,
        )
        payload = json.loads(JSONFormatter().format(record))

        self.assertEqual(payload["lvl"], "INFO")
        self.assertNotIn("hunter2", payload["msg"])
        self.assertNotIn("TL-1", payload["msg"])
        self.assertIn("a@example.com", payload["msg"])

    def test_carries_order_id(self):
        record = logging.LogRecord("apps.orders", logging.INFO, __file__, 1, "placed", None, None)
        record.order_id = 7
        self.assertEqual(json.loads(JSONFormatter().format(record))["order_id"], 7)

    def test_shop_error_code(self):
        try:
            raise ConflictError("Email already exists")
        except ConflictError:
            record = logging.LogRecord(
                "apps.accounts", logging.ERROR, __file__, 1, "register failed", None, sys.exc_info(),
            )
        payload = json.loads(JSONFormatter().format(record))
        self.assertEqual(payload["code"], "conflict")
        self.assertIn("ConflictError", payload["exc"])


class MiddlewareTests(SimpleTestCase):

    def setUp(self):
        self.factory = RequestFactory()

    def test_request_log_for_api_paths(self):
        middleware = RequestLogMiddleware(lambda request: HttpResponse(status=201))
        with self.assertLogs("apps.utils.middleware", level="INFO") as logs:
            resp = middleware(self.factory.post("/api/orders"))
        self.assertEqual(resp.status_code, 201)
        self.assertIn("POST /api/orders -> 201", logs.output[0])

    def test_unhandled_error_under_api_is_json(self):
        middleware = GlobalExceptionMiddleware(lambda request: HttpResponse())
        with self.assertLogs("apps.utils.middleware", level="ERROR"):
            resp = middleware.process_exception(self.factory.get("/api/health"), RuntimeError("boom"))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(json.loads(resp.content), {"error": "Internal Server Error", "code": "server_error"})

    def test_shop_errors_keep_their_status(self):
        middleware = GlobalExceptionMiddleware(lambda request: HttpResponse())
        with self.assertLogs("apps.utils.middleware", level="WARNING"):
            resp = middleware.process_exception(self.factory.get("/api/health"), ConflictError("busy"))
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(json.loads(resp.content), {"success": False, "message": "busy", "code": "conflict"})

        with self.assertLogs("apps.utils.middleware", level="ERROR"):
            resp = middleware.process_exception(self.factory.get("/api/health"), StorageError("Could not read."))
        self.assertEqual(json.loads(resp.content), {"error": "Could not read."})

    def test_admin_pages_fall_through(self):
        middleware = GlobalExceptionMiddleware(lambda request: HttpResponse())
        with self.assertLogs("apps.utils.middleware", level="ERROR"):
            self.assertIsNone(middleware.process_exception(self.factory.get("/admin/"), RuntimeError("boom")))


class FrameworkErrorBodyTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        cache.clear()

    def test_malformed_json_body(self):
        resp = self.client.post("/api/orders", data="{not json", content_type="application/json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        body = resp.json()
        self.assertEqual(body["success"], False)
        self.assertEqual(body["code"], "parse_error")
        self.assertIn("JSON parse error", body["message"])
        self.assertNotIn("detail", body)

    def test_malformed_json_uses_view_error_key(self):
        resp = self.client.post("/api/apply-seller", data="{not json", content_type="application/json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("JSON parse error", resp.json()["error"])

    def test_method_not_allowed(self):
        resp = self.client.get("/api/login")

        self.assertEqual(resp.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(resp.json()["code"], "method_not_allowed")
        self.assertEqual(resp.json()["success"], False)

    def test_throttled_login(self):
        payload = {"email": "buyer@example.com", "password": "whatever"}
        with patch.object(AuthRateThrottle, "THROTTLE_RATES", {"auth": "1/min"}):
            first = self.client.post("/api/login", payload, format="json")
            second = self.client.post("/api/login", payload, format="json")

        self.assertEqual(first.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(second.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(second.json()["success"], False)
        self.assertEqual(second.json()["code"], "throttled")
        self.assertIn("throttled", second.json()["message"])
        self.assertIn("Retry-After", second)
        self.assertIs(error_for_status(second.status_code), ThrottledError)


class OperationsEndpointTests(TestCase):

    def test_health_ok(self):
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["components"], {"db": "ok", "catalog": "empty"})

    def test_health_reports_seeded_catalog(self):
        from apps.catalog.models import Product
        Product.objects.create(name="Panjabi", price=500)

        resp = self.client.get("/api/health")
        self.assertEqual(resp.json()["components"]["catalog"], "ok")

    @patch("apps.utils.health.connection")
    def test_health_db_down(self, mock_connection):
        mock_connection.cursor.side_effect = DatabaseError("down")
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json()["components"]["db"], "error")

    def test_info(self):
        resp = self.client.get("/api/info")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["app_name"], "Fit Bazaar")
        self.assertEqual(resp.json()["endpoints"]["orders"], "POST /api/orders")

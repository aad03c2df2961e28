from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse

from rest_framework.test import APITestCase, APIClient
from rest_framework import status

from apps.utils.exceptions import ValidationError
from .models import SellerApplication
from .services import SellerService


class SellerServiceTests(TestCase):

    def test_submit_creates_application(self):
        application = SellerService.submit("Rang Boutique", "TL-2024-118", "Handloom sarees")

        self.assertIsNotNone(application.id)
        self.assertIsNotNone(application.created_at)
        self.assertEqual(SellerApplication.objects.get().boutique_name, "Rang Boutique")

    def test_submit_requires_every_field(self):
        with self.assertRaises(ValidationError):
            SellerService.submit("Rang Boutique", "", "Handloom sarees")
        self.assertFalse(SellerApplication.objects.exists())


class ApplySellerAPITests(APITestCase):

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("apply-seller")
        self.payload = {
            "boutiqueName": "Rang Boutique",
            "tradeLicense": "TL-2024-118",
            "description": "Handloom sarees and panjabis",
        }

    def test_url(self):
        self.assertEqual(self.url, "/api/apply-seller")

    def test_apply_returns_application_id(self):
        resp = self.client.post(self.url, self.payload, format="json")

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        application = SellerApplication.objects.get()
        self.assertEqual(resp.json(), {"success": True, "applicationId": application.id})
        self.assertEqual(application.trade_license, "TL-2024-118")

    def test_missing_field_uses_error_key(self):
        for field in self.payload:
            payload = dict(self.payload)
            payload[field] = "  "
            resp = self.client.post(self.url, payload, format="json")

            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, field)
            self.assertEqual(resp.json()["success"], False)
            self.assertEqual(resp.json()["error"], "All fields are required")
            self.assertNotIn("message", resp.json())

        self.assertFalse(SellerApplication.objects.exists())

    @patch("apps.sellers.services.SellerApplication.objects.create", side_effect=DatabaseError("db down"))
    def test_storage_failure(self, _mock_create):
        resp = self.client.post(self.url, self.payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.json(), {"error": "Could not submit application."})

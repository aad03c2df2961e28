from io import StringIO
from unittest.mock import patch

from django.contrib.auth.hashers import check_password
from django.core.management import CommandError, call_command
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APIClient
from rest_framework import status

from apps.utils.exceptions import AuthError, ConflictError
from apps.accounts.models import User
from apps.accounts.services import AccountService


class AccountServiceTests(TestCase):

    def test_register_hashes_password(self):
        user = AccountService.register("buyer@example.com", "s3cret-pass")

        self.assertNotEqual(user.password, "s3cret-pass")
        self.assertTrue(user.password.startswith("pbkdf2_sha256$"))
        self.assertTrue(check_password("s3cret-pass", user.password))

    def test_same_password_gets_different_salt(self):
        a = AccountService.register("a@example.com", "same-pass")
        b = AccountService.register("b@example.com", "same-pass")
        self.assertNotEqual(a.password, b.password)

    def test_register_twice_conflicts(self):
        AccountService.register("buyer@example.com", "pass-one")
        with self.assertRaises(ConflictError):
            AccountService.register("buyer@example.com", "pass-two")
        self.assertEqual(User.objects.count(), 1)

    def test_email_domain_is_normalized(self):
        AccountService.register("buyer@EXAMPLE.com", "pass-one")
        with self.assertRaises(ConflictError):
            AccountService.register("buyer@example.com", "pass-two")

    def test_email_is_case_insensitive(self):
        user = AccountService.register("Buyer@Example.com", "pass-one")
        self.assertEqual(user.email, "buyer@example.com")

        with self.assertRaises(ConflictError):
            AccountService.register("buyer@example.com", "pass-two")
        self.assertEqual(User.objects.count(), 1)

        self.assertEqual(AccountService.authenticate("BUYER@example.COM", "pass-one"), user)

    def test_login_finds_mixed_case_row(self):
        # Rows written before addresses were lower-cased in full
        legacy = User.objects.create(email="Legacy@example.com")
        legacy.set_password("old-pass")
        legacy.save()

        self.assertEqual(AccountService.authenticate("legacy@example.com", "old-pass"), legacy)
        with self.assertRaises(ConflictError):
            AccountService.register("LEGACY@example.com", "new-pass")

    def test_authenticate_success(self):
        registered = AccountService.register("buyer@example.com", "right-pass")
        self.assertEqual(AccountService.authenticate("buyer@example.com", "right-pass"), registered)

    def test_authenticate_wrong_password(self):
        AccountService.register("buyer@example.com", "right-pass")
        with self.assertRaises(AuthError):
            AccountService.authenticate("buyer@example.com", "wrong-pass")

    def test_authenticate_unknown_email(self):
        with self.assertRaises(AuthError):
            AccountService.authenticate("ghost@example.com", "whatever")

    def test_inactive_user_cannot_login(self):
        user = AccountService.register("buyer@example.com", "right-pass")
        user.is_active = False
        user.save(update_fields=["is_active"])
        with self.assertRaises(AuthError):
            AccountService.authenticate("buyer@example.com", "right-pass")

    def test_login_mutates_nothing(self):
        AccountService.register("buyer@example.com", "right-pass")
        before = User.objects.values().get(email="buyer@example.com")

        AccountService.authenticate("buyer@example.com", "right-pass")
        with self.assertRaises(AuthError):
            AccountService.authenticate("buyer@example.com", "wrong-pass")

        after = User.objects.values().get(email="buyer@example.com")
        self.assertEqual(before, after)
        self.assertIsNone(after["last_login"])
        self.assertEqual(User.objects.count(), 1)


class AuthAPITests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.register_url = reverse("register")
        self.login_url = reverse("login")
        self.credentials = {"email": "buyer@example.com", "password": "right-pass"}

    def test_urls_match_storefront_paths(self):
        self.assertEqual(self.register_url, "/api/register")
        self.assertEqual(self.login_url, "/api/login")

    def test_register_then_duplicate(self):
        resp = self.client.post(self.register_url, self.credentials, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json(), {"success": True, "message": "Registered successfully"})

        resp = self.client.post(self.register_url, self.credentials, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(resp.json()["success"])
        self.assertEqual(resp.json()["message"], "Email already exists")

    def test_register_requires_both_fields(self):
        for payload in ({}, {"email": "buyer@example.com"}, {"password": "x"}, {"email": "", "password": ""}):
            resp = self.client.post(self.register_url, payload, format="json")
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, payload)
            self.assertEqual(resp.json()["message"], "Email and password are required")
        self.assertFalse(User.objects.exists())

    def test_register_rejects_malformed_email(self):
        resp = self.client.post(self.register_url, {"email": "not-an-email", "password": "x"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.json()["success"])

    def test_login_success(self):
        AccountService.register(**self.credentials)
        resp = self.client.post(self.login_url, self.credentials, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json(), {"success": True, "message": "Logged in successfully"})

    def test_login_wrong_password(self):
        AccountService.register(**self.credentials)
        resp = self.client.post(self.login_url, {"email": "buyer@example.com", "password": "nope"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.json()["message"], "Invalid email or password")
        self.assertFalse(resp.json()["success"])

    def test_login_missing_fields(self):
        resp = self.client.post(self.login_url, {"email": "buyer@example.com"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    @patch("apps.accounts.services.User.objects.filter", side_effect=DatabaseError("db down"))
    def test_storage_failure_is_generic_500(self, _mock_filter):
        resp = self.client.post(self.login_url, self.credentials, format="json")
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(resp.json(), {"error": "Could not verify credentials."})


class CreateAdminCommandTests(TestCase):

    @override_settings(DEBUG=True)
    @patch.dict("os.environ", {"ADMIN_EMAIL": "admin@example.com", "ADMIN_PASSWORD": "admin-pass"})
    def test_creates_then_promotes_superuser(self):
        out = StringIO()
        call_command("create_admin", stdout=out)
        self.assertIn("Created Superuser", out.getvalue())

        user = User.objects.get(email="admin@example.com")
        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_superuser)
        self.assertTrue(user.check_password("admin-pass"))

        out = StringIO()
        call_command("create_admin", stdout=out)
        self.assertIn("Promoted Superuser", out.getvalue())
        self.assertEqual(User.objects.count(), 1)

    @override_settings(DEBUG=True)
    def test_promotes_existing_shopper_from_options(self):
        AccountService.register("owner@example.com", "shopper-pass")

        call_command("create_admin", email="owner@example.com", password="new-pass", stdout=StringIO())

        user = User.objects.get(email="owner@example.com")
        self.assertTrue(user.is_superuser)
        self.assertTrue(user.check_password("new-pass"))

    @override_settings(DEBUG=True)
    @patch.dict("os.environ", {}, clear=True)
    def test_missing_credentials(self):
        with self.assertRaisesMessage(CommandError, "Missing admin email or password"):
            call_command("create_admin", stdout=StringIO())

    @override_settings(DEBUG=False)
    @patch.dict("os.environ", {"ADMIN_EMAIL": "admin@example.com", "ADMIN_PASSWORD": "admin-pass"})
    def test_production_lock(self):
        with self.assertRaisesMessage(CommandError, "Production Lock"):
            call_command("create_admin", stdout=StringIO())
        self.assertFalse(User.objects.exists())

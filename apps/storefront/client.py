import logging

import requests
from django.conf import settings

from apps.utils.exceptions import FetchError, error_for_status

logger = logging.getLogger(__name__)


class ShopApiClient:
    """
    HTTP client for the storefront REST API.

    Transport failures and unreadable bodies raise FetchError; error statuses
    raise the exception class the server used (ValidationError, AuthError, ...).
    Nothing is retried.
    """

    def __init__(self, base_url=None, session=None, timeout=None):
        self.base_url = (base_url or settings.STOREFRONT_API_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.STOREFRONT_API_TIMEOUT

    def _request(self, method, path, payload=None):
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise FetchError("Could not reach the store. Is the backend server running?") from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"{method} {url} returned a non-JSON body (status {response.status_code})")
            raise FetchError("The store sent an unreadable response.") from e

        if not 200 <= response.status_code < 300:
            message = "Request failed"
            if isinstance(body, dict):
                message = body.get("message") or body.get("error") or message
            logger.warning(f"{method} {url} -> {response.status_code}: {message}")
            raise error_for_status(response.status_code)(message)

        return body

    def _expect_success(self, body, key):
        if not isinstance(body, dict) or body.get("success") is not True or key not in body:
            raise FetchError("The store sent an unexpected response.")
        return body[key]

    def list_products(self) -> list:
        body = self._request("GET", "products")
        if not isinstance(body, list):
            raise FetchError("The store sent an unexpected product list.")
        return body

    def create_order(self, payload: dict):
        body = self._request("POST", "orders", payload)
        return self._expect_success(body, "orderId")

    def register(self, email: str, password: str) -> str:
        body = self._request("POST", "register", {"email": email, "password": password})
        return self._expect_success(body, "message")

    def login(self, email: str, password: str) -> str:
        body = self._request("POST", "login", {"email": email, "password": password})
        return self._expect_success(body, "message")

    def apply_seller(self, boutique_name: str, trade_license: str, description: str):
        body = self._request("POST", "apply-seller", {
            "boutiqueName": boutique_name,
            "tradeLicense": trade_license,
            "description": description,
        })
        return self._expect_success(body, "applicationId")

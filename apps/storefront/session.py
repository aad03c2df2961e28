import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from apps.utils.exceptions import ShopError, ValidationError
from .cart import Cart
from .catalog import CatalogStore
from .checkout import CheckoutService
from .client import ShopApiClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    """
    What the user sees after an action: one message, success or failure.
    """
    ok: bool
    message: str
    value: Any = None


class StorefrontSession:
    """
    State of one shopper: catalog, cart and checkout, plus the command
    handlers the presentation layer calls. Every ShopError raised by a
    handler becomes a failed Notice; nothing is retried.
    """

    LOAD_FAILED = "Failed to load products. Is the backend server running?"
    EMPTY_CART = "Your cart is empty!"

    def __init__(self, client=None, on_cart_change: Optional[Callable[[Cart], None]] = None):
        self.client = client or ShopApiClient()
        self.catalog = CatalogStore(self.client)
        self.cart = Cart(self.catalog, on_change=on_cart_change)
        self.checkout_service = CheckoutService(self.client)

    def _run(self, action: str, handler: Callable[[], Notice], failure: Optional[str] = None) -> Notice:
        try:
            return handler()
        except ShopError as e:
            logger.warning(f"{action} failed: {e.message}")
            return Notice(ok=False, message=failure or e.message)

    def open(self) -> Notice:
        def load():
            products = self.catalog.load()
            return Notice(ok=True, message=f"{len(products)} products available.", value=products)

        return self._run("catalog load", load, failure=self.LOAD_FAILED)

    def add_to_cart(self, product_id) -> Notice:
        line = self.cart.add(product_id)
        if line is None:
            return Notice(ok=False, message=f"Product {product_id} is not in the catalog.")
        return Notice(ok=True, message=f"Added {line.product.name}.", value=line)

    def place_order(self, payment_method: str) -> Notice:
        if self.cart.is_empty:
            return Notice(ok=False, message=self.EMPTY_CART)

        def checkout():
            result = self.checkout_service.checkout(self.cart, payment_method)
            return Notice(
                ok=True,
                message=(
                    f"Order Confirmed! Order ID: {result.order_id}. "
                    "Thank you for shopping with Fit Bazaar."
                ),
                value=result,
            )

        return self._run("checkout", checkout)

    def register(self, email: str, password: str) -> Notice:
        def register():
            email_, password_ = self._credentials(email, password)
            return Notice(ok=True, message=self.client.register(email_, password_))

        return self._run("register", register)

    def login(self, email: str, password: str) -> Notice:
        def login():
            email_, password_ = self._credentials(email, password)
            return Notice(ok=True, message=self.client.login(email_, password_))

        return self._run("login", login)

    def apply_seller(self, boutique_name: str, trade_license: str, description: str) -> Notice:
        def apply():
            fields = [(value or "").strip() for value in (boutique_name, trade_license, description)]
            if not all(fields):
                raise ValidationError("Please fill in all fields to apply.")
            application_id = self.client.apply_seller(*fields)
            return Notice(
                ok=True,
                message=f"Application Submitted! Your ID: {application_id}",
                value=application_id,
            )

        return self._run("seller application", apply)

    @staticmethod
    def _credentials(email, password):
        email = (email or "").strip()
        password = (password or "").strip()
        if not email or not password:
            raise ValidationError("Please fill in both fields.")
        return email, password

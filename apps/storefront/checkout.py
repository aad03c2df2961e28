import logging
import threading
from dataclasses import dataclass
from typing import Tuple

from apps.utils.exceptions import ConflictError, ValidationError
from .cart import Cart

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    order_id: object
    total: int
    items: Tuple[dict, ...]


class CheckoutService:
    """
    Turns a cart into a placed order through the API.

    One checkout at a time per service: a second call while one is in
    flight fails with ConflictError instead of posting a duplicate order.
    The cart is cleared only after the store confirms the order.
    """

    def __init__(self, client):
        self.client = client
        self._lock = threading.Lock()

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    def checkout(self, cart: Cart, payment_method: str) -> CheckoutResult:
        if cart.is_empty:
            raise ValidationError("empty cart")

        payment_method = (payment_method or "").strip()
        if not payment_method:
            raise ValidationError("Please choose a payment method.")

        if not self._lock.acquire(blocking=False):
            raise ConflictError("checkout already in progress")

        try:
            items = cart.snapshot()
            total = cart.total()
            payload = {"items": items, "total": total, "payment": payment_method}

            # Raises on any failure; the cart stays as it was for a manual retry
            order_id = self.client.create_order(payload)

            cart.clear()
        finally:
            self._lock.release()

        logger.info(f"Checkout complete: order {order_id}, {len(items)} items, total={total}")
        return CheckoutResult(order_id=order_id, total=total, items=tuple(items))

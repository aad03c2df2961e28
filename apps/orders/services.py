import logging
from django.db import transaction, DatabaseError

from apps.catalog.models import Product
from apps.utils.exceptions import StorageError, ValidationError
from .models import Order

logger = logging.getLogger(__name__)


class OrderService:

    @staticmethod
    def build_snapshot(product_ids: list) -> list:
        """
        Authoritative copy of each line from the products table,
        in cart order with duplicates kept.
        """
        try:
            products = Product.objects.in_bulk(set(product_ids))
        except DatabaseError as e:
            logger.error(f"Product lookup failed: {e}")
            raise StorageError("Could not place order.") from e

        snapshot = []
        for product_id in product_ids:
            product = products.get(product_id)
            if product is None:
                raise ValidationError(f"Product {product_id} is no longer available.")
            snapshot.append(product.as_snapshot())
        return snapshot

    @staticmethod
    def place_order(items: list, total: int, payment_method: str) -> Order:
        """
        Secure Order Creation:
        1. Reject empty carts and blank payment methods
        2. Re-price every line from the products table (prevents price tampering)
        3. Reject a client total that disagrees with the server total
        4. Insert the order (single-row, atomic)
        """
        if not items:
            raise ValidationError("Cart is empty.")

        payment_method = (payment_method or "").strip()
        if not payment_method:
            raise ValidationError("Payment method is required.")

        product_ids = [item["id"] for item in items]
        snapshot = OrderService.build_snapshot(product_ids)

        # TRUSTED PRICE CALCULATION
        computed_total = sum(line["price"] for line in snapshot)
        if total != computed_total:
            logger.warning(
                f"Order rejected: client total {total} != server total {computed_total}"
            )
            raise ValidationError("Order total does not match current prices.")

        try:
            with transaction.atomic():
                order = Order.objects.create(
                    items=snapshot,
                    total=computed_total,
                    payment_method=payment_method,
                )
        except DatabaseError as e:
            logger.error(f"Order insert failed: {e}")
            raise StorageError("Could not place order.") from e

        logger.info(
            f"Order placed: {len(snapshot)} items, total={computed_total}",
            extra={"order_id": order.id},
        )
        return order

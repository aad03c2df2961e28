import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .catalog import CatalogStore, Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartLine:
    product: Product

    @property
    def price(self) -> int:
        return self.product.price


class Cart:
    """
    Session-local ordered list of lines. Adding the same product twice
    appends two lines; there is no remove or quantity edit.
    """

    def __init__(self, catalog: CatalogStore, on_change: Optional[Callable[["Cart"], None]] = None):
        self.catalog = catalog
        self.on_change = on_change
        self._lines: List[CartLine] = []

    def add(self, product_id) -> Optional[CartLine]:
        product = self.catalog.get(product_id)
        if product is None:
            logger.debug(f"Ignoring add for unknown product {product_id}")
            return None

        line = CartLine(product=product)
        self._lines.append(line)
        self._changed()
        return line

    def clear(self) -> None:
        self._lines = []
        self._changed()

    def total(self) -> int:
        return sum(line.price for line in self._lines)

    def snapshot(self) -> list:
        """Independent copy of the lines as order item payloads."""
        return [line.product.to_payload() for line in self._lines]

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self):
        return len(self._lines)

    def __iter__(self):
        return iter(list(self._lines))

    def _changed(self):
        if self.on_change is not None:
            self.on_change(self)

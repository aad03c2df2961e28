import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from apps.utils.exceptions import FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: int
    image: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict) -> "Product":
        try:
            product_id, price = data["id"], data["price"]
            product = cls(
                id=product_id,
                name=str(data["name"]),
                price=price,
                image=data.get("image"),
                description=data.get("description"),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise FetchError(f"Malformed product in catalog: {data!r}") from e

        # Whole taka only; a float or bool here would drift from the server total
        for value in (product_id, price):
            if isinstance(value, bool) or not isinstance(value, int):
                raise FetchError(f"Malformed product in catalog: {data!r}")
        if product.price < 0:
            raise FetchError(f"Negative price for product {product.id}")
        return product

    def to_payload(self) -> dict:
        return asdict(self)


class CatalogStore:
    """
    The full product list, loaded in one request. No pagination,
    filtering or sorting; no cached fallback when a load fails.
    """

    def __init__(self, client):
        self.client = client
        self._products: List[Product] = []
        self._by_id: Dict[int, Product] = {}

    def load(self) -> List[Product]:
        self._products = []
        self._by_id = {}

        payload = self.client.list_products()
        products = [Product.from_payload(item) for item in payload]

        self._products = products
        self._by_id = {product.id: product for product in products}
        logger.info(f"Catalog loaded: {len(products)} products")
        return list(products)

    def get(self, product_id) -> Optional[Product]:
        return self._by_id.get(product_id)

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    def __len__(self):
        return len(self._products)

    def __iter__(self):
        return iter(self._products)

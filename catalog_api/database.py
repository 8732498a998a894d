import uuid
from typing import Iterable, List, Optional

from .models import Product, ProductIn

# This file holds the in-memory product store. Records live only for the
# lifetime of the process.

SEED_PRODUCTS: List[ProductIn] = [
    ProductIn(
        name="Laptop",
        description="High-performance laptop for professionals",
        price=1299.99,
        category="Electronics",
        in_stock=True,
    ),
    ProductIn(
        name="Desk Chair",
        description="Ergonomic office chair",
        price=299.99,
        category="Furniture",
        in_stock=True,
    ),
    ProductIn(
        name="Coffee Maker",
        description="Automatic drip coffee maker",
        price=79.99,
        category="Appliances",
        in_stock=False,
    ),
]


class ProductStore:
    """Insertion-ordered collection of products.

    Mutations never await, so on a single event loop no two of them can
    interleave and no lock is taken.
    """

    def __init__(self, seed: Optional[Iterable[ProductIn]] = None):
        self._products: List[Product] = []
        for payload in seed or ():
            self.append(payload)

    def __len__(self) -> int:
        return len(self._products)

    def append(self, payload: ProductIn) -> Product:
        # ids are always generated here, whatever the caller sent
        product = Product(id=uuid.uuid4().hex, **payload.model_dump())
        self._products.append(product)
        return product

    def find_by_id(self, product_id: str) -> Optional[Product]:
        index = self.find_index_by_id(product_id)
        return None if index is None else self._products[index]

    def find_index_by_id(self, product_id: str) -> Optional[int]:
        for i, p in enumerate(self._products):
            if p.id == product_id:
                return i
        return None

    def replace_at(self, index: int, payload: ProductIn) -> Product:
        current = self._products[index]
        product = Product(id=current.id, **payload.model_dump())
        self._products[index] = product
        return product

    def remove_at(self, index: int) -> Product:
        return self._products.pop(index)

    def all(self) -> List[Product]:
        return list(self._products)

    def reset(self, seed: Optional[Iterable[ProductIn]] = None) -> None:
        self._products.clear()
        for payload in seed or ():
            self.append(payload)


STORE = ProductStore(SEED_PRODUCTS)


def get_store() -> ProductStore:
    return STORE

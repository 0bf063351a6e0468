"""Product catalog port.

The catalog is owned by another service. Checkout only needs the canonical
record for a product id, and absence is an answer, not an error.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ProductRecord:
    """Canonical product data as the catalog currently publishes it."""

    id: str
    name: str
    price: float
    picture_url: str | None = None
    brand: str | None = None
    type: str | None = None


class ProductCatalog(ABC):
    """Abstract product catalog interface."""

    @abstractmethod
    def get_product(self, product_id: str) -> ProductRecord | None:
        """Return the current record for ``product_id``, or ``None`` if it does not exist."""
        ...

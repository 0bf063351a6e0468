"""PricingValidator: re-derive item prices from the catalog before charging.

Cart prices are snapshots the client may have cached from a stale page. Before
a payment intent is priced, every item is looked up in the catalog: a changed
price silently overwrites the snapshot, a missing product is reported back so
the caller can refuse the checkout. Items are never dropped.
"""

from dataclasses import dataclass, field

import structlog

from checkout.cart.cart import Cart
from checkout.catalog import get_catalog
from checkout.catalog.port import ProductCatalog
from checkout.errors import ProductUnavailable

logger = structlog.get_logger(__name__)


@dataclass
class PricingResult:
    repriced: list[str] = field(default_factory=list)
    unavailable: list[str] = field(default_factory=list)

    @property
    def dirty(self) -> bool:
        """True when the cart changed and must be written back to the store."""
        return bool(self.repriced)

    def ensure_available(self) -> None:
        if self.unavailable:
            raise ProductUnavailable(self.unavailable[0])


def validate_prices(cart: Cart, catalog: ProductCatalog | None = None) -> PricingResult:
    """Reprice ``cart`` in place against the catalog."""
    catalog = catalog or get_catalog()
    result = PricingResult()

    for item in cart.items:
        product_id = str(item.product_id)
        product = catalog.get_product(product_id)
        if product is None:
            result.unavailable.append(product_id)
            continue

        previous = item.price
        if cart.reprice_item(product_id, product.price):
            result.repriced.append(product_id)
            logger.info(
                "pricing.snapshot_corrected",
                cart_id=str(cart.id),
                product_id=product_id,
                cart_price=previous,
                catalog_price=product.price,
            )

    return result

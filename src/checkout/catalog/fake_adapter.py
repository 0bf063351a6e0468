"""In-memory product catalog for development and testing."""

from checkout.catalog.port import ProductCatalog, ProductRecord


class FakeProductCatalog(ProductCatalog):
    """Catalog backed by a dict. Seed it with ``add`` and reprice with ``set_price``."""

    def __init__(self) -> None:
        self.products: dict[str, ProductRecord] = {}
        self.lookups: list[str] = []

    def add(
        self,
        product_id: str,
        name: str,
        price: float,
        picture_url: str | None = None,
        brand: str | None = None,
        type: str | None = None,
    ) -> ProductRecord:
        record = ProductRecord(
            id=str(product_id),
            name=name,
            price=price,
            picture_url=picture_url,
            brand=brand,
            type=type,
        )
        self.products[record.id] = record
        return record

    def set_price(self, product_id: str, price: float) -> None:
        current = self.products[str(product_id)]
        self.products[current.id] = ProductRecord(
            id=current.id,
            name=current.name,
            price=price,
            picture_url=current.picture_url,
            brand=current.brand,
            type=current.type,
        )

    def remove(self, product_id: str) -> None:
        self.products.pop(str(product_id), None)

    def get_product(self, product_id: str) -> ProductRecord | None:
        self.lookups.append(str(product_id))
        return self.products.get(str(product_id))

    def reset(self) -> None:
        self.products.clear()
        self.lookups.clear()

"""Product catalog factory.

Provides get_catalog() / set_catalog() so the catalog service client can be
swapped in production and replaced by a seeded fake in tests.
"""

from checkout.catalog.port import ProductCatalog

_current_catalog: ProductCatalog | None = None


def get_catalog() -> ProductCatalog:
    """Return the current product catalog. Defaults to FakeProductCatalog."""
    global _current_catalog
    if _current_catalog is None:
        from checkout.catalog.fake_adapter import FakeProductCatalog

        _current_catalog = FakeProductCatalog()
    return _current_catalog


def set_catalog(catalog: ProductCatalog) -> None:
    """Override the active product catalog."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the default catalog."""
    global _current_catalog
    _current_catalog = None

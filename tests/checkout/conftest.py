import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    from checkout.cart.store import CartSnapshot
    from checkout.catalog import reset_catalog
    from checkout.notification import reset_registry
    from checkout.processor import reset_processor
    from protean import current_domain

    with checkout_bed.domain_context():
        yield
        # Providers are reset by the test bed; the cart cache is not
        current_domain.cache_for(CartSnapshot).flush_all()

    reset_processor()
    reset_catalog()
    reset_registry()


@pytest.fixture()
def processor():
    from checkout.processor import set_processor
    from checkout.processor.fake_adapter import FakePaymentProcessor

    fake = FakePaymentProcessor(webhook_secret="whsec_test")
    set_processor(fake)
    return fake


@pytest.fixture()
def catalog():
    from checkout.catalog import set_catalog
    from checkout.catalog.fake_adapter import FakeProductCatalog

    fake = FakeProductCatalog()
    fake.add("prod-001", "Trail Runner", 10.00, picture_url="/images/trail.png", brand="Acme", type="Shoes")
    fake.add("prod-002", "Wool Socks", 5.00, picture_url="/images/socks.png", brand="Acme", type="Socks")
    set_catalog(fake)
    return fake


@pytest.fixture()
def registry():
    from checkout.notification import set_registry
    from checkout.notification.registry import InMemoryConnectionRegistry

    fresh = InMemoryConnectionRegistry()
    set_registry(fresh)
    return fresh


@pytest.fixture()
def delivery_methods():
    """Standard delivery methods keyed by short name (UPS2 costs 5.00)."""
    from checkout.delivery.delivery_method import seed_delivery_methods

    return {method.short_name: method for method in seed_delivery_methods()}


class RecordingConnection:
    """Stand-in for a live socket: keeps what was pushed to it."""

    def __init__(self, fail=False):
        self.messages = []
        self.fail = fail

    def send(self, message):
        if self.fail:
            raise ConnectionError("socket closed")
        self.messages.append(message)


@pytest.fixture()
def connection(registry):
    conn = RecordingConnection()
    registry.register("buyer@example.com", conn)
    return conn

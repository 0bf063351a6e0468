"""Delivery methods offered at checkout."""

from protean.fields import Float, String
from protean.utils.globals import current_domain

from checkout.domain import checkout

STANDARD_DELIVERY_METHODS = [
    {"short_name": "UPS1", "delivery_time": "1-2 Days", "description": "Fastest delivery time", "price": 10.0},
    {"short_name": "UPS2", "delivery_time": "2-5 Days", "description": "Get it within 5 days", "price": 5.0},
    {"short_name": "UPS3", "delivery_time": "5-10 Days", "description": "Slower but cheap", "price": 2.0},
    {"short_name": "FREE", "delivery_time": "1-2 Weeks", "description": "Free! You get what you pay for", "price": 0.0},
]


@checkout.aggregate
class DeliveryMethod:
    short_name = String(required=True, max_length=50)
    delivery_time = String(max_length=50)
    description = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)


@checkout.repository(part_of=DeliveryMethod)
class DeliveryMethodRepository:
    def find(self, delivery_method_id) -> DeliveryMethod | None:
        """Return the delivery method, or None when the reference is stale."""
        if not delivery_method_id:
            return None
        results = self._dao.query.filter(id=str(delivery_method_id)).all().items
        return results[0] if results else None

    def list_all(self) -> list[DeliveryMethod]:
        return self._dao.query.order_by("-price").all().items


def seed_delivery_methods() -> list[DeliveryMethod]:
    """Install the standard delivery methods if none exist yet."""
    repo = current_domain.repository_for(DeliveryMethod)
    existing = repo.list_all()
    if existing:
        return existing

    methods = [DeliveryMethod(**data) for data in STANDARD_DELIVERY_METHODS]
    for method in methods:
        repo.add(method)
    return methods

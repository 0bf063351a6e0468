"""Minor-unit money arithmetic shared by the intent coordinator, order and webhook.

Prices travel as floats in major units (dollars) because that is what the
catalog and the client send. Every amount that is summed, compared or sent to
the payment processor is first converted to integer minor units (cents).
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

MINOR_UNITS_PER_MAJOR = 100


def to_minor(amount: float | int | None) -> int:
    """Convert a major-unit amount to integer minor units, rounding half up."""
    if amount is None:
        return 0
    cents = Decimal(str(amount)) * MINOR_UNITS_PER_MAJOR
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major(amount_minor: int) -> float:
    return float(Decimal(amount_minor) / MINOR_UNITS_PER_MAJOR)


def subtotal_minor(lines) -> int:
    """Sum of unit price x quantity over ``(price, quantity)`` pairs, in minor units.

    Each unit price is converted before multiplication so the result does not
    depend on the order of the lines.
    """
    return sum(to_minor(price) * int(quantity) for price, quantity in lines)


def discount_minor(subtotal: int, amount_off: float | None = None, percent_off: float | None = None) -> int:
    """Discount for a coupon, clamped to ``[0, subtotal]``.

    A fixed ``amount_off`` (major units) takes precedence over ``percent_off``.
    """
    if amount_off:
        discount = to_minor(amount_off)
    elif percent_off:
        raw = Decimal(subtotal) * Decimal(str(percent_off)) / Decimal(100)
        discount = int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    else:
        discount = 0
    return max(0, min(discount, subtotal))


@dataclass(frozen=True)
class Totals:
    """A priced checkout, all amounts in minor units."""

    subtotal: int
    shipping: int
    discount: int

    @property
    def total(self) -> int:
        return self.subtotal + self.shipping - self.discount

"""Checkout bounded context: cart pricing, payment intents and order reconciliation.

Carts live in a volatile cache, orders live in the durable ledger, and the
authoritative payment outcome arrives asynchronously from the payment
processor's webhook. Settled orders are pushed to the buyer in real time.
"""

from protean.domain import Domain

from checkout.utils.logging import configure_logging

configure_logging(log_dir="logs", log_file_prefix="checkout")

checkout = Domain(name="checkout")

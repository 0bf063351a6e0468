"""ShopStream Checkout database management CLI.

Usage:
    python src/manage.py setup-db   # Create ledger tables
    python src/manage.py drop-db    # Drop ledger tables
    python src/manage.py seed       # Install the standard delivery methods
"""

import argparse
import sys


def _domain():
    from checkout.domain import checkout

    print("Initializing checkout domain...")
    checkout.init()
    return checkout


def setup_database():
    """Create the order ledger schema."""
    from checkout.utils.db import setup_db

    domain = _domain()
    print("Creating checkout database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop the order ledger schema."""
    from checkout.utils.db import drop_db

    domain = _domain()
    print("Dropping checkout database schema...")
    drop_db(domain)
    print("Done.")


def seed():
    """Install the standard delivery methods if the ledger has none."""
    from checkout.delivery.delivery_method import seed_delivery_methods

    domain = _domain()
    with domain.domain_context():
        methods = seed_delivery_methods()
    print(f"{len(methods)} delivery methods available.")


def main():
    parser = argparse.ArgumentParser(description="ShopStream Checkout database management")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("setup-db", help="Create ledger tables")
    subparsers.add_parser("drop-db", help="Drop ledger tables")
    subparsers.add_parser("seed", help="Install the standard delivery methods")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

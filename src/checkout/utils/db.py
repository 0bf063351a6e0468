"""Schema management for the order ledger.

Only relational providers get tables. The cart never touches them: it is
stored in the cache and its aggregate is bound to the in-memory provider.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

RELATIONAL_PROVIDERS = ("sqlite", "postgresql")


def _relational_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in RELATIONAL_PROVIDERS:
            yield name, provider


def setup_db(domain: Domain) -> None:
    """Create ledger tables for every relational provider."""
    with domain.domain_context():
        for name, provider in _relational_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching `_dao` forces the model to be built and registered on
            # the provider's SQLAlchemy metadata.
            records = [
                *domain.registry.aggregates.values(),
                *domain.registry.entities.values(),
            ]
            for record in records:
                if record.cls.meta_.provider == name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)


def drop_db(domain: Domain) -> None:
    """Drop ledger tables for every relational provider."""
    with domain.domain_context():
        for _, provider in _relational_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)

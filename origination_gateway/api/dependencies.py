"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache
from origination_gateway.config import settings
from origination_gateway.infrastructure.store.base import ApplicationStore
from origination_gateway.infrastructure.store.memory import InMemoryApplicationStore
from origination_gateway.infrastructure.store.sql import SqlApplicationStore
from origination_gateway.infrastructure.database.session import create_db_engine, create_session_factory, init_db
from origination_gateway.services.origination import OriginationService


def build_store() -> ApplicationStore:
    """Store backend selected by settings.store_backend"""
    if settings.store_backend == "sql":
        engine = create_db_engine(settings.database_url)
        init_db(engine)
        return SqlApplicationStore(create_session_factory(engine))
    return InMemoryApplicationStore()


@lru_cache(maxsize=1)
def get_origination_service() -> OriginationService:
    """Process-wide service; the store must outlive individual requests"""
    return OriginationService(
        build_store(),
        card_issuer_prefix=settings.card_issuer_prefix,
        card_validity_years=settings.card_validity_years,
    )

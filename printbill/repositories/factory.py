import logging

from printbill.repositories.base import BillRepository
from printbill.repositories.memory import InMemoryBillRepository
from printbill.settings import settings

logger = logging.getLogger(__name__)

_memory_repository: InMemoryBillRepository | None = None


def uses_sql_backend() -> bool:
    if settings.repository_backend == "sql":
        if settings.db_url:
            return True
        logger.warning("PRINTBILL_DB_URL is not set, falling back to the local bill store")
        return False
    if settings.repository_backend != "memory":
        raise ValueError(f"Unsupported repository backend: {settings.repository_backend}")
    return False


def get_memory_repository() -> InMemoryBillRepository:
    """Return the process-wide local store, creating it on first use."""
    global _memory_repository
    if _memory_repository is None:
        path = settings.memory_store_path or None
        _memory_repository = InMemoryBillRepository(path)
        logger.info("Using repository backend: memory path=%s", path or "-")
    return _memory_repository


def get_bill_repository() -> BillRepository:
    if uses_sql_backend():
        from printbill.db import get_connection
        from printbill.repositories.sqlalchemy import SQLAlchemyBillRepository

        return SQLAlchemyBillRepository(get_connection())
    return get_memory_repository()

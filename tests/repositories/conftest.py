import pytest
from sqlalchemy import Connection

from printbill.repositories.memory import InMemoryBillRepository
from printbill.repositories.sqlalchemy import SQLAlchemyBillRepository


@pytest.fixture()
def sql_repo(db_connection: Connection) -> SQLAlchemyBillRepository:
    return SQLAlchemyBillRepository(db_connection)


@pytest.fixture()
def memory_repo() -> InMemoryBillRepository:
    return InMemoryBillRepository()


@pytest.fixture(params=["memory", "sql"])
def bill_repo(request):
    """Every repository implementation, for behaviour both must share."""
    return request.getfixturevalue(f"{request.param}_repo")

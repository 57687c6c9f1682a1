from __future__ import annotations

import logging

from fastapi import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from printbill.db import get_engine
from printbill.repositories.base import BillRepository
from printbill.repositories.factory import get_memory_repository, uses_sql_backend
from printbill.repositories.sqlalchemy import SQLAlchemyBillRepository
from printbill.services.bill_service import BillService
from printbill.storage.assets import AssetStore
from printbill.storage.base import StorageBackend
from printbill.storage.factory import get_storage

logger = logging.getLogger(__name__)


class DBConnectionMiddleware:
    """Closes the request's database connection, if one was opened, once the response is sent."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request):
    # Requests served from the memory store never open one.
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def get_bill_repository(request: Request) -> BillRepository:
    if uses_sql_backend():
        return SQLAlchemyBillRepository(_get_conn(request))
    return get_memory_repository()


def get_file_storage() -> StorageBackend:
    return get_storage()


def get_bill_service(request: Request) -> BillService:
    return BillService(get_bill_repository(request), AssetStore(get_file_storage()))

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import InterfaceError, OperationalError

from printbill.constants import UTC
from printbill.errors import BackendUnavailableError, BillNotFoundError
from printbill.models import from_paise, to_paise
from printbill.models.bill import Bill, BillDraft, BillPatch
from printbill.repositories.base import BillRepository

logger = logging.getLogger(__name__)

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def _now() -> datetime:
    return datetime.now(UTC)


def _to_db_timestamp(value: datetime) -> str:
    """Naive UTC text, sortable and accepted by SQLite, MySQL and PostgreSQL."""
    return value.astimezone(UTC).replace(tzinfo=None).strftime(_TIMESTAMP_FORMAT)


def _from_db_timestamp(value: datetime | str) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def _escape_like(term: str) -> str:
    return term.replace("!", "!!").replace("%", "!%").replace("_", "!_")


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @contextmanager
    def _backend(self, operation: str, bill_id: str = "") -> Iterator[None]:
        try:
            yield
        except (OperationalError, InterfaceError) as exc:
            logger.error("Database error during %s (bill=%s): %s", operation, bill_id or "-", exc)
            if self.conn.in_transaction():
                self.conn.rollback()
            raise BackendUnavailableError(f"Database unavailable during {operation}") from exc

    @staticmethod
    def _build_bill(row: RowMapping) -> Bill:
        return Bill(
            id=row["id"],
            customer_name=row["customer_name"],
            print_name=row["print_name"],
            quantity=row["quantity"],
            price_per_piece=from_paise(row["price_per_piece"]),
            logo_url=row["logo_url"],
            pdf_url=row["pdf_url"],
            created_at=_from_db_timestamp(row["created_at"]),
        )

    def _fetch(self, bill_id: str) -> Bill:
        row = (
            self.conn.execute(
                text("SELECT * FROM bills WHERE id = :id"),
                {"id": bill_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            raise BillNotFoundError(bill_id)
        return self._build_bill(row)

    def list_all(self) -> list[Bill]:
        with self._backend("list"):
            rows = (
                self.conn.execute(text("SELECT * FROM bills ORDER BY created_at DESC, id DESC"))
                .mappings()
                .fetchall()
            )
        return [self._build_bill(row) for row in rows]

    def get_by_id(self, bill_id: str) -> Bill:
        with self._backend("get", bill_id):
            return self._fetch(bill_id)

    def search(self, term: str) -> list[Bill]:
        if not term.strip():
            return self.list_all()
        pattern = f"%{_escape_like(term.strip().lower())}%"
        with self._backend("search"):
            rows = (
                self.conn.execute(
                    text(
                        "SELECT * FROM bills "
                        "WHERE LOWER(customer_name) LIKE :pattern ESCAPE '!' "
                        "OR LOWER(print_name) LIKE :pattern ESCAPE '!' "
                        "ORDER BY created_at DESC, id DESC"
                    ),
                    {"pattern": pattern},
                )
                .mappings()
                .fetchall()
            )
        return [self._build_bill(row) for row in rows]

    def create(self, draft: BillDraft) -> Bill:
        bill_id = str(uuid.uuid4())
        now = _to_db_timestamp(_now())
        with self._backend("create", bill_id):
            self.conn.execute(
                text(
                    "INSERT INTO bills (id, customer_name, print_name, quantity, price_per_piece, "
                    "total_amount, logo_url, pdf_url, created_at, updated_at) "
                    "VALUES (:id, :customer_name, :print_name, :quantity, :price_per_piece, "
                    ":total_amount, :logo_url, :pdf_url, :created_at, :updated_at)"
                ),
                {
                    "id": bill_id,
                    "customer_name": draft.customer_name,
                    "print_name": draft.print_name,
                    "quantity": draft.quantity,
                    "price_per_piece": to_paise(draft.price_per_piece),
                    "total_amount": to_paise(draft.total_amount),
                    "logo_url": draft.logo_url,
                    "pdf_url": draft.pdf_url,
                    "created_at": now,
                    "updated_at": now,
                },
            )
            self.conn.commit()
            return self._fetch(bill_id)

    def update(self, bill_id: str, patch: BillPatch) -> Bill:
        with self._backend("update", bill_id):
            current = self._fetch(bill_id)
            merged = patch.apply_to(current)
            self.conn.execute(
                text(
                    "UPDATE bills SET customer_name = :customer_name, print_name = :print_name, "
                    "quantity = :quantity, price_per_piece = :price_per_piece, "
                    "total_amount = :total_amount, logo_url = :logo_url, pdf_url = :pdf_url, "
                    "updated_at = :updated_at WHERE id = :id"
                ),
                {
                    "customer_name": merged.customer_name,
                    "print_name": merged.print_name,
                    "quantity": merged.quantity,
                    "price_per_piece": to_paise(merged.price_per_piece),
                    "total_amount": to_paise(merged.total_amount),
                    "logo_url": merged.logo_url,
                    "pdf_url": merged.pdf_url,
                    "updated_at": _to_db_timestamp(_now()),
                    "id": bill_id,
                },
            )
            self.conn.commit()
            return self._fetch(bill_id)

    def delete(self, bill_id: str) -> bool:
        with self._backend("delete", bill_id):
            result = self.conn.execute(text("DELETE FROM bills WHERE id = :id"), {"id": bill_id})
            self.conn.commit()
        if result.rowcount == 0:
            raise BillNotFoundError(bill_id)
        return True

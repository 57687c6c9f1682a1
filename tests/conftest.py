"""Root conftest: in-memory SQLite engine and sample bill fixtures."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from io import BytesIO

import pytest
from PIL import Image
from sqlalchemy import Connection, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from printbill.models.bill import Bill, BillDraft

# Matches Alembic head: 3f1c9a7e5b20 (create bills)
SCHEMA_DDL = """
CREATE TABLE bills (
    id VARCHAR(36) PRIMARY KEY,
    customer_name VARCHAR(255) NOT NULL,
    print_name VARCHAR(255) NOT NULL,
    quantity INTEGER NOT NULL,
    price_per_piece BIGINT NOT NULL,
    total_amount BIGINT NOT NULL,
    logo_url TEXT,
    pdf_url TEXT,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE INDEX ix_bills_created_at ON bills (created_at);
"""


def apply_schema(engine: Engine) -> None:
    with engine.connect() as conn:
        for statement in SCHEMA_DDL.strip().split(";"):
            stmt = statement.strip()
            if stmt:
                conn.execute(text(stmt))
        conn.commit()


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    apply_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    yield conn
    conn.close()


def _sample_draft(**overrides) -> BillDraft:
    defaults = dict(
        customer_name="Acme Corp",
        print_name="Logo Design 1",
        quantity=100,
        price_per_piece=Decimal("2.50"),
    )
    defaults.update(overrides)
    return BillDraft(**defaults)


def _sample_bill(**overrides) -> Bill:
    defaults = dict(
        id="3b9f2c4e-8d1a-4f6b-9c2e-7a5d1e0f4b33",
        customer_name="Acme Corp",
        print_name="Logo Design 1",
        quantity=100,
        price_per_piece=Decimal("2.50"),
        created_at=datetime(2025, 3, 10, 20, 0, tzinfo=timezone.utc),
    )
    defaults.update(overrides)
    return Bill(**defaults)


def _png_bytes(width: int = 200, height: int = 100, mode: str = "RGB") -> bytes:
    buf = BytesIO()
    Image.new(mode, (width, height), "red" if mode == "RGB" else None).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def sample_draft():
    return _sample_draft


@pytest.fixture()
def sample_bill():
    return _sample_bill


@pytest.fixture()
def png_bytes():
    return _png_bytes

"""Web test fixtures: TestClient over a shared in-memory SQLite engine or the local store."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import web.deps as deps_module
from printbill.repositories.memory import InMemoryBillRepository
from printbill.storage.local import LocalStorage
from web.app import app

PUBLIC_BASE_URL = "http://testserver/files"


@pytest.fixture()
def file_storage(tmp_path, monkeypatch) -> LocalStorage:
    storage = LocalStorage(str(tmp_path / "assets"), public_base_url=PUBLIC_BASE_URL)
    monkeypatch.setattr(deps_module, "get_storage", lambda: storage)
    return storage


@pytest.fixture()
def client(db_engine, file_storage, monkeypatch):
    """TestClient backed by the SQL repository."""
    monkeypatch.setattr(deps_module, "uses_sql_backend", lambda: True)
    monkeypatch.setattr(deps_module, "get_engine", lambda: db_engine)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def memory_repo(monkeypatch) -> InMemoryBillRepository:
    repo = InMemoryBillRepository()
    monkeypatch.setattr(deps_module, "uses_sql_backend", lambda: False)
    monkeypatch.setattr(deps_module, "get_memory_repository", lambda: repo)
    return repo


@pytest.fixture()
def memory_client(memory_repo, file_storage):
    """TestClient backed by the local bill store."""
    return TestClient(app, raise_server_exceptions=False)


BILL_FORM = {
    "customer_name": "Acme Corp",
    "print_name": "Logo Design 1",
    "quantity": "100",
    "price_per_piece": "2.50",
}


def create_bill_via_api(client: TestClient, **overrides) -> dict:
    data = dict(BILL_FORM)
    data.update(overrides)
    response = client.post("/bills", data=data)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
def create_bill():
    return create_bill_via_api

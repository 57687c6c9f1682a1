from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from printbill.errors import BackendUnavailableError, BillNotFoundError, FormValidationError
from printbill.models.bill import BillPatch


def _create_at(bill_repo, sample_draft, when: datetime, **overrides):
    with freeze_time(when):
        return bill_repo.create(sample_draft(**overrides))


class TestBillRepoCRUD:
    def test_create_and_get(self, bill_repo, sample_draft):
        created = bill_repo.create(sample_draft())

        assert created.id
        assert created.created_at.tzinfo is not None
        assert created.customer_name == "Acme Corp"
        assert created.total_amount == Decimal("250.00")

        fetched = bill_repo.get_by_id(created.id)
        assert fetched == created

    def test_ids_are_unique(self, bill_repo, sample_draft):
        ids = {bill_repo.create(sample_draft()).id for _ in range(5)}
        assert len(ids) == 5

    def test_get_by_id_not_found(self, bill_repo):
        with pytest.raises(BillNotFoundError) as exc_info:
            bill_repo.get_by_id("missing")
        assert exc_info.value.bill_id == "missing"

    def test_created_first_in_list(self, bill_repo, sample_draft):
        _create_at(bill_repo, sample_draft, datetime(2025, 1, 1, tzinfo=timezone.utc), customer_name="Older")
        newest = bill_repo.create(sample_draft(customer_name="Newer"))
        assert bill_repo.list_all()[0].id == newest.id

    def test_list_newest_first(self, bill_repo, sample_draft):
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        a = _create_at(bill_repo, sample_draft, base, customer_name="First")
        c = _create_at(bill_repo, sample_draft, base + timedelta(days=2), customer_name="Third")
        b = _create_at(bill_repo, sample_draft, base + timedelta(days=1), customer_name="Second")

        assert [bill.id for bill in bill_repo.list_all()] == [c.id, b.id, a.id]

    def test_list_empty(self, bill_repo):
        assert bill_repo.list_all() == []

    def test_update_price_changes_total_only(self, bill_repo, sample_draft):
        created = bill_repo.create(sample_draft())
        updated = bill_repo.update(created.id, BillPatch(price_per_piece=Decimal("3.00")))

        assert updated.total_amount == Decimal("300.00")
        assert updated.customer_name == created.customer_name
        assert updated.print_name == created.print_name
        assert updated.quantity == created.quantity
        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert bill_repo.get_by_id(created.id) == updated

    def test_update_sets_and_clears_urls(self, bill_repo, sample_draft):
        created = bill_repo.create(sample_draft(logo_url="https://cdn/logo.png"))
        updated = bill_repo.update(created.id, BillPatch(pdf_url="https://cdn/a.pdf", logo_url=None))

        assert updated.pdf_url == "https://cdn/a.pdf"
        assert updated.logo_url is None

    def test_update_empty_patch_is_noop(self, bill_repo, sample_draft):
        created = bill_repo.create(sample_draft())
        assert bill_repo.update(created.id, BillPatch()) == created

    def test_update_cannot_clear_required_field(self, bill_repo, sample_draft):
        created = bill_repo.create(sample_draft())
        patch = BillPatch.model_construct(quantity=None, _fields_set={"quantity"})

        with pytest.raises(FormValidationError):
            bill_repo.update(created.id, patch)
        assert bill_repo.get_by_id(created.id) == created

    def test_update_not_found(self, bill_repo, sample_draft):
        existing = bill_repo.create(sample_draft())
        with pytest.raises(BillNotFoundError):
            bill_repo.update("missing", BillPatch(quantity=5))
        assert bill_repo.list_all() == [existing]

    def test_delete(self, bill_repo, sample_draft):
        created = bill_repo.create(sample_draft())
        assert bill_repo.delete(created.id) is True

        with pytest.raises(BillNotFoundError):
            bill_repo.get_by_id(created.id)
        assert bill_repo.list_all() == []

    def test_delete_not_found(self, bill_repo):
        with pytest.raises(BillNotFoundError):
            bill_repo.delete("missing")

    def test_returned_bills_are_copies(self, bill_repo, sample_draft):
        created = bill_repo.create(sample_draft())
        listed = bill_repo.list_all()[0]
        listed.customer_name = "Mutated"
        created.quantity = 1

        fetched = bill_repo.get_by_id(created.id)
        assert fetched.customer_name == "Acme Corp"
        assert fetched.quantity == 100


class TestBillRepoSearch:
    @pytest.fixture()
    def seeded(self, bill_repo, sample_draft):
        base = datetime(2025, 1, 1, tzinfo=timezone.utc)
        acme = _create_at(bill_repo, sample_draft, base, customer_name="Acme Corp", print_name="Logo Design 1")
        tech = _create_at(
            bill_repo, sample_draft, base + timedelta(hours=1), customer_name="TechStart", print_name="Startup Logo"
        )
        green = _create_at(
            bill_repo, sample_draft, base + timedelta(hours=2), customer_name="Green Leaf", print_name="Eco Design"
        )
        return acme, tech, green

    def test_empty_term_equals_list_all(self, bill_repo, seeded):
        assert bill_repo.search("") == bill_repo.list_all()
        assert bill_repo.search("   ") == bill_repo.list_all()

    def test_matches_customer_name(self, bill_repo, seeded):
        acme, _, _ = seeded
        assert [b.id for b in bill_repo.search("acme")] == [acme.id]

    def test_matches_print_name_case_insensitive(self, bill_repo, seeded):
        acme, tech, _ = seeded
        assert [b.id for b in bill_repo.search("LOGO")] == [tech.id, acme.id]

    def test_exact_subset_of_list_all(self, bill_repo, seeded):
        term = "design"
        expected = [b for b in bill_repo.list_all() if term in b.customer_name.lower() or term in b.print_name.lower()]
        assert bill_repo.search(term) == expected

    def test_idempotent(self, bill_repo, seeded):
        assert bill_repo.search("start") == bill_repo.search("start")

    def test_no_match(self, bill_repo, seeded):
        assert bill_repo.search("zzz") == []

    def test_wildcards_are_literal(self, bill_repo, sample_draft, seeded):
        percent = bill_repo.create(sample_draft(customer_name="100% Prints"))
        assert [b.id for b in bill_repo.search("%")] == [percent.id]
        assert bill_repo.search("_") == []


class TestSQLAlchemyBillRepo:
    def test_money_stored_as_paise(self, sql_repo, db_connection, sample_draft):
        from sqlalchemy import text

        created = sql_repo.create(sample_draft())
        row = db_connection.execute(
            text("SELECT price_per_piece, total_amount FROM bills WHERE id = :id"),
            {"id": created.id},
        ).fetchone()
        assert tuple(row) == (250, 25000)

    def test_driver_error_becomes_backend_unavailable(self):
        from sqlalchemy.exc import OperationalError

        from printbill.repositories.sqlalchemy import SQLAlchemyBillRepository

        conn = MagicMock()
        conn.execute.side_effect = OperationalError("SELECT", {}, Exception("server has gone away"))
        conn.in_transaction.return_value = True
        repo = SQLAlchemyBillRepository(conn)

        with pytest.raises(BackendUnavailableError):
            repo.list_all()
        conn.rollback.assert_called_once()

    def test_not_found_is_not_backend_error(self, sql_repo):
        with pytest.raises(BillNotFoundError):
            sql_repo.get_by_id("missing")

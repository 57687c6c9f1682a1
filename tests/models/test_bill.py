from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from printbill.errors import FormValidationError
from printbill.models.bill import Bill, BillDraft, BillPatch, compute_total


class TestComputeTotal:
    def test_basic(self):
        assert compute_total(100, Decimal("2.50")) == Decimal("250.00")

    def test_rounds_to_cents(self):
        assert compute_total(3, Decimal("0.35")) == Decimal("1.05")

    def test_large(self):
        assert compute_total(1000, Decimal("175")) == Decimal("175000.00")


class TestBillDraft:
    def test_total_amount_derived(self, sample_draft):
        draft = sample_draft()
        assert draft.total_amount == Decimal("250.00")

    def test_total_follows_inputs(self, sample_draft):
        draft = sample_draft(quantity=50, price_per_piece=Decimal("300"))
        assert draft.total_amount == Decimal("15000.00")

    def test_total_amount_not_settable(self, sample_draft):
        draft = sample_draft()
        with pytest.raises((AttributeError, ValueError)):
            draft.total_amount = Decimal("1")

    def test_total_amount_input_ignored(self):
        draft = BillDraft(
            customer_name="Acme Corp",
            print_name="Logo",
            quantity=2,
            price_per_piece=Decimal("5"),
            total_amount=Decimal("999"),
        )
        assert draft.total_amount == Decimal("10.00")

    def test_total_in_dump(self, sample_draft):
        assert sample_draft().model_dump()["total_amount"] == Decimal("250.00")

    def test_strips_whitespace(self, sample_draft):
        draft = sample_draft(customer_name="  Acme Corp  ")
        assert draft.customer_name == "Acme Corp"

    @pytest.mark.parametrize("name", ["", "A", "  A  "])
    def test_short_customer_name_rejected(self, sample_draft, name):
        with pytest.raises(ValidationError):
            sample_draft(customer_name=name)

    def test_short_print_name_rejected(self, sample_draft):
        with pytest.raises(ValidationError):
            sample_draft(print_name="x")

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_non_positive_quantity_rejected(self, sample_draft, quantity):
        with pytest.raises(ValidationError):
            sample_draft(quantity=quantity)

    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("-1")])
    def test_non_positive_price_rejected(self, sample_draft, price):
        with pytest.raises(ValidationError):
            sample_draft(price_per_piece=price)

    def test_three_decimal_price_rejected(self, sample_draft):
        with pytest.raises(ValidationError):
            sample_draft(price_per_piece=Decimal("2.555"))

    def test_logo_and_pdf_optional(self, sample_draft):
        draft = sample_draft()
        assert draft.logo_url is None
        assert draft.pdf_url is None


class TestBill:
    def test_invoice_number(self, sample_bill):
        bill = sample_bill()
        assert bill.invoice_number == "3b9f2c4e"
        assert bill.invoice_filename == "invoice-3b9f2c4e.pdf"

    def test_matches_case_insensitive(self, sample_bill):
        bill = sample_bill()
        assert bill.matches("acme")
        assert bill.matches("LOGO design")
        assert not bill.matches("techstart")

    def test_json_roundtrip_keeps_timestamp(self, sample_bill):
        bill = sample_bill()
        restored = Bill.model_validate_json(bill.model_dump_json())
        assert restored == bill
        assert restored.created_at == datetime(2025, 3, 10, 20, 0, tzinfo=timezone.utc)


class TestBillPatch:
    def test_changes_only_set_fields(self):
        patch = BillPatch(price_per_piece=Decimal("3"))
        assert patch.changes() == {"price_per_piece": Decimal("3")}

    def test_explicit_none_is_a_change(self):
        patch = BillPatch(logo_url=None)
        assert patch.changes() == {"logo_url": None}

    def test_touches_invoice(self):
        assert BillPatch(quantity=5).touches_invoice()
        assert BillPatch(logo_url="https://x/logo.png").touches_invoice()
        assert not BillPatch(customer_name="New Name").touches_invoice()
        assert not BillPatch(pdf_url="https://x/a.pdf").touches_invoice()

    def test_validates_fields(self):
        with pytest.raises(ValidationError):
            BillPatch(quantity=0)

    @pytest.mark.parametrize("field", ["customer_name", "print_name", "quantity", "price_per_piece"])
    def test_required_field_cannot_be_cleared(self, field):
        with pytest.raises(ValidationError) as exc_info:
            BillPatch(**{field: None})
        assert exc_info.value.errors()[0]["loc"] == (field,)

    def test_apply_to_merges_changes(self, sample_bill):
        merged = BillPatch(quantity=4).apply_to(sample_bill())
        assert merged.quantity == 4
        assert merged.total_amount == Decimal("10.00")

    def test_apply_to_reports_form_error(self, sample_bill):
        patch = BillPatch.model_construct(quantity=None, _fields_set={"quantity"})
        with pytest.raises(FormValidationError) as exc_info:
            patch.apply_to(sample_bill())
        assert set(exc_info.value.errors) == {"quantity"}

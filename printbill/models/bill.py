from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field, field_validator

from printbill.errors import FormValidationError
from printbill.models import CENT

# Fields whose change alters the rendered invoice.
INVOICE_FIELDS = frozenset({"logo_url", "quantity", "price_per_piece"})

REQUIRED_FIELDS = ("customer_name", "print_name", "quantity", "price_per_piece")


def compute_total(quantity: int, price_per_piece: Decimal) -> Decimal:
    return (Decimal(quantity) * price_per_piece).quantize(CENT, rounding=ROUND_HALF_UP)


class BillDraft(BaseModel):
    """Everything a caller may supply when creating a bill."""

    model_config = ConfigDict(str_strip_whitespace=True)

    customer_name: str = Field(min_length=2)
    print_name: str = Field(min_length=2)
    quantity: int = Field(gt=0)
    price_per_piece: Decimal = Field(gt=0, decimal_places=2)
    logo_url: str | None = None
    pdf_url: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_amount(self) -> Decimal:
        return compute_total(self.quantity, self.price_per_piece)


class Bill(BillDraft):
    id: str
    created_at: datetime

    @property
    def invoice_number(self) -> str:
        return self.id[:8]

    @property
    def invoice_filename(self) -> str:
        return f"invoice-{self.invoice_number}.pdf"

    def matches(self, term: str) -> bool:
        needle = term.strip().lower()
        return needle in self.customer_name.lower() or needle in self.print_name.lower()


class BillPatch(BaseModel):
    """Partial update; only explicitly set fields are applied."""

    model_config = ConfigDict(str_strip_whitespace=True)

    customer_name: str | None = Field(default=None, min_length=2)
    print_name: str | None = Field(default=None, min_length=2)
    quantity: int | None = Field(default=None, gt=0)
    price_per_piece: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    logo_url: str | None = None
    pdf_url: str | None = None

    @field_validator(*REQUIRED_FIELDS, mode="before")
    @classmethod
    def _not_null(cls, value):
        # Leave the field out to keep it; None would clear a NOT NULL column.
        if value is None:
            raise ValueError("cannot be cleared")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)

    def touches_invoice(self) -> bool:
        return bool(INVOICE_FIELDS & self.model_fields_set)

    def apply_to(self, bill: Bill) -> Bill:
        try:
            return Bill.model_validate({**bill.model_dump(), **self.changes()})
        except ValidationError as exc:
            errors: dict[str, str] = {}
            for err in exc.errors():
                field = str(err["loc"][0]) if err["loc"] else "__all__"
                errors.setdefault(field, err["msg"])
            raise FormValidationError(errors) from exc

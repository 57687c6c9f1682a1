"""Create/edit form for a single bill.

The form keeps the raw text a user typed, re-validates it on every change and
only talks to the outside world on :meth:`BillForm.submit`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable

from pydantic import ValidationError

from printbill.errors import FormValidationError
from printbill.models import CENT
from printbill.models.bill import Bill, BillDraft, BillPatch
from printbill.settings import settings
from printbill.storage.assets import AssetCategory, AssetStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("customer_name", "print_name", "quantity", "price_per_piece")

FIELD_MESSAGES = {
    "customer_name": "Customer name must be at least 2 characters.",
    "print_name": "Print name must be at least 2 characters.",
    "quantity": "Quantity must be a positive integer.",
    "price_per_piece": "Price per piece must be a positive number.",
}
PRICE_PLACES_MESSAGE = "Price can have up to 2 decimal places."
SUBMIT_FAILED_MESSAGE = "There was an error processing your request. Please try again."


class FormState(str, Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class LogoSelection:
    data: bytes
    filename: str
    content_type: str


def _to_decimal(value: Any) -> Decimal | None:
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


class BillForm:
    def __init__(self, assets: AssetStore, bill: Bill | None = None) -> None:
        self.assets = assets
        self.initial = bill
        if bill is not None:
            self.values: dict[str, Any] = {
                "customer_name": bill.customer_name,
                "print_name": bill.print_name,
                "quantity": str(bill.quantity),
                "price_per_piece": str(bill.price_per_piece),
            }
            self.logo_url = bill.logo_url
        else:
            self.values = {"customer_name": "", "print_name": "", "quantity": "1", "price_per_piece": "0"}
            self.logo_url = None
        self.logo: LogoSelection | None = None
        self._uploaded_logo_url: str | None = None
        self.state = FormState.EDITING
        self.message: str | None = None
        self.errors: dict[str, str] = {}
        self._draft: BillDraft | None = None
        self._validate()

    @property
    def is_edit(self) -> bool:
        return self.initial is not None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def total_amount(self) -> Decimal:
        """quantity x price rounded to cents, or 0 while either is not a number."""
        quantity = _to_decimal(self.values["quantity"])
        price = _to_decimal(self.values["price_per_piece"])
        if quantity is None or price is None or not quantity.is_finite() or not price.is_finite():
            return Decimal("0.00")
        return (quantity * price).quantize(CENT, rounding=ROUND_HALF_UP)

    def set_field(self, name: str, value: Any) -> None:
        if name not in EDITABLE_FIELDS:
            raise KeyError(f"{name} is not an editable field")
        self.values[name] = value
        self._touch()

    def select_logo(self, data: bytes, filename: str, content_type: str) -> bool:
        """Pick a logo for upload on submit. Returns False (and records an error) if rejected."""
        self.errors.pop("logo", None)
        if not content_type.startswith("image/"):
            self.errors["logo"] = "Please upload a valid image file."
        elif len(data) > settings.logo_max_bytes:
            limit_mb = settings.logo_max_bytes // (1024 * 1024)
            self.errors["logo"] = f"File size should be less than {limit_mb}MB."
        if "logo" in self.errors:
            self._touch(revalidate=False)
            return False
        self.logo = LogoSelection(data=data, filename=filename, content_type=content_type)
        self._uploaded_logo_url = None
        self._touch()
        return True

    def reset_logo(self) -> None:
        """Drop the pending logo; a bill's existing logo is kept."""
        self.logo = None
        self._uploaded_logo_url = None
        self.errors.pop("logo", None)
        self._touch()

    def _touch(self, revalidate: bool = True) -> None:
        if self.state is not FormState.SUBMITTING:
            self.state = FormState.EDITING
            self.message = None
        if revalidate:
            self._validate()

    def _validate(self) -> None:
        logo_error = self.errors.get("logo")
        self.errors = {}
        self._draft = None
        try:
            self._draft = BillDraft(**self.values)
        except ValidationError as exc:
            for err in exc.errors():
                field = str(err["loc"][0]) if err["loc"] else "__all__"
                if field in self.errors:
                    continue
                if err["type"] == "decimal_max_places":
                    self.errors[field] = PRICE_PLACES_MESSAGE
                else:
                    self.errors[field] = FIELD_MESSAGES.get(field, err["msg"])
        if logo_error:
            self.errors["logo"] = logo_error

    def _changed_fields(self, draft: BillDraft, logo_url: str | None) -> dict[str, Any]:
        assert self.initial is not None
        changes = {
            name: getattr(draft, name)
            for name in EDITABLE_FIELDS
            if getattr(draft, name) != getattr(self.initial, name)
        }
        if logo_url != self.initial.logo_url:
            changes["logo_url"] = logo_url
        return changes

    def submit(self, on_submit: Callable[[Any], Bill]) -> Bill:
        """Upload a pending logo, then hand the bill to ``on_submit``.

        ``on_submit`` receives a :class:`BillDraft` when creating and a
        :class:`BillPatch` holding only the changed fields when editing.
        Invalid input raises :class:`FormValidationError` before anything
        is uploaded or saved.
        """
        if self.state is FormState.SUBMITTING:
            raise RuntimeError("Form is already submitting")
        self._validate()
        if self.errors:
            raise FormValidationError(self.errors)
        draft = self._draft
        assert draft is not None

        self.state = FormState.SUBMITTING
        self.message = None
        try:
            logo_url = self.logo_url
            if self.logo is not None:
                if self._uploaded_logo_url is None:
                    self._uploaded_logo_url = self.assets.upload_asset(
                        self.logo.data,
                        f"{draft.customer_name}-{draft.print_name}",
                        AssetCategory.LOGO,
                        self.logo.content_type,
                    )
                logo_url = self._uploaded_logo_url

            if self.is_edit:
                payload: BillDraft | BillPatch = BillPatch(**self._changed_fields(draft, logo_url))
            else:
                payload = draft.model_copy(update={"logo_url": logo_url})
            result = on_submit(payload)
        except Exception as exc:
            self.state = FormState.FAILED
            self.message = getattr(exc, "user_message", SUBMIT_FAILED_MESSAGE)
            logger.warning("Bill form submit failed (edit=%s): %s", self.is_edit, exc)
            raise

        self.state = FormState.SUCCESS
        self.logo_url = result.logo_url
        self.logo = None
        self._uploaded_logo_url = None
        self.message = "The bill has been successfully updated." if self.is_edit else "The bill has been successfully created."
        return result

from __future__ import annotations

import logging

from printbill.errors import BackendUnavailableError, RenderError, UploadFailedError
from printbill.models.bill import Bill, BillDraft, BillPatch
from printbill.pdf.invoice import InvoicePDF, RenderedInvoice
from printbill.qr import generate_qrcode_png
from printbill.repositories.base import BillRepository
from printbill.storage.assets import AssetCategory, AssetStore

logger = logging.getLogger(__name__)

# Failures of the render/upload tail that leave the primary mutation in place.
INVOICE_STEP_ERRORS = (RenderError, UploadFailedError, BackendUnavailableError)


class BillService:
    def __init__(
        self,
        bill_repo: BillRepository,
        assets: AssetStore,
        pdf_generator: InvoicePDF | None = None,
    ) -> None:
        self.bill_repo = bill_repo
        self.assets = assets
        self.pdf_generator = pdf_generator or InvoicePDF()

    def list_bills(self, search: str = "") -> list[Bill]:
        if search.strip():
            result = self.bill_repo.search(search)
        else:
            result = self.bill_repo.list_all()
        logger.debug("Listed %d bills search=%r", len(result), search)
        return result

    def get_bill(self, bill_id: str) -> Bill:
        result = self.bill_repo.get_by_id(bill_id)
        logger.debug("get_bill id=%s", bill_id)
        return result

    def create_bill(self, draft: BillDraft) -> Bill:
        bill = self.bill_repo.create(draft)
        logger.info(
            "Bill created: id=%s customer=%s qty=%d total=%s",
            bill.id,
            bill.customer_name,
            bill.quantity,
            bill.total_amount,
        )
        return self._attach_invoice(bill)

    def update_bill(self, bill_id: str, patch: BillPatch) -> Bill:
        bill = self.bill_repo.update(bill_id, patch)
        logger.info("Bill updated: id=%s fields=%s", bill_id, sorted(patch.model_fields_set))
        if patch.touches_invoice():
            return self._attach_invoice(bill)
        return bill

    def delete_bill(self, bill_id: str) -> bool:
        result = self.bill_repo.delete(bill_id)
        logger.info("Bill %s deleted", bill_id)
        return result

    def upload_logo(self, data: bytes, suggested_name: str, content_type: str) -> str:
        return self.assets.upload_asset(data, suggested_name, AssetCategory.LOGO, content_type)

    def _load_logo(self, bill: Bill) -> tuple[bytes | None, str | None]:
        if not bill.logo_url:
            return None, None
        try:
            return self.assets.fetch(bill.logo_url), None
        except Exception as exc:
            logger.warning("Logo for bill %s unavailable (%s): %s", bill.id, bill.logo_url, exc)
            return None, f"Logo could not be loaded: {exc}"

    def render_invoice(self, bill: Bill) -> RenderedInvoice:
        """Render the invoice for download without storing it."""
        logo, problem = self._load_logo(bill)
        rendered = self.pdf_generator.generate(bill, logo)
        if problem:
            rendered.diagnostics.insert(0, problem)
        return rendered

    def generate_invoice(self, bill: Bill) -> Bill:
        """Render, upload and record the invoice URL. Errors propagate."""
        rendered = self.render_invoice(bill)
        for problem in rendered.diagnostics:
            logger.warning("Invoice for bill %s generated with issue: %s", bill.id, problem)
        url = self.assets.upload_asset(
            rendered.content,
            f"bill-{bill.id}",
            AssetCategory.INVOICE,
            "application/pdf",
        )
        updated = self.bill_repo.update(bill.id, BillPatch(pdf_url=url))
        logger.info("Invoice stored for bill %s at %s", bill.id, url)
        return updated

    def _attach_invoice(self, bill: Bill) -> Bill:
        try:
            return self.generate_invoice(bill)
        except INVOICE_STEP_ERRORS:
            logger.exception("Invoice step failed for bill %s, keeping bill without new PDF", bill.id)
            return bill

    def get_qrcode_png(self, bill: Bill) -> bytes | None:
        if not bill.pdf_url:
            return None
        return generate_qrcode_png(bill.pdf_url)

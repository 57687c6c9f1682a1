from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path

from fpdf import FPDF
from fpdf.errors import FPDFException
from PIL import Image

from printbill.constants import format_date
from printbill.errors import RenderError
from printbill.models import format_amount
from printbill.models.bill import Bill
from printbill.pdf import layout
from printbill.settings import settings

logger = logging.getLogger(__name__)

FONTS_DIR = Path(__file__).parent / "fonts"
FONT = "DejaVuSans"


@dataclass
class RenderedInvoice:
    content: bytes
    filename: str
    logo_embedded: bool = False
    diagnostics: list[str] = field(default_factory=list)


def _logo_png(logo: bytes) -> tuple[bytes, int, int]:
    """Decode any Pillow-readable image and re-encode it as an RGB PNG.

    Transparent areas are flattened onto white, the invoice paper colour.
    """
    img = Image.open(BytesIO(logo))
    img.load()
    if img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info:
        rgba = img.convert("RGBA")
        img = Image.new("RGB", rgba.size, "white")
        img.paste(rgba, mask=rgba.getchannel("A"))
    elif img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue(), img.width, img.height


class InvoicePDF:
    def generate(self, bill: Bill, logo: bytes | None = None) -> RenderedInvoice:
        pdf = FPDF(orientation="P", unit="mm", format="A4")
        # Same bill in, same bytes out.
        pdf.set_creation_date(bill.created_at)
        pdf.set_title(f"Invoice {bill.invoice_number}")
        pdf.set_auto_page_break(auto=False)
        pdf.add_font(FONT, "", str(FONTS_DIR / "DejaVuSans.ttf"))
        pdf.add_font(FONT, "B", str(FONTS_DIR / "DejaVuSans-Bold.ttf"))
        pdf.add_page()

        diagnostics: list[str] = []
        logo_embedded = False
        try:
            self._draw_title(pdf)
            self._draw_issuer(pdf)
            self._draw_metadata(pdf, bill)
            self._draw_customer(pdf, bill)
            self._draw_table(pdf, bill)
            self._draw_total(pdf, bill)
            if logo:
                logo_embedded = self._draw_logo(pdf, bill, logo, diagnostics)
            self._draw_footer(pdf)
            output = bytes(pdf.output())
        except FPDFException as exc:
            logger.error("Invoice render failed for bill %s: %s", bill.id, exc)
            raise RenderError(f"Could not render invoice for bill {bill.id}") from exc

        logger.debug(
            "PDF generated: bill=%s logo=%s size=%d bytes",
            bill.id,
            logo_embedded,
            len(output),
        )
        return RenderedInvoice(
            content=output,
            filename=bill.invoice_filename,
            logo_embedded=logo_embedded,
            diagnostics=diagnostics,
        )

    @staticmethod
    def _centered(pdf: FPDF, y: float, text: str) -> None:
        pdf.text(layout.PAGE_CENTER_X - pdf.get_string_width(text) / 2, y, text)

    def _draw_title(self, pdf: FPDF) -> None:
        pdf.set_font(FONT, "B", 20)
        self._centered(pdf, 20, "INVOICE")

    def _draw_issuer(self, pdf: FPDF) -> None:
        pdf.set_font(FONT, "", 12)
        pdf.text(layout.LEFT_X, 40, settings.company_name)
        pdf.set_font(FONT, "", 10)
        pdf.text(layout.LEFT_X, 45, settings.company_address)
        pdf.text(layout.LEFT_X, 50, settings.company_contact)

    def _draw_metadata(self, pdf: FPDF, bill: Bill) -> None:
        pdf.set_font(FONT, "", 10)
        pdf.text(layout.META_X, 40, f"Invoice Number: {bill.invoice_number}")
        pdf.text(layout.META_X, 45, f"Date: {format_date(bill.created_at)}")

    def _draw_customer(self, pdf: FPDF, bill: Bill) -> None:
        pdf.set_font(FONT, "B", 12)
        pdf.text(layout.LEFT_X, 65, "Bill To:")
        pdf.set_font(FONT, "", 10)
        pdf.text(layout.LEFT_X, 70, f"Customer: {bill.customer_name}")

    def _draw_table(self, pdf: FPDF, bill: Bill) -> None:
        cols = layout.COLUMN_X
        pdf.set_fill_color(240, 240, 240)
        pdf.rect(layout.LEFT_X, layout.TABLE_Y, layout.TABLE_W, layout.TABLE_HEADER_H, "F")

        pdf.set_font(FONT, "B", 10)
        pdf.text(cols["item"], layout.HEADER_BASELINE_Y, "Item")
        pdf.text(cols["quantity"], layout.HEADER_BASELINE_Y, "Quantity")
        pdf.text(cols["price"], layout.HEADER_BASELINE_Y, "Price")
        pdf.text(cols["total"], layout.HEADER_BASELINE_Y, "Total")

        symbol = settings.currency_symbol
        pdf.set_font(FONT, "", 10)
        pdf.text(cols["item"], layout.ROW_BASELINE_Y, bill.print_name)
        pdf.text(cols["quantity"], layout.ROW_BASELINE_Y, str(bill.quantity))
        pdf.text(cols["price"], layout.ROW_BASELINE_Y, format_amount(bill.price_per_piece, symbol, places=0))
        pdf.text(cols["total"], layout.ROW_BASELINE_Y, format_amount(bill.total_amount, symbol, places=0))

    def _draw_total(self, pdf: FPDF, bill: Bill) -> None:
        pdf.set_draw_color(220, 220, 220)
        pdf.line(layout.LEFT_X, layout.RULE_Y, layout.LEFT_X + layout.TABLE_W, layout.RULE_Y)

        pdf.set_font(FONT, "B", 10)
        pdf.text(layout.TOTAL_LABEL_X, layout.TOTAL_Y, "Total Amount:")
        pdf.text(
            layout.COLUMN_X["total"],
            layout.TOTAL_Y,
            format_amount(bill.total_amount, settings.currency_symbol, places=0),
        )

    def _draw_logo(self, pdf: FPDF, bill: Bill, logo: bytes, diagnostics: list[str]) -> bool:
        try:
            png, width_px, height_px = _logo_png(logo)
            w, h = layout.fit_within(width_px, height_px, layout.LOGO_MAX_W, layout.LOGO_MAX_H)
            pdf.image(BytesIO(png), x=layout.LOGO_X, y=layout.LOGO_Y, w=w, h=h)
        except Exception as exc:
            logger.warning("Logo skipped for bill %s: %s", bill.id, exc)
            diagnostics.append(f"Logo could not be added: {exc}")
            return False
        return True

    def _draw_footer(self, pdf: FPDF) -> None:
        pdf.set_font(FONT, "", 8)
        self._centered(pdf, layout.FOOTER_Y, "Thank you for your business!")

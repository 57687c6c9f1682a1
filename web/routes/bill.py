from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import FormData, UploadFile

from printbill.errors import FormValidationError
from printbill.forms import EDITABLE_FIELDS, BillForm
from printbill.models.bill import Bill
from web.deps import get_bill_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bills")


def _bill_json(bill: Bill) -> dict:
    return bill.model_dump(mode="json")


async def _apply_form(form: BillForm, data: FormData) -> None:
    """Copy submitted fields and an optional logo upload onto ``form``."""
    for name in EDITABLE_FIELDS:
        if name in data:
            form.set_field(name, str(data[name]))

    upload = data.get("logo")
    if isinstance(upload, UploadFile) and upload.filename:
        file_bytes = await upload.read()
        content_type = upload.content_type or ""
        if not form.select_logo(file_bytes, upload.filename, content_type):
            logger.warning("Logo rejected: filename=%s type=%s size=%d", upload.filename, content_type, len(file_bytes))
            raise FormValidationError({"logo": form.errors["logo"]})


@router.get("")
async def bill_list(request: Request, q: str = ""):
    bill_service = get_bill_service(request)
    bills = bill_service.list_bills(q)
    logger.info("GET /bills — q=%r, %d results", q, len(bills))
    return [_bill_json(b) for b in bills]


@router.post("")
async def bill_create(request: Request):
    bill_service = get_bill_service(request)
    data = await request.form()

    form = BillForm(bill_service.assets)
    await _apply_form(form, data)
    bill = form.submit(bill_service.create_bill)

    logger.info("POST /bills — created %s pdf=%s", bill.id, bool(bill.pdf_url))
    return JSONResponse(_bill_json(bill), status_code=201)


@router.get("/{bill_id}")
async def bill_detail(request: Request, bill_id: str):
    bill_service = get_bill_service(request)
    return _bill_json(bill_service.get_bill(bill_id))


@router.patch("/{bill_id}")
async def bill_update(request: Request, bill_id: str):
    bill_service = get_bill_service(request)
    current = bill_service.get_bill(bill_id)
    data = await request.form()

    form = BillForm(bill_service.assets, current)
    await _apply_form(form, data)
    bill = form.submit(lambda patch: bill_service.update_bill(bill_id, patch))

    logger.info("PATCH /bills/%s — updated", bill_id)
    return _bill_json(bill)


@router.delete("/{bill_id}")
async def bill_delete(request: Request, bill_id: str):
    bill_service = get_bill_service(request)
    bill_service.delete_bill(bill_id)
    logger.info("DELETE /bills/%s — deleted", bill_id)
    return Response(status_code=204)


@router.get("/{bill_id}/invoice.pdf")
async def bill_invoice_download(request: Request, bill_id: str):
    bill_service = get_bill_service(request)
    bill = bill_service.get_bill(bill_id)
    rendered = bill_service.render_invoice(bill)
    for problem in rendered.diagnostics:
        logger.warning("Invoice download for %s: %s", bill_id, problem)
    return Response(
        content=rendered.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{rendered.filename}"'},
    )


@router.post("/{bill_id}/invoice")
async def bill_invoice_generate(request: Request, bill_id: str):
    bill_service = get_bill_service(request)
    bill = bill_service.generate_invoice(bill_service.get_bill(bill_id))
    logger.info("POST /bills/%s/invoice — stored at %s", bill_id, bill.pdf_url)
    return _bill_json(bill)


@router.get("/{bill_id}/qrcode.png")
async def bill_qrcode(request: Request, bill_id: str):
    bill_service = get_bill_service(request)
    png = bill_service.get_qrcode_png(bill_service.get_bill(bill_id))
    if png is None:
        return JSONResponse({"detail": "This bill has no invoice yet."}, status_code=404)
    return Response(content=png, media_type="image/png")

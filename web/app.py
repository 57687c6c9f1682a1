from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from printbill.db import initialize_db
from printbill.errors import (
    BackendUnavailableError,
    BillNotFoundError,
    FormValidationError,
    PrintbillError,
    UploadFailedError,
)
from printbill.logging import configure_logging, reconfigure
from web.deps import DBConnectionMiddleware
from web.routes.bill import router as bill_router
from web.routes.files import router as files_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    # Re-apply logging config — Alembic's fileConfig may have overridden it
    reconfigure()
    logger.info("Application started")
    yield


app = FastAPI(title="printbill", redoc_url=None, lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)

app.include_router(bill_router)
app.include_router(files_router)


def _error_response(request: Request, exc: PrintbillError, status_code: int) -> JSONResponse:
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
    return JSONResponse({"detail": exc.user_message}, status_code=status_code)


@app.exception_handler(FormValidationError)
async def form_validation_handler(request: Request, exc: FormValidationError):
    logger.info("Validation failed on %s %s: %s", request.method, request.url.path, exc.errors)
    return JSONResponse({"detail": exc.user_message, "errors": exc.errors}, status_code=422)


@app.exception_handler(BillNotFoundError)
async def not_found_handler(request: Request, exc: BillNotFoundError):
    return _error_response(request, exc, 404)


@app.exception_handler(BackendUnavailableError)
@app.exception_handler(UploadFailedError)
async def unavailable_handler(request: Request, exc: PrintbillError):
    return _error_response(request, exc, 503)


@app.exception_handler(PrintbillError)
async def printbill_error_handler(request: Request, exc: PrintbillError):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse({"detail": exc.user_message}, status_code=500)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return PlainTextResponse("Internal Server Error", status_code=500)


@app.get("/health")
async def health():
    return {"status": "ok"}

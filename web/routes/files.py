from __future__ import annotations

import logging
import mimetypes

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from printbill.storage.local import LocalStorage
from web.deps import get_file_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files")


@router.get("/{key:path}")
async def get_file(key: str):
    storage = get_file_storage()
    if not isinstance(storage, LocalStorage):
        return JSONResponse({"detail": "Not found"}, status_code=404)
    try:
        data = storage.get(key)
    except (ValueError, OSError):
        logger.info("GET /files/%s — not found", key)
        return JSONResponse({"detail": "Not found"}, status_code=404)
    media_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type)

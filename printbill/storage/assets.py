"""Upload logos and invoices to the configured storage backend and hand back URLs."""

from __future__ import annotations

import logging
import mimetypes
import re
from enum import Enum

import httpx
from ulid import ULID

from printbill.constants import CONTENT_TYPE_EXTENSIONS
from printbill.errors import UploadFailedError
from printbill.settings import settings
from printbill.storage.base import StorageBackend

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"[^a-z0-9]+")


class AssetCategory(str, Enum):
    LOGO = "logos"
    INVOICE = "invoices"


def slugify(name: str) -> str:
    """'Acme Corp-Logo Design 1' -> 'acme-corp-logo-design-1'"""
    slug = _SLUG_RE.sub("-", name.lower()).strip("-")
    return slug[:60].rstrip("-") or "asset"


def asset_key(suggested_name: str, category: AssetCategory, content_type: str) -> str:
    ext = CONTENT_TYPE_EXTENSIONS.get(content_type) or mimetypes.guess_extension(content_type) or ""
    name = f"{slugify(suggested_name)}-{ULID()}{ext}"
    prefix = settings.storage_prefix
    if prefix:
        return f"{prefix}/{category.value}/{name}"
    return f"{category.value}/{name}"


class AssetStore:
    def __init__(self, storage: StorageBackend) -> None:
        self.storage = storage

    def upload_asset(
        self,
        data: bytes,
        suggested_name: str,
        category: AssetCategory,
        content_type: str | None = None,
    ) -> str:
        """Store ``data`` as a new object and return its public URL.

        Every call creates a new object; the key carries a ULID suffix so
        repeated names never collide.
        """
        if content_type is None:
            content_type = "application/pdf" if category is AssetCategory.INVOICE else "application/octet-stream"
        key = asset_key(suggested_name, category, content_type)
        try:
            self.storage.save(key, data, content_type=content_type)
            url = self.storage.get_url(key)
        except UploadFailedError:
            logger.error("Upload failed: category=%s key=%s", category.value, key)
            raise
        logger.info("Uploaded %s asset %s (%d bytes)", category.value, key, len(data))
        return url

    def fetch(self, url: str) -> bytes:
        """Read an asset back by URL, from storage when it lives there, else over HTTP."""
        key = self.storage.key_for_url(url)
        if key is not None:
            return self.storage.get(key)
        logger.debug("Fetching external asset %s", url)
        response = httpx.get(url, timeout=10.0, follow_redirects=True)
        response.raise_for_status()
        return response.content

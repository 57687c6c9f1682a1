import logging

from printbill.settings import settings
from printbill.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def get_storage() -> StorageBackend:
    backend = settings.storage_backend

    if backend == "local":
        from printbill.storage.local import LocalStorage

        logger.info("Storing files under %s", settings.storage_local_path)
        return LocalStorage(settings.storage_local_path, public_base_url=settings.public_base_url)

    if backend == "s3":
        from printbill.storage.s3 import S3Storage

        # Links are stored on bills, so they must never expire.
        if not settings.s3_public_base_url:
            raise ValueError("PRINTBILL_S3_PUBLIC_BASE_URL must be set when PRINTBILL_STORAGE_BACKEND=s3")

        logger.info("Storing files in s3://%s", settings.s3_bucket)
        return S3Storage(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            public_base_url=settings.s3_public_base_url,
            endpoint_url=settings.s3_endpoint_url,
        )

    raise ValueError(f"Unsupported storage backend: {backend}")

from __future__ import annotations

import logging

try:
    import boto3
    from botocore.exceptions import BotoCoreError, ClientError
except ImportError:  # pragma: no cover
    boto3 = None  # type: ignore[assignment]

from printbill.errors import UploadFailedError
from printbill.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class S3Storage(StorageBackend):
    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        public_base_url: str,
        endpoint_url: str = "",
    ) -> None:
        if not public_base_url:
            raise ValueError("S3 storage needs a public base URL for stored links")
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

        client_kwargs: dict = {
            "service_name": "s3",
            "region_name": region,
            "aws_access_key_id": access_key_id,
            "aws_secret_access_key": secret_access_key,
        }
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url

        if boto3 is None:
            raise ImportError("boto3 is required for S3 storage. Install it with: pip install printbill[s3]")
        self.client = boto3.client(**client_kwargs)

    def save(self, key: str, data: bytes, content_type: str = "application/pdf") -> str:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise UploadFailedError(f"Could not upload {key} to s3://{self.bucket}") from exc
        logger.info("Uploaded %s to s3://%s/%s (%d bytes)", key, self.bucket, key, len(data))
        return key

    def get(self, key: str) -> bytes:
        logger.debug("Downloading %s from s3://%s", key, self.bucket)
        response = self.client.get_object(Bucket=self.bucket, Key=key)
        return response["Body"].read()

    def get_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def key_for_url(self, url: str) -> str | None:
        if url.startswith(self.public_base_url + "/"):
            return url[len(self.public_base_url) + 1 :].split("?", 1)[0]
        return None

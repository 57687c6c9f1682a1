import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from printbill.errors import UploadFailedError
from printbill.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """Files under a base directory.

    URLs point at ``public_base_url`` (e.g. the web app's ``/files`` route)
    when one is configured, otherwise at ``file://`` URIs.
    """

    def __init__(self, base_dir: str, public_base_url: str = "") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        path = (self.base_dir / key).resolve()
        if not path.is_relative_to(self.base_dir.resolve()):
            raise ValueError(f"Key escapes storage directory: {key}")
        return path

    def save(self, key: str, data: bytes, content_type: str = "application/pdf") -> str:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise UploadFailedError(f"Could not write {key}") from exc
        logger.debug("Saved %s (%d bytes) to %s", key, len(data), path)
        return key

    def get(self, key: str) -> bytes:
        path = self._path(key)
        logger.debug("Reading %s from %s", key, path)
        return path.read_bytes()

    def get_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return self._path(key).as_uri()

    def key_for_url(self, url: str) -> str | None:
        if self.public_base_url and url.startswith(self.public_base_url + "/"):
            return url[len(self.public_base_url) + 1 :]
        parsed = urlparse(url)
        if parsed.scheme != "file":
            return None
        path = Path(unquote(parsed.path))
        base = self.base_dir.resolve()
        if not path.is_relative_to(base):
            return None
        return path.relative_to(base).as_posix()

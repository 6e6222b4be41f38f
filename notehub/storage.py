"""Backends de stockage des fichiers de notes envoyés.

Le backend actif vit dans ``app.extensions["blob_storage"]`` et s'obtient
via :func:`get_storage`. Un backend expose ``upload(path, key,
content_type)``, qui retourne un :class:`StoredBlob`, et ``delete(blob)``.
"""
import logging
import os
import shutil
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, Type
from urllib.parse import quote

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from flask import current_app
from werkzeug.utils import secure_filename

from notehub.common.errors import StorageError

log = logging.getLogger(__name__)


@dataclass
class StoredBlob:
    key: str
    url: str
    resource_type: Optional[str] = None


def make_key(original_name: str, folder: str = "notes") -> str:
    """Clé d'objet sans collision : ``<folder>/<epoch-ms>-<8 hex>-<name>``."""
    safe = secure_filename(original_name or "") or "upload"
    stamp = int(time.time() * 1000)
    return f"{folder}/{stamp}-{uuid.uuid4().hex[:8]}-{safe}"


def parse_backoff(value) -> list:
    """'500,1000' -> [500, 1000] (millisecondes)."""
    if isinstance(value, (list, tuple)):
        return [int(v) for v in value] or [0]
    items = [int(x) for x in str(value or "").split(",") if x.strip()]
    return items or [0]


def with_retries(
    fn: Callable,
    max_retries: int = 2,
    backoff_ms: Sequence[int] = (500, 1000),
    retry_on: Tuple[Type[BaseException], ...] = (),
    sleep: Callable[[float], None] = time.sleep,
):
    """Appelle ``fn`` avec un nombre borné de reprises (max_retries + 1 essais).

    Seules les exceptions de ``retry_on`` sont retentées, les autres
    remontent immédiatement.
    """
    for attempt in range(max_retries + 1):
        try:
            return fn()
        except retry_on as e:
            if attempt >= max_retries:
                raise
            delay = backoff_ms[min(attempt, len(backoff_ms) - 1)] / 1000
            log.warning(
                "storage_retry",
                extra={"attempt": attempt + 1, "delay_s": delay, "error": str(e)},
            )
            sleep(delay)


class CloudinaryStorage:
    transient_errors = (cloudinary.exceptions.GeneralError, ConnectionError, TimeoutError)

    def __init__(self, cloud_name, api_key, api_secret, timeout=30.0):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.timeout = timeout

    def upload(self, path: str, key: str, content_type: Optional[str] = None) -> StoredBlob:
        # resource_type "auto": PDF/images en "image", le reste en "raw"
        result = cloudinary.uploader.upload(
            path,
            public_id=key,
            resource_type="auto",
            use_filename=False,
            overwrite=False,
            timeout=self.timeout,
        )
        url = result.get("secure_url") or result.get("url")
        return StoredBlob(key=result.get("public_id", key), url=url, resource_type=result.get("resource_type"))

    def delete(self, blob: StoredBlob) -> None:
        cloudinary.uploader.destroy(blob.key, resource_type=blob.resource_type or "image", invalidate=True)


class LocalStorage:
    """Écrit les blobs sous un répertoire, URLs publiques sous ``public_base_url``."""

    transient_errors = ()

    def __init__(self, root: str, public_base_url: str):
        self.root = root
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, key: str) -> str:
        return os.path.join(self.root, *key.split("/"))

    def upload(self, path: str, key: str, content_type: Optional[str] = None) -> StoredBlob:
        dest = self._path(key)
        os.makedirs(os.path.dirname(dest), exist_ok=True)
        shutil.copyfile(path, dest)
        return StoredBlob(key=key, url=f"{self.public_base_url}/{quote(key)}")

    def delete(self, blob: StoredBlob) -> None:
        try:
            os.remove(self._path(blob.key))
        except FileNotFoundError:
            pass


def build_storage(config):
    backend = (config.get("STORAGE_BACKEND") or "local").lower()
    if backend == "cloudinary":
        return CloudinaryStorage(
            cloud_name=config.get("CLOUDINARY_CLOUD_NAME"),
            api_key=config.get("CLOUDINARY_API_KEY"),
            api_secret=config.get("CLOUDINARY_API_SECRET"),
            timeout=config.get("STORAGE_TIMEOUT_SECONDS", 30.0),
        )
    if backend == "local":
        return LocalStorage(config["STORAGE_LOCAL_DIR"], config["STORAGE_PUBLIC_BASE_URL"])
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")


def get_storage():
    return current_app.extensions["blob_storage"]


def store_file(storage, path: str, key: str, content_type: Optional[str] = None) -> StoredBlob:
    """Upload avec la politique de reprise de l'app, échec final en ``StorageError``."""
    cfg = current_app.config
    try:
        return with_retries(
            lambda: storage.upload(path, key, content_type),
            max_retries=cfg.get("STORAGE_MAX_RETRIES", 2),
            backoff_ms=parse_backoff(cfg.get("STORAGE_BACKOFF_MS")),
            retry_on=tuple(getattr(storage, "transient_errors", ())),
        )
    except Exception as e:
        log.exception("storage_upload_failed", extra={"key": key})
        raise StorageError(details={"key": key}) from e


def discard_blob(storage, blob: StoredBlob) -> None:
    """Compensation au mieux quand la phase base de données échoue."""
    try:
        storage.delete(blob)
    except Exception:
        log.exception("storage_compensation_failed", extra={"key": blob.key})
    else:
        log.info("storage_blob_discarded", extra={"key": blob.key})

"""
Pluggable storage for policy documents.

Development stores files on local disk, production in an S3 bucket.
Both hand back an opaque reference ("<tenant_id>/<uuid><ext>") that is
saved on the policy row and later used to read or delete the file.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path, PurePosixPath

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings
from app.core.exceptions import StorageException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedDocument:
    """A file received from the client, already read into memory"""

    filename: str | None
    content: bytes
    content_type: str | None = None


def build_reference(tenant_id: str, filename: str | None) -> str:
    """New unique reference for a tenant's document, keeping the extension"""
    suffix = PurePosixPath(filename or "").suffix.lower()
    if len(suffix) > 16 or not suffix[1:].isalnum():
        suffix = ""
    return f"{tenant_id}/{uuid.uuid4().hex}{suffix}"


def reference_belongs_to(reference: str, tenant_id: str) -> bool:
    return reference.startswith(f"{tenant_id}/")


class DocumentStorage(ABC):
    """Blob collaborator used by the policy service"""

    @abstractmethod
    def save(self, tenant_id: str, filename: str | None, content: bytes, content_type: str | None) -> str:
        """Store content and return its reference"""

    @abstractmethod
    def read(self, reference: str) -> bytes:
        """Return the stored bytes for a reference"""

    @abstractmethod
    def delete(self, reference: str) -> None:
        """Remove the stored document"""


class LocalDocumentStorage(DocumentStorage):
    """Stores documents under a directory on local disk"""

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir).resolve()

    def _path_for(self, reference: str) -> Path:
        path = (self.base_dir / reference).resolve()
        if self.base_dir not in path.parents:
            raise StorageException(f"Invalid document reference: {reference}")
        return path

    def save(self, tenant_id: str, filename: str | None, content: bytes, content_type: str | None) -> str:
        reference = build_reference(tenant_id, filename)
        path = self._path_for(reference)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            raise StorageException(f"Failed to write document {reference}") from e
        return reference

    def read(self, reference: str) -> bytes:
        path = self._path_for(reference)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageException(f"Failed to read document {reference}") from e

    def delete(self, reference: str) -> None:
        path = self._path_for(reference)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageException(f"Failed to delete document {reference}") from e


class S3DocumentStorage(DocumentStorage):
    """Stores documents as objects in an S3 (or S3-compatible) bucket"""

    def __init__(self, bucket: str, client=None, prefix: str = ""):
        if not bucket:
            raise StorageException("S3_BUCKET must be set when STORAGE_BACKEND is 's3'")
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.client = client or boto3.client(
            "s3",
            region_name=settings.S3_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
        )

    def _key(self, reference: str) -> str:
        if ".." in PurePosixPath(reference).parts:
            raise StorageException(f"Invalid document reference: {reference}")
        return f"{self.prefix}/{reference}" if self.prefix else reference

    def save(self, tenant_id: str, filename: str | None, content: bytes, content_type: str | None) -> str:
        reference = build_reference(tenant_id, filename)
        extra = {"ContentType": content_type} if content_type else {}
        try:
            self.client.put_object(Bucket=self.bucket, Key=self._key(reference), Body=content, **extra)
        except (BotoCoreError, ClientError) as e:
            raise StorageException(f"Failed to upload document {reference}") from e
        return reference

    def read(self, reference: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self._key(reference))
            return response["Body"].read()
        except (BotoCoreError, ClientError) as e:
            raise StorageException(f"Failed to download document {reference}") from e

    def delete(self, reference: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=self._key(reference))
        except (BotoCoreError, ClientError) as e:
            raise StorageException(f"Failed to delete document {reference}") from e


@lru_cache
def get_document_storage() -> DocumentStorage:
    """
    FastAPI dependency returning the configured storage backend.

    Tests override this dependency with a LocalDocumentStorage in a
    temporary directory.
    """
    if settings.STORAGE_BACKEND == "s3":
        logger.info("Using S3 document storage (bucket=%s)", settings.S3_BUCKET)
        return S3DocumentStorage(settings.S3_BUCKET, prefix=settings.S3_PREFIX)
    if settings.STORAGE_BACKEND == "local":
        return LocalDocumentStorage(settings.UPLOAD_DIR)
    raise StorageException(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")

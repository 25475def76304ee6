import os
import uuid
from dataclasses import dataclass
from datetime import timezone
from pathlib import Path
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from blogsphere.core.config import settings
from blogsphere.core.errors import StorageError
from blogsphere.core.logging import get_logger

logger = get_logger("storage")

UPLOAD_ROOT = "uploads"


@dataclass
class StoredFile:
    key: str
    last_modified: float  # POSIX timestamp


class Storage:
    """Key-addressed blob storage for uploaded media.

    Keys are slash separated paths relative to the storage root, e.g.
    ``uploads/blog_logos/3f2a...e1.png``.
    """

    def put(self, directory: str, content: bytes, file_name: str, content_type: Optional[str] = None) -> str:
        raise NotImplementedError

    def exists(self, key: str) -> bool:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        """Delete a blob. Returns False when there was nothing to delete."""
        raise NotImplementedError

    def list_files(self, prefix: str) -> List[StoredFile]:
        raise NotImplementedError

    @staticmethod
    def make_key(directory: str, file_name: str) -> str:
        # Generate unique filename, keeping the extension
        file_extension = os.path.splitext(file_name or "")[1].lower()
        return f"{directory.strip('/')}/{uuid.uuid4().hex}{file_extension}"

    def public_url(self, key: str) -> str:
        return f"{settings.STORAGE_URL_PREFIX.rstrip('/')}/{key}"

    def key_from_url(self, url: str) -> str:
        """Inverse of public_url; bare keys are returned unchanged."""
        prefix = settings.STORAGE_URL_PREFIX.rstrip("/") + "/"
        if url.startswith(prefix):
            return url[len(prefix):]
        return url.lstrip("/")


class LocalStorage(Storage):
    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or settings.STORAGE_ROOT).resolve()

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise StorageError(f"Key escapes storage root: {key}")
        return path

    def put(self, directory: str, content: bytes, file_name: str, content_type: Optional[str] = None) -> str:
        key = self.make_key(directory, file_name)
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            raise StorageError(f"Error writing {key}: {e}") from e
        return key

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Error deleting {key}: {e}") from e
        return True

    def list_files(self, prefix: str) -> List[StoredFile]:
        base = self._path(prefix) if prefix else self.root
        if not base.is_dir():
            return []
        files = []
        for path in base.rglob("*"):
            if path.is_file():
                files.append(StoredFile(
                    key=path.relative_to(self.root).as_posix(),
                    last_modified=path.stat().st_mtime,
                ))
        return files


class S3Storage(Storage):
    def __init__(self, client=None, bucket_name: Optional[str] = None):
        self.s3_client = client or boto3.client(
            's3',
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_REGION
        )
        self.bucket_name = bucket_name or settings.S3_BUCKET

    def put(self, directory: str, content: bytes, file_name: str, content_type: Optional[str] = None) -> str:
        key = self.make_key(directory, file_name)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type or "application/octet-stream"
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Error uploading {key} to S3: {e}") from e
        return key

    def exists(self, key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise StorageError(f"Error checking {key} on S3: {e}") from e
        return True

    def delete(self, key: str) -> bool:
        if not self.exists(key):
            return False
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Error deleting {key} from S3: {e}") from e
        return True

    def list_files(self, prefix: str) -> List[StoredFile]:
        files = []
        try:
            paginator = self.s3_client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix.rstrip("/") + "/"):
                for obj in page.get("Contents", []):
                    modified = obj["LastModified"]
                    if modified.tzinfo is None:
                        modified = modified.replace(tzinfo=timezone.utc)
                    files.append(StoredFile(key=obj["Key"], last_modified=modified.timestamp()))
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Error listing {prefix} on S3: {e}") from e
        return files


_storage: Optional[Storage] = None

def get_storage() -> Storage:
    global _storage
    if _storage is None:
        _storage = S3Storage() if settings.STORAGE_BACKEND == "s3" else LocalStorage()
        logger.info("Using %s for uploads", type(_storage).__name__)
    return _storage


def discard(storage: Storage, key: Optional[str]) -> None:
    """Best-effort delete: a failure is logged and never blocks the caller."""
    if not key:
        return
    try:
        storage.delete(key)
    except StorageError as e:
        logger.warning("Could not delete %s: %s", key, e)

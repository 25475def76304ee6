from enum import Enum
from typing import List
from urllib.parse import unquote

from blogsphere.core.errors import NotFoundError, ValidationError
from blogsphere.core.logging import get_logger
from blogsphere.services.storage import UPLOAD_ROOT, Storage

logger = get_logger("upload")

IGNORED_SUFFIXES = (".DS_Store", ".tmp", ".log")


class UploadFolder(str, Enum):
    PROFILE_PICTURES = "profile_pictures"
    POSTS = "posts"
    BLOG_LOGOS = "blog_logos"
    BLOG_IMAGES = "blog_images"


class UploadService:
    def __init__(self, storage: Storage):
        self.storage = storage

    def list_uploads(self) -> List[str]:
        """Keys under the upload root, most recently modified first."""
        files = [
            f for f in self.storage.list_files(UPLOAD_ROOT)
            if not f.key.rsplit("/", 1)[-1].endswith(IGNORED_SUFFIXES)
        ]
        files.sort(key=lambda f: f.last_modified, reverse=True)
        keys = [f.key for f in files]
        logger.info("Uploaded files: %s", keys)
        if not keys:
            raise NotFoundError("No uploaded files found.")
        return keys

    def delete_upload(self, folder: UploadFolder, filename: str) -> str:
        name = unquote(filename)
        if not name or "/" in name or "\\" in name or name in (".", "..") or ".." in name:
            raise ValidationError.for_field("filename", "The filename is invalid.")

        key = f"{UPLOAD_ROOT}/{UploadFolder(folder).value}/{name}"
        if not self.storage.exists(key):
            raise NotFoundError("File not found.")
        self.storage.delete(key)
        logger.info("Deleted upload %s", key)
        return key

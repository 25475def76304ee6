import mimetypes
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile

from blogsphere.core.config import settings
from blogsphere.core.errors import UnsupportedMediaTypeError, ValidationError

# Storage directories, relative to the storage root
PROFILE_PICTURES_DIR = "uploads/profile_pictures"
POSTS_DIR = "uploads/posts"
BLOG_LOGOS_DIR = "uploads/blog_logos"
BLOG_IMAGES_DIR = "uploads/blog_images"

POST_MEDIA_TYPES = frozenset([
    "image/jpeg",
    "image/png",
    "image/jpg",
    "image/gif",
    "application/pdf",
    "text/plain",
    "text/markdown",
    "application/vnd.ms-excel",  # .xls
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",  # .xlsx
    "application/octet-stream",  # anything the client could not type
])


@dataclass
class UploadedMedia:
    file_name: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


async def read_upload(file: Optional[UploadFile]) -> Optional[UploadedMedia]:
    """Read a multipart file field; an absent or empty field gives None."""
    if file is None or not file.filename:
        return None
    content = await file.read()
    content_type = file.content_type or mimetypes.guess_type(file.filename)[0] or "application/octet-stream"
    # Drop parameters such as "; charset=utf-8"
    content_type = content_type.split(";")[0].strip().lower()
    return UploadedMedia(file_name=file.filename, content_type=content_type, content=content)


def _check_size(field: str, media: UploadedMedia) -> None:
    if media.size > settings.MAX_UPLOAD_SIZE_BYTES:
        raise ValidationError.for_field(
            field, f"The {field} field must not be greater than {settings.MAX_UPLOAD_SIZE_KB} kilobytes."
        )


def validate_image(field: str, media: UploadedMedia) -> None:
    if not media.content_type.startswith("image/"):
        raise ValidationError.for_field(field, f"The {field} field must be an image.")
    _check_size(field, media)


def validate_post_media(field: str, media: UploadedMedia) -> None:
    if media.content_type not in POST_MEDIA_TYPES:
        raise UnsupportedMediaTypeError("Invalid file type.", {field: [f"Unsupported MIME type {media.content_type}."]})
    _check_size(field, media)

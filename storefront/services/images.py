"""Local filesystem storage for uploaded category images.

Files are written below ``UPLOAD_DIR`` under a random name and addressed by a
URL path below ``UPLOAD_URL_PREFIX`` (e.g. ``/uploads/categories/<hex>.png``),
which the application serves as static files.
"""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
ALLOWED_MIME_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
}
DEFAULT_MAX_IMAGE_SIZE = 5 * 1024 * 1024
CHUNK_SIZE = 64 * 1024

# File signatures for each accepted format.
MAGIC_NUMBERS = {
    "jpeg": [b"\xFF\xD8\xFF"],
    "png": [b"\x89\x50\x4E\x47\x0D\x0A\x1A\x0A"],
    "gif": [b"\x47\x49\x46\x38\x37\x61", b"\x47\x49\x46\x38\x39\x61"],
    "webp": [b"\x52\x49\x46\x46"],
}
WEBP_FORM_TYPE = b"WEBP"


class ImageUpload(Protocol):
    """The parts of ``fastapi.UploadFile`` the store relies on."""

    filename: Optional[str]
    content_type: Optional[str]
    file: BinaryIO


class ImageValidationError(Exception):
    """Raised when an uploaded file is not an acceptable image."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StorageError(Exception):
    """Raised when an image cannot be written to storage."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"Could not store image '{filename}': {reason}")
        self.filename = filename
        self.reason = reason


def has_image_signature(data: bytes) -> bool:
    """Return True when ``data`` starts with a known image signature."""
    for kind, signatures in MAGIC_NUMBERS.items():
        if not any(data.startswith(signature) for signature in signatures):
            continue
        # RIFF is a container; only the WEBP form type is an image.
        if kind == "webp" and data[8:12] != WEBP_FORM_TYPE:
            continue
        return True
    return False


def _discard_partial(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove partial upload %s: %s", path, exc)


class LocalImageStore:
    """Validate uploaded images and keep them on the local filesystem."""

    def __init__(
        self,
        root: str | Path,
        url_prefix: str = "/uploads",
        max_size: int = DEFAULT_MAX_IMAGE_SIZE,
    ) -> None:
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_size = max_size

    def _check_metadata(self, upload: ImageUpload) -> str:
        if not upload.filename:
            raise ImageValidationError('"image" must have a filename')

        ext = os.path.splitext(upload.filename)[1].lower()
        if ext not in ALLOWED_IMAGE_EXTENSIONS:
            allowed = ", ".join(sorted(ALLOWED_IMAGE_EXTENSIONS))
            raise ImageValidationError(f'"image" must be one of [{allowed}]')

        if upload.content_type not in ALLOWED_MIME_TYPES:
            allowed = ", ".join(sorted(ALLOWED_MIME_TYPES))
            raise ImageValidationError(f'"image" content type must be one of [{allowed}]')
        return ext

    def save(self, upload: ImageUpload, folder: str = "categories") -> str:
        """Store ``upload`` and return the URL path that serves it.

        The file is streamed to disk in chunks; size and signature are checked
        while writing and a partially written file is removed on any failure.

        Raises:
            ImageValidationError: The upload is not an acceptable image.
            StorageError: The file could not be written.
        """
        ext = self._check_metadata(upload)

        target_dir = self.root / folder
        unique_name = f"{uuid.uuid4().hex}{ext}"
        target = target_dir / unique_name

        total = 0
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as out:
                first = True
                while chunk := upload.file.read(CHUNK_SIZE):
                    total += len(chunk)
                    if total > self.max_size:
                        raise ImageValidationError(
                            f'"image" must be at most {self.max_size} bytes'
                        )
                    if first:
                        if not has_image_signature(chunk):
                            raise ImageValidationError('"image" content is not a valid image')
                        first = False
                    out.write(chunk)
            if total == 0:
                raise ImageValidationError('"image" must not be empty')
        except ImageValidationError:
            _discard_partial(target)
            raise
        except OSError as exc:
            _discard_partial(target)
            raise StorageError(upload.filename or unique_name, str(exc)) from exc

        url = f"{self.url_prefix}/{folder}/{unique_name}"
        logger.info("Stored image %s (%d bytes)", url, total)
        return url

    def resolve(self, url: str) -> Optional[Path]:
        """Map a URL produced by :meth:`save` back to its path inside the root.

        Returns None for URLs outside the prefix or paths escaping the root.
        """
        prefix = self.url_prefix + "/"
        if not url or not url.startswith(prefix):
            return None

        path = (self.root / url[len(prefix):]).resolve()
        if not path.is_relative_to(self.root.resolve()):
            return None
        return path

    def delete(self, url: Optional[str]) -> bool:
        """Remove a stored image; returns False when there was nothing to remove."""
        if not url:
            return False
        path = self.resolve(url)
        if path is None or not path.is_file():
            return False
        try:
            path.unlink()
        except OSError as exc:
            logger.warning("Could not remove image %s: %s", url, exc)
            return False
        logger.info("Removed image %s", url)
        return True


__all__ = [
    "ALLOWED_IMAGE_EXTENSIONS",
    "ALLOWED_MIME_TYPES",
    "ImageUpload",
    "ImageValidationError",
    "LocalImageStore",
    "StorageError",
    "has_image_signature",
]

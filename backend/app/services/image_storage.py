"""File area for profile images, one file per user code."""
from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from app.core.errors import FileStorageError, ValidationFailed

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
UPLOADS_PATH = "/uploads"


@dataclass
class ImageUpload:
    filename: str
    stream: BinaryIO


class ImageStorage:
    def __init__(self, upload_dir: str | Path, public_base_url: str, max_bytes: int) -> None:
        self.upload_dir = Path(upload_dir)
        self.public_base_url = public_base_url.rstrip("/")
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def filename_for(code: str, original_filename: str) -> str:
        return f"{code}{Path(original_filename or '').suffix}"

    def url_for(self, filename: str) -> str:
        return f"{self.public_base_url}{UPLOADS_PATH}/{filename}"

    def filename_from_url(self, url: str) -> Optional[str]:
        """Return the stored filename behind ``url`` if it points into this file area."""
        prefix = f"{self.public_base_url}{UPLOADS_PATH}/"
        if not url or not url.startswith(prefix):
            return None
        name = url[len(prefix):]
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            return None
        return name

    def save(self, code: str, upload: ImageUpload) -> str:
        """Stream the upload to ``{code}{ext}`` and return its public URL.

        Bytes go to a temporary file first and replace the target in one
        rename, so a reader never sees a half-written image.
        """
        filename = self.filename_for(code, upload.filename)
        target = self.upload_dir / filename
        written = 0
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.upload_dir, prefix=".upload-", suffix=".part")
        except OSError as exc:
            raise FileStorageError("Error saving image") from exc
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as dst:
                while True:
                    chunk = upload.stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise ValidationFailed("Image exceeds the upload size limit", code="bad_form")
                    dst.write(chunk)
            os.replace(tmp_path, target)
        except ValidationFailed:
            tmp_path.unlink(missing_ok=True)
            raise
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise FileStorageError("Error saving image") from exc
        LOGGER.info("🖼️ Stored image %s (%d bytes)", target, written)
        return self.url_for(filename)

    def discard(self, url: str) -> None:
        filename = self.filename_from_url(url)
        if filename is None:
            return
        try:
            (self.upload_dir / filename).unlink(missing_ok=True)
            LOGGER.info("🗑️ Removed stale image %s", filename)
        except OSError as exc:
            LOGGER.warning("Could not remove stale image %s: %s", filename, exc)

import logging
import os
import random
import time
from typing import Optional

from fastapi import UploadFile

from bikehub.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"


class UploadStore:
    """
    Saves uploaded images to a local directory served under /uploads.
    """

    def __init__(self, directory: str, max_bytes: int = 5 * 1024 * 1024):
        self.directory = directory
        self.max_bytes = max_bytes

    def ensure_directory(self):
        os.makedirs(self.directory, exist_ok=True)

    def generate_filename(self, field: str, original_name: Optional[str]) -> str:
        """
        Build "<field>-<epoch millis>-<random>.<ext>", keeping the original extension.
        """
        ext = os.path.splitext(os.path.basename(original_name or ""))[1]
        millis = int(time.time() * 1000)
        suffix = random.randint(0, 10 ** 9)
        return f"{field}-{millis}-{suffix}{ext}"

    def save(self, upload: Optional[UploadFile], field: str = "image") -> str:
        """
        Validate and write an upload. Returns the generated filename.
        Nothing is written when the upload is rejected.
        """
        if upload is None or not upload.filename:
            raise ValidationError("No image file provided")
        if not (upload.content_type or "").startswith("image/"):
            raise ValidationError("Only image files are allowed")

        data = upload.file.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            raise ValidationError(f"Image exceeds the {limit_mb:g} MB size limit")

        file_name = self.generate_filename(field, upload.filename)
        path = os.path.join(self.directory, file_name)
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError:
            logger.exception("Failed to write upload %s", path)
            if os.path.exists(path):
                os.remove(path)
            raise StorageError("Image upload failed")

        logger.info("Image uploaded: %s", self.public_url(file_name))
        return file_name

    def public_url(self, file_name: str) -> str:
        return f"{UPLOAD_URL_PREFIX}/{file_name}"

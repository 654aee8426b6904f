from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..core.constants import ALLOWED_PHOTO_TYPES, MAX_PHOTO_BYTES, PROFILE_PHOTO_URL_PREFIX
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def upload_size(upload: FileStorage) -> int:
    stream = upload.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


class PhotoStorage:
    """Stores profile photos as files under one folder.

    Stored photos are referenced by URL path (``/uploads/profile-photos/<name>``)
    in ``users.profile_photo``.
    """

    def __init__(self, root: str | Path, *, max_bytes: int = MAX_PHOTO_BYTES):
        self._root = Path(root)
        self._max_bytes = int(max_bytes)

    @property
    def root(self) -> Path:
        return self._root

    def validate(self, upload: Optional[FileStorage]) -> str:
        """Check type and size; return the file extension to store under."""
        if upload is None or not upload.filename:
            raise ValidationError("No file uploaded")

        mimetype = (upload.mimetype or "").lower()
        ext = ALLOWED_PHOTO_TYPES.get(mimetype)
        if not ext:
            raise ValidationError("Only JPEG, PNG, GIF and WebP images are allowed")

        size = upload_size(upload)
        if size == 0:
            raise ValidationError("Uploaded file is empty")
        if size > self._max_bytes:
            raise ValidationError(f"File size exceeds {self._max_bytes // (1024 * 1024)}MB limit")
        return ext

    def save(self, user_id: int, upload: FileStorage) -> str:
        ext = self.validate(upload)
        self._root.mkdir(parents=True, exist_ok=True)
        filename = secure_filename(f"user{int(user_id)}_{uuid.uuid4().hex}.{ext}")
        upload.save(self._root / filename)
        logger.info("stored profile photo %s for user %s", filename, user_id)
        return PROFILE_PHOTO_URL_PREFIX + filename

    def delete(self, url: Optional[str]) -> None:
        """Remove a photo previously returned by :meth:`save`; other paths are ignored."""
        if not url or not url.startswith(PROFILE_PHOTO_URL_PREFIX):
            return
        name = secure_filename(url[len(PROFILE_PHOTO_URL_PREFIX):])
        if not name:
            return
        path = self._root / name
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("profile photo %s already removed", name)

"""
Local media references.

Uploaded files (avatars, cover images, thumbnails, video files) are written
under UPLOAD_FOLDER/<folder>/ with a random name and referenced by URL
(MEDIA_URL_PREFIX/<folder>/<name>). Serving those URLs is left to the web
server in front of the API.
"""
from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


def _root() -> Path:
    return Path(current_app.config["UPLOAD_FOLDER"])


def save_upload(file: Optional[FileStorage], folder: str) -> Optional[str]:
    """Persist an uploaded file; returns its reference URL or None when nothing was sent."""
    if file is None or not file.filename:
        return None
    suffix = Path(secure_filename(file.filename)).suffix.lower()
    name = f"{uuid.uuid4().hex}{suffix}"
    target_dir = _root() / folder
    target_dir.mkdir(parents=True, exist_ok=True)
    file.save(target_dir / name)
    prefix = current_app.config["MEDIA_URL_PREFIX"].rstrip("/")
    return f"{prefix}/{folder}/{name}"


def media_path(url: Optional[str]) -> Optional[Path]:
    """Map a reference URL back to the file under UPLOAD_FOLDER (None if it points elsewhere)."""
    if not url:
        return None
    prefix = current_app.config["MEDIA_URL_PREFIX"].rstrip("/") + "/"
    if not url.startswith(prefix):
        return None
    relative = Path(url[len(prefix):])
    if relative.is_absolute() or ".." in relative.parts:
        return None
    return _root() / relative


def delete_media(url: Optional[str]) -> bool:
    path = media_path(url)
    if path is None:
        return False
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("Media file already gone: %s", url)
        return False
    return True

from pathlib import Path
import logging
import os
import time
import uuid
from typing import List, Optional

from app.config import get_settings

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[2]
MEDIA_ROOT = Path(get_settings().MEDIA_ROOT or (BASE_DIR / "media"))
MEDIA_URL = "/media"

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif")


class StorageError(Exception):
    """Raised when a file cannot be written to or read from media storage."""


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _resolve(path: str) -> Path:
    """Map a storage path (e.g. products/abc.jpg) onto MEDIA_ROOT, refusing escapes."""
    rel = path.strip().lstrip("/")
    if not rel:
        raise StorageError("Empty storage path")
    target = (MEDIA_ROOT / rel).resolve()
    root = MEDIA_ROOT.resolve()
    if target == root or root not in target.parents:
        raise StorageError(f"Path escapes media root: {path}")
    return target


def public_url(path: str) -> str:
    return f"{MEDIA_URL}/{path.strip().lstrip('/')}"


def upload(data: bytes, path: str, upsert: bool = False) -> str:
    """Write ``data`` to media storage at ``path`` and return its public URL.

    An existing file is only replaced when ``upsert`` is set.
    """
    target = _resolve(path)
    if target.exists() and not upsert:
        raise StorageError(f"File already exists: {path}")
    try:
        _ensure_dir(target.parent)
        with target.open("wb") as buffer:
            buffer.write(data)
    except OSError as e:
        logger.error("Failed to store %s: %s", path, e)
        raise StorageError(f"Failed to store {path}") from e
    return public_url(path)


def product_image_path(filename: Optional[str], index: int = 0) -> str:
    """Build products/<millis>-<index>-<random>.<ext> for an uploaded image."""
    ext = os.path.splitext(filename or "")[1].lower().lstrip(".") or "jpg"
    token = uuid.uuid4().hex[:7]
    return f"products/{int(time.time() * 1000)}-{index}-{token}.{ext}"


def delete_media_file(rel_url: Optional[str]) -> bool:
    """Delete a single media file by its public URL (e.g. /media/products/<file>). Returns True if removed.

    Safety rules:
    - Only operates inside MEDIA_ROOT
    - Ignores None/empty or non /media/ prefixed inputs
    - Missing files are not an error
    """
    if not rel_url or not isinstance(rel_url, str):
        return False
    if not rel_url.startswith(MEDIA_URL + "/"):
        return False
    try:
        target_path = _resolve(rel_url[len(MEDIA_URL) + 1:])
    except StorageError:
        return False
    if not target_path.is_file():
        return False
    try:
        target_path.unlink()
    except OSError as e:
        logger.warning("Could not delete media file %s: %s", rel_url, e)
        return False
    return True


def delete_media_files(urls: Optional[List[str]]) -> int:
    """Delete multiple media files; returns count of successfully removed files."""
    if not urls:
        return 0
    removed = 0
    for u in urls:
        if delete_media_file(u):
            removed += 1
    return removed

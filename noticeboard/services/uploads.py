"""
Local-disk storage for uploaded files, served back under /uploads
"""
import logging
import os
import shutil
import time
import uuid
from dataclasses import dataclass

from fastapi import UploadFile

from noticeboard.config.settings import settings

logger = logging.getLogger(__name__)

@dataclass
class StoredFile:
    path: str
    filename: str
    content_type: str
    size: int

def upload_size(upload: UploadFile) -> int:
    """Size of an incoming upload without consuming it"""
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size

def stored_name(original_name: str) -> str:
    """Timestamp-based unique file name keeping the original extension"""
    ext = os.path.splitext(original_name or "")[1].lower()
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"

def save_upload(upload: UploadFile) -> StoredFile:
    """Write an upload to UPLOAD_DIR and return its public relative path"""
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    filename = stored_name(upload.filename)
    file_path = os.path.join(settings.UPLOAD_DIR, filename)

    upload.file.seek(0)
    with open(file_path, "wb") as buffer:
        shutil.copyfileobj(upload.file, buffer)

    size = os.path.getsize(file_path)
    logger.info("📎 Stored upload %s as %s (%d bytes)", upload.filename, filename, size)
    return StoredFile(
        path=f"{settings.UPLOAD_URL_PREFIX}/{filename}",
        filename=upload.filename or filename,
        content_type=upload.content_type or "application/octet-stream",
        size=size,
    )

def remove_upload(stored: StoredFile) -> None:
    """Delete a file written by ``save_upload``"""
    file_path = os.path.join(settings.UPLOAD_DIR, os.path.basename(stored.path))
    if os.path.exists(file_path):
        os.remove(file_path)
        logger.info("🗑️ Removed upload %s", file_path)

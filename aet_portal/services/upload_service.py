# aet_portal/services/upload_service.py
"""
Upload storage — saves vehicle documents (CRLV) and issued license files.

Accepts PDFs and images up to MAX_UPLOAD_BYTES.
Saves to:  {UPLOAD_DIR}/{field}-{timestamp}-{random}{ext}
Returns:   /uploads/{filename}  (served read-only by main.py)

The rest of the portal only ever stores and echoes the returned path.
"""

import os
import secrets
from datetime import datetime

from fastapi import UploadFile

from aet_portal.config import settings
from aet_portal.exceptions import InvalidInput
from aet_portal.utils.logger import get_logger

logger = get_logger(__name__)

PUBLIC_PREFIX = "/uploads"
ALLOWED_EXTENSIONS = {".pdf", ".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".tif", ".tiff"}

# Ensure folder exists on import
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)


def is_allowed_content_type(content_type) -> bool:
    if not content_type:
        return False
    content_type = content_type.split(";")[0].strip().lower()
    return content_type == "application/pdf" or content_type.startswith("image/")


def build_filename(field_name: str, original_name) -> str:
    ext = os.path.splitext(original_name or "")[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        ext = ""
    timestamp = datetime.utcnow().strftime("%Y%m%d%H%M%S%f")
    return f"{field_name}-{timestamp}-{secrets.token_hex(4)}{ext}"


async def save_upload(upload: UploadFile, field_name: str) -> str:
    """
    Buffer the whole upload, validate it, write it under UPLOAD_DIR.
    Returns the public /uploads/... path. Raises InvalidInput on a bad file.
    """
    if not is_allowed_content_type(upload.content_type):
        logger.warning(f"[UPLOAD] Rejected {upload.filename}: content type {upload.content_type}")
        raise InvalidInput("Formato de arquivo não suportado. Use apenas PDF ou imagens.")

    content = await upload.read()
    if not content:
        raise InvalidInput("Arquivo vazio")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        logger.warning(f"[UPLOAD] Rejected {upload.filename}: {len(content)} bytes")
        raise InvalidInput(f"Arquivo maior que o limite de {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB")

    filename = build_filename(field_name, upload.filename)
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    with open(os.path.join(settings.UPLOAD_DIR, filename), "wb") as f:
        f.write(content)

    logger.info(f"[UPLOAD] Saved {filename} ({len(content)} bytes)")
    return f"{PUBLIC_PREFIX}/{filename}"


def discard_upload(public_path: str):
    """Remove a file saved by save_upload whose request was then rejected."""
    if not public_path or not public_path.startswith(f"{PUBLIC_PREFIX}/"):
        return
    filename = os.path.basename(public_path)
    try:
        os.remove(os.path.join(settings.UPLOAD_DIR, filename))
        logger.info(f"[UPLOAD] Discarded {filename}")
    except FileNotFoundError:
        logger.warning(f"[UPLOAD] Nothing to discard for {filename}")

"""Request body parsing and image upload handling.

Files are streamed to the upload directory under a generated name before the
route logic runs. Oversized files, disallowed types and unexpected file fields
are rejected with an ``UploadError``.
"""

import logging
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Sequence, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

from ..config.settings import Settings
from ..errors import UploadError, ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

ALLOWED_CONTENT_TYPES = {
    'image/jpeg',
    'image/jpg',
    'image/png',
    'image/gif',
    'image/webp',
}
ALLOWED_EXTENSIONS = {'.jpeg', '.jpg', '.png', '.gif', '.webp'}

FORM_CONTENT_TYPES = ('multipart/form-data', 'application/x-www-form-urlencoded')

@dataclass
class StoredFile:
    """
    A file written to the upload directory.

    Fields:
        field: Form field the file was sent under
        path: Storage path kept in the record (upload dir + filename)
        filename: Generated file name on disk
        original_name: File name as sent by the client
        size: Size in bytes
        content_type: MIME type as sent by the client
    """
    field: str
    path: str
    filename: str
    original_name: str
    size: int
    content_type: str

def generate_filename(field: str, original_name: str) -> str:
    """Collision-resistant name that keeps the original extension."""
    extension = Path(original_name).suffix.lower()
    return f"{field}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"

def check_file_type(upload: UploadFile) -> None:
    """Only image files pass."""
    content_type = (upload.content_type or '').lower()
    extension = Path(upload.filename or '').suffix.lower()
    if content_type not in ALLOWED_CONTENT_TYPES or extension not in ALLOWED_EXTENSIONS:
        raise UploadError(
            UploadError.INVALID_FILE_TYPE,
            "Only image files are allowed (jpeg, jpg, png, gif, webp)"
        )

async def save_upload(upload: UploadFile, field: str, settings: Settings) -> StoredFile:
    """
    Stream one uploaded file to disk.

    Raises:
        UploadError: If the file type is not allowed or the file exceeds the
            size ceiling. A partially written file is removed.
    """
    check_file_type(upload)

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    filename = generate_filename(field, upload.filename)
    destination = upload_dir / filename

    size = 0
    try:
        with open(destination, 'wb') as out:
            while chunk := await upload.read(CHUNK_SIZE):
                size += len(chunk)
                if size > settings.max_file_size:
                    raise UploadError(
                        UploadError.LIMIT_FILE_SIZE,
                        f"File size too large. Maximum size is {settings.max_file_size_mb}MB",
                        field=field
                    )
                out.write(chunk)
    except BaseException:
        destination.unlink(missing_ok=True)
        raise

    logger.info(f"Stored upload '{upload.filename}' as {destination} ({size} bytes)")
    return StoredFile(
        field=field,
        path=destination.as_posix(),
        filename=filename,
        original_name=upload.filename,
        size=size,
        content_type=upload.content_type
    )

def discard_uploads(files: Iterable[StoredFile]) -> None:
    """Remove files stored for a request that did not go through."""
    for stored in files:
        try:
            os.remove(stored.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove upload {stored.path}: {e}")

async def save_uploads(
    form_items: Sequence[Tuple[str, Any]],
    allowed_fields: Sequence[str],
    settings: Settings
) -> Dict[str, StoredFile]:
    """
    Store every file in a parsed form, one file per allowed field.

    Raises:
        UploadError: On a file under an unexpected field, a second file for the
            same field, or any per-file rejection from ``save_upload``
    """
    pending: Dict[str, UploadFile] = {}
    for key, value in form_items:
        if not isinstance(value, UploadFile):
            continue
        # An empty file input still shows up as a part without a name
        if not value.filename:
            continue
        if key not in allowed_fields or key in pending:
            raise UploadError(
                UploadError.LIMIT_UNEXPECTED_FILE,
                "Too many files or unexpected field name",
                field=key
            )
        pending[key] = value

    stored: Dict[str, StoredFile] = {}
    try:
        for field, upload in pending.items():
            stored[field] = await save_upload(upload, field, settings)
    except UploadError:
        discard_uploads(stored.values())
        raise
    return stored

def form_to_dict(form_items: Sequence[Tuple[str, Any]]) -> Dict[str, Any]:
    """Collect text fields; repeated keys become lists."""
    body: Dict[str, Any] = {}
    for key, value in form_items:
        if isinstance(value, UploadFile):
            continue
        if key in body:
            if not isinstance(body[key], list):
                body[key] = [body[key]]
            body[key].append(value)
        else:
            body[key] = value
    return body

async def read_request_data(
    request: Request,
    settings: Settings,
    file_fields: Sequence[str] = ('image',)
) -> Tuple[Dict[str, Any], Dict[str, StoredFile]]:
    """
    Parse the request body into text fields and stored files.

    Accepts multipart and urlencoded forms, or a JSON object (which cannot
    carry files). An empty body yields no fields.

    Returns:
        (body fields, stored files by field name)
    """
    content_type = request.headers.get('content-type', '').lower()

    if content_type.startswith('application/json'):
        raw = await request.body()
        if not raw.strip():
            return {}, {}
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationError("Request body must be valid JSON")
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        return payload, {}

    if content_type.startswith(FORM_CONTENT_TYPES):
        async with request.form() as form:
            items = form.multi_items()
            files = await save_uploads(items, file_fields, settings)
            return form_to_dict(items), files

    return {}, {}

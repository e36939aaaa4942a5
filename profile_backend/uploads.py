"""
Multipart upload handling that runs before the upload route.
"""

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request
from starlette.datastructures import UploadFile

from profile_backend.config import Settings, get_settings

DEFAULT_EXTENSION = ".jpg"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
PHOTO_FIELD = "photo"
NO_FILE_DETAIL = "No file uploaded. Field name must be 'photo'."
TOO_MANY_FILES_DETAIL = "Only one file may be uploaded under 'photo'."

# Allowance for multipart boundaries and part headers on top of the file itself.
MULTIPART_OVERHEAD_BYTES = 64 * 1024


@dataclass(frozen=True)
class UploadedPhoto:
    filename: str
    content_type: str
    data: bytes

    def object_name(self) -> str:
        """Fresh unique object name that keeps the original extension."""
        return f"{uuid.uuid4()}{file_extension(self.filename)}"


def file_extension(filename: str) -> str:
    _, ext = os.path.splitext(os.path.basename(filename or ""))
    return ext or DEFAULT_EXTENSION


async def read_photo(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> UploadedPhoto:
    """
    Read the single file in the `photo` field, rejecting oversized bodies,
    missing or repeated files before any storage call is made.
    """
    limit = settings.max_upload_bytes
    if _declared_length(request) > limit + MULTIPART_OVERHEAD_BYTES:
        raise _too_large(limit)

    form = await request.form(max_files=2)
    try:
        files = [
            item for item in form.getlist(PHOTO_FIELD) if isinstance(item, UploadFile)
        ]
        if not files:
            raise HTTPException(status_code=400, detail=NO_FILE_DETAIL)
        if len(files) > 1:
            raise HTTPException(status_code=400, detail=TOO_MANY_FILES_DETAIL)

        photo = files[0]
        data = await photo.read(limit + 1)
    finally:
        await form.close()
    if len(data) > limit:
        raise _too_large(limit)

    return UploadedPhoto(
        filename=photo.filename or "",
        content_type=photo.content_type or DEFAULT_CONTENT_TYPE,
        data=data,
    )


def _declared_length(request: Request) -> int:
    try:
        return int(request.headers.get("content-length", "0"))
    except ValueError:
        return 0


def _too_large(limit: int) -> HTTPException:
    return HTTPException(
        status_code=413,
        detail=f"File too large. Maximum size is {_format_size(limit)}.",
    )


def _format_size(num_bytes: int) -> str:
    if num_bytes % (1024 * 1024) == 0:
        return f"{num_bytes // (1024 * 1024)} MiB"
    return f"{num_bytes} bytes"

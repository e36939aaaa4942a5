"""
HTTP routes for the profile backend API.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from profile_backend.db import DbClient, ProfileRecord
from profile_backend.dependencies import get_db_client, get_storage_client
from profile_backend.errors import ObjectStoreError, ProfileStoreError
from profile_backend.schemas import (
    HealthResponse,
    ProfileCreateRequest,
    ProfileResponse,
    UploadResponse,
)
from profile_backend.storage import StorageClient
from profile_backend.uploads import UploadedPhoto, read_photo

logger = logging.getLogger(__name__)

router = APIRouter()

MISSING_FIELDS_DETAIL = "Missing fields: name, age, bio, imageUrl are required."
MALFORMED_JSON_DETAIL = "Request body is not valid JSON."


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(ok=True, message="Service is running")


@router.post("/upload", response_model=UploadResponse)
def upload_photo(
    photo: UploadedPhoto = Depends(read_photo),
    storage: StorageClient = Depends(get_storage_client),
):
    """
    Store the uploaded photo under a fresh name and return its URL.
    """
    name = photo.object_name()
    try:
        storage.ensure_container()
        image_url = storage.upload_bytes(name, photo.data, photo.content_type)
    except ObjectStoreError:
        logger.exception("Upload of %s failed", name)
        raise HTTPException(status_code=500, detail="Upload failed.")
    logger.info("Stored %s (%d bytes, %s)", name, len(photo.data), photo.content_type)
    return UploadResponse(imageUrl=image_url)


async def read_profile_request(request: Request) -> ProfileCreateRequest:
    """
    Parse the create-profile body. Bodies that are not JSON objects carry no
    fields, so they fail the presence check instead of schema validation.
    """
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    body = await request.body()
    if not body or not (media_type == "application/json" or media_type.endswith("+json")):
        return ProfileCreateRequest()
    try:
        data = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail=MALFORMED_JSON_DETAIL)
    if not isinstance(data, dict):
        return ProfileCreateRequest()
    return ProfileCreateRequest.model_validate(data)


@router.post(
    "/profiles",
    response_model=ProfileResponse,
    status_code=201,
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {
                    "schema": ProfileCreateRequest.model_json_schema()
                }
            },
        }
    },
)
def create_profile(
    payload: ProfileCreateRequest = Depends(read_profile_request),
    db: DbClient = Depends(get_db_client),
):
    if not payload.is_complete():
        raise HTTPException(status_code=400, detail=MISSING_FIELDS_DETAIL)

    record = ProfileRecord.new(
        name=payload.name,
        age=payload.age,
        bio=payload.bio,
        image_url=payload.imageUrl,
    )
    try:
        db.create_profile(record)
    except ProfileStoreError:
        logger.exception("Creating profile %s failed", record.profile_id)
        raise HTTPException(status_code=500, detail="Create profile failed.")
    logger.info("Created profile %s", record.profile_id)
    return record.as_dict()


@router.get("/profiles/{profile_id}", response_model=ProfileResponse)
def get_profile(profile_id: str, db: DbClient = Depends(get_db_client)):
    try:
        matches = db.find_profiles(profile_id)
    except ProfileStoreError:
        logger.exception("Reading profile %s failed", profile_id)
        raise HTTPException(status_code=500, detail="Read profile failed.")
    if not matches:
        raise HTTPException(status_code=404, detail="Not found")
    return matches[0].as_dict()

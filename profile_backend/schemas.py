"""
Pydantic schemas for the profile backend.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    ok: Literal[True]
    message: str


class UploadResponse(BaseModel):
    imageUrl: str


class ProfileCreateRequest(BaseModel):
    """
    Incoming profile fields. Values are only checked for presence, so every
    field accepts any JSON value.
    """

    model_config = ConfigDict(extra="ignore")

    name: Any = None
    age: Any = None
    bio: Any = None
    imageUrl: Any = None

    def is_complete(self) -> bool:
        # An explicit null age counts as present; a missing key does not.
        return (
            _is_present(self.name)
            and "age" in self.model_fields_set
            and _is_present(self.bio)
            and _is_present(self.imageUrl)
        )


class ProfileResponse(BaseModel):
    id: str
    name: Any
    age: Any
    bio: Any
    imageUrl: Any
    createdAt: str


def _is_present(value: Any) -> bool:
    # Empty arrays and objects still count as present.
    return bool(value) or isinstance(value, (list, dict))

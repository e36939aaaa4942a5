"""
Storage abstraction for S3-compatible object storage and in-memory testing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import quote, urlsplit

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from profile_backend.errors import ObjectStoreError

# Error codes S3-compatible services return from HEAD on a missing bucket.
_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def ensure_container(self) -> None:
        ...

    def upload_bytes(self, name: str, data: bytes, content_type: str) -> str:
        ...

    def object_url(self, name: str) -> str:
        ...

    def get_bytes(self, name: str) -> bytes:
        """Read an object back; routes never call this, tests and tooling do."""
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://example.test/storage"
    stored_objects: dict = None
    content_types: dict = None
    container_created: bool = False

    def __post_init__(self):
        if self.stored_objects is None:
            self.stored_objects = {}
        if self.content_types is None:
            self.content_types = {}

    def ensure_container(self) -> None:
        self.container_created = True

    def upload_bytes(self, name: str, data: bytes, content_type: str) -> str:
        if not self.container_created:
            raise ObjectStoreError("container does not exist")
        self.stored_objects[name] = bytes(data)
        self.content_types[name] = content_type
        return self.object_url(name)

    def object_url(self, name: str) -> str:
        return f"{self.base_url}/{quote(name)}"

    def get_bytes(self, name: str) -> bytes:
        stored = self.stored_objects.get(name)
        if stored is None:
            raise FileNotFoundError(name)
        return stored

    def reset(self) -> None:
        """Clear all stored objects (useful in tests)."""
        self.stored_objects.clear()
        self.content_types.clear()
        self.container_created = False


@dataclass
class S3StorageClient:
    """
    S3-compatible storage client. Objects are written to a single bucket,
    which is created on demand.
    """

    bucket: str
    region: Optional[str]
    endpoint: Optional[str]
    access_key_id: str
    secret_access_key: str
    public_base_url: Optional[str] = None
    addressing_style: str = "virtual"

    def __post_init__(self):
        config = Config(
            s3={"addressing_style": self.addressing_style},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def ensure_container(self) -> None:
        try:
            self._client.head_bucket(Bucket=self.bucket)
            return
        except ClientError as exc:
            if _error_code(exc) not in _MISSING_BUCKET_CODES:
                raise ObjectStoreError(
                    f"Failed to check bucket {self.bucket}"
                ) from exc
        except BotoCoreError as exc:
            raise ObjectStoreError(f"Failed to check bucket {self.bucket}") from exc

        params = {"Bucket": self.bucket}
        # us-east-1 rejects an explicit location constraint.
        if self.region and self.region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        try:
            self._client.create_bucket(**params)
        except ClientError as exc:
            # Another request may have created it between HEAD and CREATE.
            if _error_code(exc) == "BucketAlreadyOwnedByYou":
                return
            raise ObjectStoreError(f"Failed to create bucket {self.bucket}") from exc
        except BotoCoreError as exc:
            raise ObjectStoreError(f"Failed to create bucket {self.bucket}") from exc

    def upload_bytes(self, name: str, data: bytes, content_type: str) -> str:
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=name,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise ObjectStoreError(
                f"Failed to write {name} to bucket {self.bucket}"
            ) from exc
        return self.object_url(name)

    def object_url(self, name: str) -> str:
        key = quote(name)
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        endpoint = urlsplit(self._client.meta.endpoint_url)
        if self.addressing_style == "path":
            return f"{endpoint.scheme}://{endpoint.netloc}/{self.bucket}/{key}"
        return f"{endpoint.scheme}://{self.bucket}.{endpoint.netloc}/{key}"

    def get_bytes(self, name: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=name)
            return response["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            raise ObjectStoreError(
                f"Failed to read {name} from bucket {self.bucket}"
            ) from exc


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))

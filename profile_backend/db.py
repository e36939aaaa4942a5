"""
Document store abstraction for profiles: a SQL-backed implementation and an
in-memory test implementation.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from sqlalchemy import JSON, Column, MetaData, String, Table, create_engine, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from profile_backend.errors import ProfileStoreError


class DbClient(Protocol):
    """Interface for profile persistence."""

    def create_profile(self, record: "ProfileRecord") -> "ProfileRecord":
        ...

    def find_profiles(self, profile_id: str) -> list["ProfileRecord"]:
        ...


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2026-01-01T00:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ProfileRecord:
    profile_id: str
    name: Any
    age: Any
    bio: Any
    image_url: Any
    created_at: str

    @classmethod
    def new(cls, *, name: Any, age: Any, bio: Any, image_url: Any) -> "ProfileRecord":
        return cls(
            profile_id=str(uuid.uuid4()),
            name=name,
            age=age,
            bio=bio,
            image_url=image_url,
            created_at=utc_timestamp(),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "ProfileRecord":
        return cls(
            profile_id=data["id"],
            name=data.get("name"),
            age=data.get("age"),
            bio=data.get("bio"),
            image_url=data.get("imageUrl"),
            created_at=data.get("createdAt"),
        )

    def as_dict(self) -> dict:
        return {
            "id": self.profile_id,
            "name": self.name,
            "age": self.age,
            "bio": self.bio,
            "imageUrl": self.image_url,
            "createdAt": self.created_at,
        }


class InMemoryDbClient:
    """Simple in-memory document store for development and tests."""

    def __init__(self):
        self.profiles: list[dict] = []

    def create_profile(self, record: ProfileRecord) -> ProfileRecord:
        if any(doc["id"] == record.profile_id for doc in self.profiles):
            raise ProfileStoreError(f"Profile {record.profile_id} already exists")
        # Serialize to mimic what a real document store keeps.
        self.profiles.append(json.loads(json.dumps(record.as_dict())))
        return record

    def find_profiles(self, profile_id: str) -> list[ProfileRecord]:
        return [
            ProfileRecord.from_dict(doc)
            for doc in self.profiles
            if doc["id"] == profile_id
        ]

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.profiles.clear()


class SqlDbClient:
    """
    SQLAlchemy-backed document store. Each profile is kept as a JSON document
    keyed by its id. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(
        self,
        database_url: str,
        table_name: str = "profiles",
        schema: Optional[str] = None,
    ):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        self.metadata = MetaData()
        self.table = Table(
            table_name,
            self.metadata,
            Column("id", String, primary_key=True),
            Column("created_at", String, nullable=False, index=True),
            Column("document", JSON, nullable=False),
            schema=schema,
        )
        self.metadata.create_all(self.engine)

    def create_profile(self, record: ProfileRecord) -> ProfileRecord:
        stmt = insert(self.table).values(
            id=record.profile_id,
            created_at=record.created_at,
            document=record.as_dict(),
        )
        try:
            with self.Session() as session:
                session.execute(stmt)
                session.commit()
        except SQLAlchemyError as exc:
            raise ProfileStoreError(
                f"Failed to insert profile {record.profile_id}"
            ) from exc
        return record

    def find_profiles(self, profile_id: str) -> list[ProfileRecord]:
        stmt = (
            select(self.table.c.document)
            .where(self.table.c.id == profile_id)
            .order_by(self.table.c.created_at.asc())
        )
        try:
            with self.Session() as session:
                documents = session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise ProfileStoreError(f"Failed to query profile {profile_id}") from exc
        return [ProfileRecord.from_dict(doc) for doc in documents]

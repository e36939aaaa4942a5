import os
import tempfile
import unittest

from fastapi.testclient import TestClient

from profile_backend.app import create_app
from profile_backend.config import Settings
from profile_backend.db import InMemoryDbClient, SqlDbClient
from profile_backend.dependencies import build_db_client, build_storage_client
from profile_backend.storage import InMemoryStorageClient, S3StorageClient

PROFILE = {"name": "Ana", "age": 30, "bio": "hi", "imageUrl": "https://x/y.jpg"}


class BuildAdapterTests(unittest.TestCase):
    def test_unconfigured_stores_fall_back_to_memory(self):
        settings = Settings(_env_file=None, database_url=None, storage_bucket=None)
        with self.assertLogs("profile_backend.dependencies", level="WARNING"):
            db = build_db_client(settings)
            storage = build_storage_client(settings)
        self.assertIsInstance(db, InMemoryDbClient)
        self.assertIsInstance(storage, InMemoryStorageClient)

    def test_configured_stores(self):
        settings = Settings(
            _env_file=None,
            database_url="sqlite+pysqlite:///:memory:",
            profiles_collection="people",
            storage_endpoint="https://s3.example.test",
            storage_region="us-east-1",
            storage_bucket="photos",
            aws_access_key_id="key",
            aws_secret_access_key="secret",
        )
        db = build_db_client(settings)
        storage = build_storage_client(settings)
        self.assertIsInstance(db, SqlDbClient)
        self.assertEqual(db.table.name, "people")
        self.assertIsInstance(storage, S3StorageClient)
        self.assertEqual(storage.bucket, "photos")

    def test_in_memory_toggle(self):
        settings = Settings(
            _env_file=None,
            use_in_memory_backends=True,
            database_url="sqlite+pysqlite:///:memory:",
            storage_bucket="photos",
        )
        self.assertIsInstance(build_db_client(settings), InMemoryDbClient)
        self.assertIsInstance(build_storage_client(settings), InMemoryStorageClient)


class AppWiringTests(unittest.TestCase):
    def test_app_settings_reach_the_profile_store(self):
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        database_url = "sqlite+pysqlite:///" + os.path.join(tmpdir.name, "profiles.db")
        app = create_app(
            Settings(_env_file=None, database_url=database_url, storage_bucket=None)
        )
        client = TestClient(app)

        created = client.post("/api/profiles", json=PROFILE)
        self.assertEqual(created.status_code, 201)
        self.assertIsInstance(app.state.db_client, SqlDbClient)
        self.addCleanup(app.state.db_client.engine.dispose)

        fetched = client.get(f"/api/profiles/{created.json()['id']}")
        self.assertEqual(fetched.json(), created.json())

    def test_adapters_are_shared_within_an_app(self):
        app = create_app(Settings(_env_file=None, use_in_memory_backends=True))
        client = TestClient(app)

        created = client.post("/api/profiles", json=PROFILE).json()
        self.assertEqual(client.get(f"/api/profiles/{created['id']}").status_code, 200)
        self.assertIsInstance(app.state.db_client, InMemoryDbClient)

    def test_apps_do_not_share_adapters(self):
        first = create_app(Settings(_env_file=None, use_in_memory_backends=True))
        second = create_app(Settings(_env_file=None, use_in_memory_backends=True))

        created = TestClient(first).post("/api/profiles", json=PROFILE).json()
        response = TestClient(second).get(f"/api/profiles/{created['id']}")
        self.assertEqual(response.status_code, 404)


if __name__ == "__main__":
    unittest.main()

import unittest

from profile_backend.config import Settings
from profile_backend.schemas import ProfileCreateRequest
from profile_backend.uploads import UploadedPhoto, file_extension


class FileExtensionTests(unittest.TestCase):
    def test_extensions(self):
        cases = {
            "cat.png": ".png",
            "photo.JPEG": ".JPEG",
            "archive.tar.gz": ".gz",
            "nested/dir/pic.webp": ".webp",
            "snapshot": ".jpg",
            ".hidden": ".jpg",
            "": ".jpg",
        }
        for filename, expected in cases.items():
            with self.subTest(filename=filename):
                self.assertEqual(file_extension(filename), expected)

    def test_object_names_are_unique(self):
        photo = UploadedPhoto(filename="a.png", content_type="image/png", data=b"")
        names = {photo.object_name() for _ in range(50)}
        self.assertEqual(len(names), 50)
        self.assertTrue(all(name.endswith(".png") for name in names))


class ProfileCreateRequestTests(unittest.TestCase):
    def test_complete(self):
        payload = ProfileCreateRequest(name="Ana", age=0, bio="hi", imageUrl="u")
        self.assertTrue(payload.is_complete())

    def test_null_age_counts_as_present(self):
        payload = ProfileCreateRequest.model_validate(
            {"name": "Ana", "age": None, "bio": "hi", "imageUrl": "u"}
        )
        self.assertTrue(payload.is_complete())

    def test_absent_age(self):
        payload = ProfileCreateRequest.model_validate(
            {"name": "Ana", "bio": "hi", "imageUrl": "u"}
        )
        self.assertFalse(payload.is_complete())

    def test_falsy_values(self):
        for value in ("", 0, False, None):
            with self.subTest(value=value):
                payload = ProfileCreateRequest(
                    name=value, age=1, bio="hi", imageUrl="u"
                )
                self.assertFalse(payload.is_complete())


class SettingsTests(unittest.TestCase):
    def test_missing_required(self):
        settings = Settings(
            _env_file=None,
            database_url="sqlite+pysqlite:///:memory:",
            profiles_collection="profiles",
            storage_endpoint=None,
            storage_bucket="photos",
            aws_access_key_id="key",
            aws_secret_access_key=None,
        )
        self.assertEqual(
            settings.missing_required(),
            ["STORAGE_ENDPOINT", "AWS_SECRET_ACCESS_KEY"],
        )

    def test_default_upload_limit(self):
        self.assertEqual(Settings(_env_file=None).max_upload_bytes, 4 * 1024 * 1024)


if __name__ == "__main__":
    unittest.main()

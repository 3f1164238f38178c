from __future__ import annotations

import pytest
from google.api_core import exceptions as gcloud_exceptions

from conftest import image_bytes, image_upload
from recipeshare.exceptions import StorageError
from recipeshare.gcp_storage import GCSImageStorage
from recipeshare.extensions import db
from recipeshare.models import Recipe, User
from recipeshare.repository import SQLRecipeRepository
from recipeshare.services import RecipeService
from recipeshare.storage import LocalImageStorage, build_image_name


def test_build_image_name_is_unique_and_safe():
    first = build_image_name("../../etc/My Dinner.png")
    second = build_image_name("../../etc/My Dinner.png")

    assert first != second
    assert first.startswith("recipes/")
    assert first.endswith("_etc_My_Dinner.png")
    assert "/.." not in first


def test_build_image_name_without_filename():
    assert build_image_name(None).endswith("_picture")


def test_local_store_and_delete(tmp_path):
    storage = LocalImageStorage(tmp_path)

    path = storage.store(image_upload("plate.png"))

    assert storage.exists(path)
    assert (tmp_path / path).read_bytes() == image_bytes()
    assert storage.url(path) == f"/storage/{path}"

    assert storage.delete(path) is True
    assert not storage.exists(path)
    assert storage.delete(path) is False


def test_local_storage_refuses_paths_outside_root(tmp_path):
    storage = LocalImageStorage(tmp_path / "public")

    with pytest.raises(StorageError):
        storage.delete("../secrets.txt")
    assert storage.exists("../secrets.txt") is False


class FakeBlob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name
        self.public_url = f"https://storage.example.com/{name}"

    def upload_from_file(self, stream, content_type=None):
        self.bucket.objects[self.name] = (stream.read(), content_type)

    def delete(self):
        if self.name not in self.bucket.objects:
            raise gcloud_exceptions.NotFound(f"{self.name} not found")
        if self.bucket.delete_error is not None:
            raise self.bucket.delete_error
        del self.bucket.objects[self.name]

    def exists(self):
        return self.name in self.bucket.objects

    def generate_signed_url(self, **kwargs):
        if not self.bucket.can_sign:
            raise AttributeError("credentials cannot sign")
        return f"{self.public_url}?signed=1"


class FakeBucket:
    def __init__(self, can_sign=True):
        self.objects = {}
        self.can_sign = can_sign
        self.delete_error = None

    def blob(self, name):
        return FakeBlob(self, name)


def test_gcs_store_uploads_blob():
    bucket = FakeBucket()
    storage = GCSImageStorage(bucket=bucket)

    path = storage.store(image_upload("taco.png"))

    assert path.startswith("recipes/") and path.endswith("_taco.png")
    assert bucket.objects[path] == (image_bytes(), "image/png")
    assert storage.exists(path)


def test_gcs_delete_reports_missing_blob():
    bucket = FakeBucket()
    storage = GCSImageStorage(bucket=bucket)
    path = storage.store(image_upload())

    assert storage.delete(path) is True
    assert storage.delete(path) is False


def test_gcs_delete_failure_raises_storage_error():
    bucket = FakeBucket()
    storage = GCSImageStorage(bucket=bucket)
    path = storage.store(image_upload())
    bucket.delete_error = gcloud_exceptions.ServiceUnavailable("try later")

    with pytest.raises(StorageError):
        storage.delete(path)


def test_gcs_url_falls_back_to_public_url():
    assert GCSImageStorage(bucket=FakeBucket()).url("recipes/a.png").endswith("?signed=1")
    assert (
        GCSImageStorage(bucket=FakeBucket(can_sign=False)).url("recipes/a.png")
        == "https://storage.example.com/recipes/a.png"
    )


def test_gcs_requires_bucket_name():
    with pytest.raises(StorageError):
        GCSImageStorage()


def test_gcs_transport_failure_on_delete_raises_storage_error():
    bucket = FakeBucket()
    storage = GCSImageStorage(bucket=bucket)
    path = storage.store(image_upload())
    bucket.delete_error = ConnectionError("network down")

    with pytest.raises(StorageError):
        storage.delete(path)


def test_recipe_row_is_deleted_when_bucket_is_unreachable(ctx):
    bucket = FakeBucket()
    images = GCSImageStorage(bucket=bucket)
    service = RecipeService(SQLRecipeRepository(), images)
    user = User(name="Cook", email="cook@example.com")
    db.session.add(user)
    db.session.commit()
    recipe = service.create(
        {
            "name": "Pho",
            "cuisine_type": "Vietnamese",
            "ingredients": "noodles",
            "steps": "Simmer.",
            "picture": image_upload("pho.png"),
        },
        user,
    )
    recipe_id = recipe.id
    bucket.delete_error = ConnectionError("network down")

    assert service.delete(recipe) is True

    assert db.session.get(Recipe, recipe_id) is None

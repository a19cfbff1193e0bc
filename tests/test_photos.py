"""
Tests for photo upload URLs and removal.
"""
import re
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from fastapi import status
from minio.error import S3Error

from app.core.exceptions import InvalidArgumentError, StorageError
from app.services.photo_storage import PhotoStorage, unique_object_name

OBJECT_NAME = re.compile(r"^audit-\d{13}-[0-9a-f]{8}\.(\w+)$")


class BucketDenied(S3Error):
    """S3Error without an HTTP response behind it."""

    def __init__(self):
        Exception.__init__(self, "Access Denied")

    def __str__(self):
        return "Access Denied"


@pytest.mark.parametrize("filename,extension", [
    ("IMG_0001.JPG", "jpg"),
    ("site.photo.png", "png"),
    ("no_extension", "jpg"),
])
def test_unique_object_name(filename, extension):
    name = unique_object_name(filename)

    match = OBJECT_NAME.match(name)
    assert match
    assert match.group(1) == extension


def test_unique_object_names_differ():
    assert len({unique_object_name("a.jpg") for _ in range(50)}) == 50


def test_create_upload_target_presigns_put():
    client = MagicMock()
    client.presigned_put_object.return_value = "https://minio.test/audit-photos/x?sig=1"
    storage = PhotoStorage(client=client, bucket="audit-photos")

    target = storage.create_upload_target("photo.png")

    bucket, object_name = client.presigned_put_object.call_args.args
    assert bucket == "audit-photos"
    assert object_name == target.object_name
    assert client.presigned_put_object.call_args.kwargs["expires"] == timedelta(hours=1)
    assert target.upload_url == "https://minio.test/audit-photos/x?sig=1"
    assert target.file_url.endswith(f"/{target.object_name}")
    assert target.object_name.endswith(".png")


def test_create_upload_target_storage_failure():
    client = MagicMock()
    client.presigned_put_object.side_effect = BucketDenied()

    with pytest.raises(StorageError):
        PhotoStorage(client=client, bucket="audit-photos").create_upload_target("photo.jpg")


def test_delete_photo_removes_object():
    client = MagicMock()

    PhotoStorage(client=client, bucket="audit-photos").delete_photo("audit-1-abcd.jpg")

    client.remove_object.assert_called_once_with("audit-photos", "audit-1-abcd.jpg")


@pytest.mark.parametrize("name", ["", ".", "..", "nested/photo.jpg"])
def test_delete_photo_rejects_path_names(name):
    client = MagicMock()

    with pytest.raises(InvalidArgumentError):
        PhotoStorage(client=client, bucket="audit-photos").delete_photo(name)
    client.remove_object.assert_not_called()


def test_delete_photo_storage_failure():
    client = MagicMock()
    client.remove_object.side_effect = BucketDenied()

    with pytest.raises(StorageError):
        PhotoStorage(client=client, bucket="audit-photos").delete_photo("audit-1-abcd.jpg")


def test_upload_url_endpoint(client, photo_storage):
    response = client.post("/api/v1/audits/upload-url", json={"filename": "hazard.jpeg"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["object_name"] == photo_storage.issued[0]
    assert data["file_url"] == f"https://storage.test/audit-photos/{data['object_name']}"
    assert data["upload_url"].startswith(data["file_url"])


def test_upload_url_endpoint_requires_filename(client):
    response = client.post("/api/v1/audits/upload-url", json={"filename": ""})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_delete_photo_endpoint(client, photo_storage):
    response = client.delete("/api/v1/audits/photos/audit-1-abcd.jpg")

    assert response.status_code == status.HTTP_200_OK
    assert photo_storage.deleted == ["audit-1-abcd.jpg"]

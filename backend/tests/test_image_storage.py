"""Unit tests for the profile image file area."""
from __future__ import annotations

import io

import pytest

from app.core.errors import FileStorageError, ValidationFailed
from app.services.image_storage import ImageStorage, ImageUpload


@pytest.fixture
def storage(tmp_path) -> ImageStorage:
    storage = ImageStorage(tmp_path / "uploads", "http://cdn.test/", max_bytes=1000)
    storage.ensure_directory()
    return storage


@pytest.mark.parametrize(
    ("original", "expected"),
    [("me.png", "A01-1.png"), ("photo.final.JPG", "A01-1.JPG"), ("noext", "A01-1"), ("", "A01-1"), ("../../x.gif", "A01-1.gif")],
)
def test_filename_keeps_only_the_extension(original, expected):
    assert ImageStorage.filename_for("A01-1", original) == expected


def test_save_writes_file_and_returns_public_url(storage):
    url = storage.save("A03-3", ImageUpload("me.png", io.BytesIO(b"pixels")))

    assert url == "http://cdn.test/uploads/A03-3.png"
    assert (storage.upload_dir / "A03-3.png").read_bytes() == b"pixels"


def test_oversized_stream_is_rejected_without_leftovers(storage):
    with pytest.raises(ValidationFailed) as excinfo:
        storage.save("A03-3", ImageUpload("big.png", io.BytesIO(b"x" * 5000)))

    assert excinfo.value.code == "bad_form"
    assert list(storage.upload_dir.iterdir()) == []


def test_missing_directory_is_an_io_error(tmp_path):
    storage = ImageStorage(tmp_path / "missing", "http://cdn.test", max_bytes=1000)

    with pytest.raises(FileStorageError):
        storage.save("A01-1", ImageUpload("me.png", io.BytesIO(b"pixels")))


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("http://cdn.test/uploads/A01-1.png", "A01-1.png"),
        ("http://elsewhere.test/uploads/A01-1.png", None),
        ("http://cdn.test/uploads/../secret", None),
        ("http://cdn.test/uploads/", None),
        ("", None),
    ],
)
def test_filename_from_url_only_trusts_own_area(storage, url, expected):
    assert storage.filename_from_url(url) == expected


def test_discard_removes_file_and_ignores_foreign_urls(storage):
    storage.save("A01-1", ImageUpload("me.png", io.BytesIO(b"pixels")))

    storage.discard("http://elsewhere.test/uploads/A01-1.png")
    assert (storage.upload_dir / "A01-1.png").exists()

    storage.discard("http://cdn.test/uploads/A01-1.png")
    assert not (storage.upload_dir / "A01-1.png").exists()

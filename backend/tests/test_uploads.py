import io
import os
import re

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from bikehub.errors import StorageError, ValidationError
from bikehub.utils.uploads import UploadStore


def make_upload(data, filename="trek.jpg", content_type="image/jpeg"):
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def store(tmp_path):
    s = UploadStore(str(tmp_path / "uploads"), max_bytes=64)
    s.ensure_directory()
    return s


def test_generated_name_keeps_extension(store):
    name = store.generate_filename("image", "My Bike.PNG")
    assert re.fullmatch(r"image-\d{13}-\d+\.PNG", name)


def test_generated_name_without_extension(store):
    assert re.fullmatch(r"image-\d+-\d+", store.generate_filename("image", "bike"))


def test_generated_names_differ(store):
    names = {store.generate_filename("image", "a.jpg") for _ in range(20)}
    assert len(names) > 1


def test_save_writes_bytes(store):
    data = b"\xff\xd8" + b"x" * 30
    name = store.save(make_upload(data))

    with open(os.path.join(store.directory, name), "rb") as f:
        assert f.read() == data
    assert store.public_url(name) == f"/uploads/{name}"


def test_save_accepts_exact_limit(store):
    assert store.save(make_upload(b"x" * 64))


def test_save_rejects_oversize(store):
    with pytest.raises(ValidationError) as exc:
        store.save(make_upload(b"x" * 65))
    assert "size limit" in exc.value.message
    assert os.listdir(store.directory) == []


def test_save_rejects_non_image(store):
    with pytest.raises(ValidationError) as exc:
        store.save(make_upload(b"hello", filename="notes.txt", content_type="text/plain"))
    assert exc.value.message == "Only image files are allowed"
    assert os.listdir(store.directory) == []


def test_save_rejects_missing_file(store):
    with pytest.raises(ValidationError) as exc:
        store.save(None)
    assert exc.value.message == "No image file provided"


def test_default_limit_is_five_mib(tmp_path):
    assert UploadStore(str(tmp_path)).max_bytes == 5 * 1024 * 1024


def test_failed_write_leaves_no_file(store, monkeypatch):
    real_open = open

    class HalfWrittenFile:
        def __init__(self, path):
            self.f = real_open(path, "wb")

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            self.f.close()

        def write(self, data):
            self.f.write(data[:4])
            raise OSError("No space left on device")

    monkeypatch.setattr("bikehub.utils.uploads.open", lambda path, mode: HalfWrittenFile(path), raising=False)

    with pytest.raises(StorageError) as exc:
        store.save(make_upload(b"\xff\xd8" + b"x" * 30))
    assert exc.value.message == "Image upload failed"
    assert os.listdir(store.directory) == []

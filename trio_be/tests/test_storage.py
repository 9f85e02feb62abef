import re

import pytest

from app.utils.storage import (
    MEDIA_ROOT,
    StorageError,
    delete_media_file,
    delete_media_files,
    product_image_path,
    upload,
)


def test_upload_writes_file_and_returns_public_url():
    url = upload(b"\x89PNG data", "products/shirt.png")

    assert url == "/media/products/shirt.png"
    assert (MEDIA_ROOT / "products" / "shirt.png").read_bytes() == b"\x89PNG data"


def test_upload_refuses_overwrite_without_upsert():
    upload(b"one", "products/shirt.png")
    with pytest.raises(StorageError):
        upload(b"two", "products/shirt.png")

    upload(b"two", "products/shirt.png", upsert=True)
    assert (MEDIA_ROOT / "products" / "shirt.png").read_bytes() == b"two"


@pytest.mark.parametrize("path", ["../outside.png", "products/../../outside.png", "", "/"])
def test_upload_rejects_paths_outside_media_root(path):
    with pytest.raises(StorageError):
        upload(b"x", path)


def test_product_image_path_format():
    path = product_image_path("Front View.JPEG", 2)
    assert re.fullmatch(r"products/\d+-2-[0-9a-f]{7}\.jpeg", path)
    assert product_image_path(None).endswith(".jpg")


def test_delete_media_file():
    url = upload(b"x", "products/gone.jpg")

    assert delete_media_file(url) is True
    assert not (MEDIA_ROOT / "products" / "gone.jpg").exists()
    assert delete_media_file(url) is False


@pytest.mark.parametrize("url", [None, "", "https://cdn.example.com/a.jpg", "/media/../secret"])
def test_delete_media_file_ignores_foreign_urls(url):
    assert delete_media_file(url) is False


def test_delete_media_files_counts_removed():
    urls = [upload(b"x", f"products/{i}.jpg") for i in range(3)]
    assert delete_media_files(urls + ["/media/products/missing.jpg"]) == 3

# tests/storage/test_cleanup.py
from storefront_http_api.storage import discard_objects
from tests.conftest import PNG, RecordingStorage


def test_discard_removes_every_object():
    gateway = RecordingStorage()
    a = gateway.upload(PNG, "image/png", "product-images", "a.png")
    b = gateway.upload(PNG, "image/png", "product-images", "b.png")

    removed = discard_objects(gateway, "product-images", [a.url, b.url], reason="test")

    assert removed == 2
    assert gateway.objects == {}


def test_discard_continues_past_failures():
    gateway = RecordingStorage()
    a = gateway.upload(PNG, "image/png", "product-images", "a.png")
    b = gateway.upload(PNG, "image/png", "product-images", "b.png")
    gateway.fail_delete_paths.add(a.path)

    removed = discard_objects(gateway, "product-images", [a.url, b.url], reason="test")

    assert removed == 1
    assert [path for _, path in gateway.deleted] == [a.path, b.path]
    assert ("product-images", b.path) not in gateway.objects


def test_discard_skips_foreign_and_empty_urls():
    gateway = RecordingStorage()

    removed = discard_objects(
        gateway,
        "product-images",
        ["", "https://images.unsplash.com/photo.jpg"],
        reason="test",
    )

    assert removed == 0
    assert gateway.deleted == []


def test_discard_leaves_objects_of_other_buckets_alone():
    gateway = RecordingStorage()
    cover = gateway.upload(PNG, "image/png", "blog-images", "cover.png")

    removed = discard_objects(gateway, "product-images", [cover.url], reason="test")

    assert removed == 0
    assert gateway.deleted == []
    assert ("blog-images", cover.path) in gateway.objects

import pytest

from getlost_bundler.assets import LocalAssetStore


@pytest.fixture
def stored_video(tmp_path, mp4_bytes):
    source = tmp_path / "clip.mp4"
    source.write_bytes(mp4_bytes)
    store = LocalAssetStore(tmp_path / "assets", url_prefix="/api/uploads/admin/")
    return store, store.store(source, "book-1", "marketing-assets", "clip.mp4")


def test_store_copies_file_and_builds_url(stored_video, mp4_bytes):
    store, stored = stored_video
    assert stored.file_url == "/api/uploads/admin/book-1/marketing-assets/videos/clip.mp4"
    assert stored.destination_path == store.root / "book-1" / "marketing-assets" / "videos" / "clip.mp4"
    assert stored.destination_path.read_bytes() == mp4_bytes


def test_read_returns_whole_file(stored_video, mp4_bytes):
    store, _ = stored_video
    served = store.read(["book-1", "marketing-assets", "videos", "clip.mp4"])
    assert served.status == 200
    assert served.mime_type == "video/mp4"
    assert served.data == mp4_bytes
    assert served.total_size == len(mp4_bytes)


def test_read_honors_byte_range(stored_video, mp4_bytes):
    store, _ = stored_video
    served = store.read(
        ["book-1", "marketing-assets", "videos", "clip.mp4"], range_header="bytes=4-11"
    )
    assert served.status == 206
    assert served.data == mp4_bytes[4:12]
    assert served.content_range == f"bytes 4-11/{len(mp4_bytes)}"


def test_open_ended_range_reads_to_end(stored_video, mp4_bytes):
    store, _ = stored_video
    served = store.read(
        ["book-1", "marketing-assets", "videos", "clip.mp4"], range_header="bytes=10-"
    )
    assert served.data == mp4_bytes[10:]


def test_read_missing_file_returns_none(stored_video):
    store, _ = stored_video
    assert store.read(["book-1", "marketing-assets", "videos", "other.mp4"]) is None


def test_read_rejects_escaping_paths(stored_video):
    store, _ = stored_video
    with pytest.raises(PermissionError):
        store.read(["..", "..", "etc", "passwd"])


def test_read_requires_a_filename(stored_video):
    store, _ = stored_video
    with pytest.raises(ValueError):
        store.read([])

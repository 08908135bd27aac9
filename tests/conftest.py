"""Shared fixtures for getlost_bundler tests."""

import io
import zipfile
from pathlib import Path

import pytest

from getlost_bundler.config import SYSTEM_SEED_OWNER
from getlost_bundler.models import ContentKind, SeededRecord
from getlost_bundler.store import MemoryContentStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 32


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes():
    return JPEG_BYTES


@pytest.fixture
def mp4_bytes():
    return MP4_BYTES


@pytest.fixture
def upload_dir(tmp_path):
    """A nested directory so that its parent is still inside tmp_path."""
    path = tmp_path / "work" / "upload"
    path.mkdir(parents=True)
    return path


class FakeAssetStore:
    """Records store calls and hands out predictable URLs."""

    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = set(fail_on)

    def store(self, source, scope_id, category, filename):
        from getlost_bundler.assets import StoredAsset

        if filename in self.fail_on:
            raise OSError(f"disk full while storing {filename}")
        self.calls.append((Path(source), scope_id, category, filename))
        return StoredAsset(
            file_url=f"https://stored/{scope_id}/{category}/{filename}",
            destination_path=Path(source),
        )


@pytest.fixture
def asset_store():
    return FakeAssetStore()


def make_record(record_id, kind, title=None, slug=None, owner=SYSTEM_SEED_OWNER, **metadata):
    return SeededRecord(
        id=record_id,
        kind=kind,
        owner_id=owner,
        title=title,
        slug=slug,
        metadata=dict(metadata),
        fields={"htmlContent": f"<h1>{title or record_id}</h1>", "status": "completed"},
    )


@pytest.fixture
def seeded_store():
    """Seeded templates in insertion order plus one row owned by a real book."""
    store = MemoryContentStore()
    store.insert_record(
        make_record(
            "report-beach",
            ContentKind.REPORT,
            seededFileName="Beach Read by Emily Henry.html",
            uploadFileNames=["Beach Read by Emily Henry.pdf"],
        )
    )
    store.insert_record(
        make_record("report-northern", ContentKind.REPORT, title="Northern Hearts")
    )
    store.insert_record(
        make_record(
            "landing-gift",
            ContentKind.LANDING_PAGE,
            title="The Everlasting Gift",
            slug="everlasting-gift-landing",
            uploadFileNames=["The Everlasting Gift Book.pdf"],
        )
    )
    store.insert_record(
        make_record(
            "cover-wool", ContentKind.COVER, title="Wool", owner="book-real", uploadFileNames=["Wool.pdf"]
        )
    )
    return store


def build_zip(files):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in files.items():
            archive.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def zip_builder():
    return build_zip


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def asset_store_factory():
    return FakeAssetStore

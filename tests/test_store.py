import json

import pytest

from getlost_bundler.models import ContentKind, SeededRecord
from getlost_bundler.store import JsonContentStore, MemoryContentStore


def test_memory_store_lists_by_kind_and_owner(seeded_store):
    reports = seeded_store.list_records(ContentKind.REPORT, "SYSTEM_SEEDED_REPORTS")
    assert [record.id for record in reports] == ["report-beach", "report-northern"]
    assert seeded_store.list_records(ContentKind.COVER, "book-real")[0].id == "cover-wool"


def test_memory_store_rejects_duplicate_ids(record_factory):
    store = MemoryContentStore()
    store.insert_record(record_factory("dup", ContentKind.REPORT))
    with pytest.raises(ValueError):
        store.insert_record(record_factory("dup", ContentKind.REPORT))


def test_slug_exists_only_considers_landing_pages(seeded_store):
    assert seeded_store.slug_exists("everlasting-gift-landing")
    assert not seeded_store.slug_exists("wool")


def test_json_store_persists_records(tmp_path, record_factory):
    path = tmp_path / "records.json"
    store = JsonContentStore(path)
    store.insert_record(
        record_factory("r1", ContentKind.REPORT, title="Wool", uploadFileNames=["Wool.pdf"])
    )

    reloaded = JsonContentStore(path)
    record = reloaded.get("r1")
    assert record.title == "Wool"
    assert record.metadata == {"uploadFileNames": ["Wool.pdf"]}
    assert record.created_at == store.get("r1").created_at


def test_json_store_decodes_metadata_strings(tmp_path):
    path = tmp_path / "records.json"
    rows = [
        {
            "id": "a",
            "kind": "cover",
            "owner_id": "SYSTEM_SEEDED_REPORTS",
            "title": "Wool",
            "metadata": json.dumps({"uploadFileNames": ["Wool by Hugh Howey.pdf"]}),
            "fields": {"coverType": "ebook"},
        },
        {
            "id": "b",
            "kind": "cover",
            "owner_id": "SYSTEM_SEEDED_REPORTS",
            "metadata": "{not json",
        },
    ]
    path.write_text(json.dumps({"records": rows}), encoding="utf-8")

    store = JsonContentStore(path)
    assert store.get("a").filename_candidates == ["Wool", "ebook", "Wool by Hugh Howey.pdf"]
    assert store.get("b").metadata == {}


def test_filename_candidates_drop_blank_and_non_string_values():
    record = SeededRecord(
        id="x",
        kind=ContentKind.LANDING_PAGE,
        owner_id="o",
        title="  ",
        slug="wool-landing",
        metadata={"seededFileName": "wool.html", "uploadFileNames": ["", 7, "Wool.pdf"]},
    )
    assert record.filename_candidates == ["wool-landing", "wool.html", "Wool.pdf"]

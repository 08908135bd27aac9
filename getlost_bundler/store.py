"""Content-record storage collaborators."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Protocol

from .models import ContentKind, SeededRecord

logger = logging.getLogger("getlost_bundler")


class ContentStore(Protocol):
    """Record persistence consumed by the matcher and linker."""

    def list_records(self, kind: ContentKind, owner_id: str) -> List[SeededRecord]:
        ...

    def insert_record(self, record: SeededRecord) -> str:
        ...

    def slug_exists(self, slug: str) -> bool:
        ...


class MemoryContentStore:
    """Insertion-ordered in-process store."""

    def __init__(self) -> None:
        self._records: Dict[str, SeededRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def get(self, record_id: str) -> SeededRecord:
        return self._records[record_id]

    def all_records(self) -> List[SeededRecord]:
        return list(self._records.values())

    def list_records(self, kind: ContentKind, owner_id: str) -> List[SeededRecord]:
        return [
            record
            for record in self._records.values()
            if record.kind == kind and record.owner_id == owner_id
        ]

    def insert_record(self, record: SeededRecord) -> str:
        if record.id in self._records:
            raise ValueError(f"Record {record.id} already exists")
        self._records[record.id] = record
        return record.id

    def slug_exists(self, slug: str) -> bool:
        return any(
            record.kind == ContentKind.LANDING_PAGE and record.slug == slug
            for record in self._records.values()
        )


class JsonContentStore(MemoryContentStore):
    """Memory store persisted to a JSON file after every insert."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            self._load()

    def _load(self) -> None:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        for item in data.get("records", []):
            record = SeededRecord.from_dict(item)
            self._records[record.id] = record
        logger.debug("Loaded %d record(s) from %s", len(self._records), self.path)

    def save(self) -> None:
        payload = {"records": [record.to_dict() for record in self._records.values()]}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
        )

    def insert_record(self, record: SeededRecord) -> str:
        record_id = super().insert_record(record)
        self.save()
        return record_id

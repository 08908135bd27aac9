"""Data models shared by the bundling and seeded-content pipeline."""

from __future__ import annotations

import datetime as dt
import enum
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger("getlost_bundler")


class MediaKind(str, enum.Enum):
    """Syntactic context a media reference was found in."""

    IMAGE = "image"
    BACKGROUND = "background"
    VIDEO = "video"


class ContentKind(str, enum.Enum):
    """Families of seeded content that can be linked to a real book."""

    REPORT = "report"
    MARKETING_ASSET = "marketing_asset"
    COVER = "cover"
    LANDING_PAGE = "landing_page"


@dataclass(frozen=True)
class MediaReference:
    """Raw media path discovered in HTML markup."""

    raw_path: str
    kind: MediaKind


@dataclass
class ResolvedMedia:
    """A media reference matched to a readable file inside a search root."""

    reference: MediaReference
    absolute_path: Path
    mime_type: str
    data: bytes


@dataclass(frozen=True)
class BundledDocument:
    """Result of bundling one HTML document."""

    html: str
    images_embedded: int = 0
    videos_rewritten: int = 0
    missing: Tuple[str, ...] = ()
    video_urls: Tuple[str, ...] = ()

    def summary(self) -> str:
        return (
            f"Embedded {self.images_embedded} image(s), "
            f"rewrote {self.videos_rewritten} video reference(s)"
        )


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).replace(microsecond=0)


@dataclass
class SeededRecord:
    """A report, marketing asset, cover or landing page row.

    ``owner_id`` is the book (or book version, for reports) the row belongs
    to. Seeded templates live under the system seed owner. ``fields`` holds
    the content columns (HTML, image URLs, status...) that get copied when
    linking; ``metadata`` is the decoded metadata/admin-notes JSON.
    """

    id: str
    kind: ContentKind
    owner_id: str
    title: Optional[str] = None
    slug: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    fields: Dict[str, Any] = field(default_factory=dict)
    created_at: dt.datetime = field(default_factory=_utcnow)
    updated_at: dt.datetime = field(default_factory=_utcnow)

    @property
    def filename_candidates(self) -> List[str]:
        """Names this record may have been uploaded under."""
        upload_names = self.metadata.get("uploadFileNames") or []
        if not isinstance(upload_names, list):
            upload_names = []
        raw = [
            self.title,
            self.slug,
            self.fields.get("coverType"),
            self.metadata.get("seededFileName"),
            *upload_names,
        ]
        return [value for value in raw if isinstance(value, str) and value.strip()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "owner_id": self.owner_id,
            "title": self.title,
            "slug": self.slug,
            "metadata": self.metadata,
            "fields": self.fields,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeededRecord":
        metadata = data.get("metadata") or {}
        if isinstance(metadata, str):
            try:
                metadata = json.loads(metadata)
            except json.JSONDecodeError:
                logger.debug("Ignoring invalid metadata JSON on record %s", data.get("id"))
                metadata = {}
        if not isinstance(metadata, dict):
            metadata = {}

        record = cls(
            id=str(data["id"]),
            kind=ContentKind(data["kind"]),
            owner_id=str(data["owner_id"]),
            title=data.get("title"),
            slug=data.get("slug"),
            metadata=metadata,
            fields=dict(data.get("fields") or {}),
        )
        for attr in ("created_at", "updated_at"):
            value = data.get(attr)
            if value:
                setattr(record, attr, dt.datetime.fromisoformat(value))
        return record


@dataclass(frozen=True)
class MatchResult:
    """A seeded record together with the candidate name that matched."""

    record: SeededRecord
    matched_candidate: str


@dataclass(frozen=True)
class ReportFiles:
    """HTML and PDF renditions of a report found on disk."""

    html_path: Optional[Path] = None
    pdf_path: Optional[Path] = None

    @property
    def found(self) -> bool:
        return self.html_path is not None or self.pdf_path is not None

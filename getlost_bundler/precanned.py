"""Manifest-driven precanned content packages and standalone cover images."""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional

from .matcher import filenames_match

logger = logging.getLogger("getlost_bundler")

MANIFEST_NAME = "manifest.json"
UPLOADS_DIR_NAME = "uploads"
COVER_IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


@dataclass
class PrecannedBook:
    """One book entry of the precanned manifest.

    Paths (``report``, ``preview``, cover and video files) are relative to
    the precanned root directory.
    """

    key: str
    title: str
    upload_file_names: List[str] = field(default_factory=list)
    report: Optional[str] = None
    preview: Optional[str] = None
    landing_page: Dict[str, Any] = field(default_factory=dict)
    marketing_html: Optional[str] = None
    covers_html: Optional[str] = None
    videos: List[Dict[str, Any]] = field(default_factory=list)
    covers: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def filename_candidates(self) -> List[str]:
        """Upload names, then the report and preview file names, deduplicated."""
        names = [name for name in self.upload_file_names if name]
        for relative in (self.report, self.preview):
            if relative:
                names.append(PurePosixPath(relative).name)
        return list(dict.fromkeys(names))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrecannedBook":
        upload_names = data.get("uploadFileNames") or []
        return cls(
            key=str(data["key"]),
            title=str(data.get("title") or data["key"]),
            upload_file_names=[name for name in upload_names if isinstance(name, str)],
            report=data.get("report"),
            preview=data.get("preview"),
            landing_page=dict(data.get("landingPage") or {}),
            marketing_html=data.get("marketingHtml"),
            covers_html=data.get("coversHtml"),
            videos=list(data.get("videos") or []),
            covers=list(data.get("covers") or []),
        )


@dataclass
class PrecannedManifest:
    books: List[PrecannedBook] = field(default_factory=list)


def load_manifest(root: Path) -> PrecannedManifest:
    """Read ``<root>/manifest.json``.

    A missing file raises ``FileNotFoundError`` and malformed JSON raises
    ``ValueError``.
    """
    path = Path(root) / MANIFEST_NAME
    data = json.loads(path.read_text(encoding="utf-8"))
    books = [PrecannedBook.from_dict(item) for item in data.get("books") or []]
    logger.debug("Loaded %d precanned package(s) from %s", len(books), path)
    return PrecannedManifest(books=books)


def find_precanned_package(
    uploaded_name: Optional[str], manifest: PrecannedManifest
) -> Optional[PrecannedBook]:
    """First manifest book with a candidate name matching the upload."""
    if not uploaded_name:
        return None
    for book in manifest.books:
        for candidate in book.filename_candidates:
            if filenames_match(candidate, uploaded_name):
                logger.info(
                    "Matched %r with precanned package %s via %r",
                    uploaded_name,
                    book.key,
                    candidate,
                )
                return book
    return None


def find_precanned_package_by_key(
    key: Optional[str], manifest: PrecannedManifest
) -> Optional[PrecannedBook]:
    if not key:
        return None
    return next((book for book in manifest.books if book.key == key), None)


def list_upload_images(root: Path) -> List[str]:
    """Image file names directly inside ``<root>/uploads``, in name order."""
    uploads_dir = Path(root) / UPLOADS_DIR_NAME
    if not uploads_dir.is_dir():
        return []
    return sorted(
        entry.name
        for entry in uploads_dir.iterdir()
        if entry.is_file() and entry.suffix.lower() in COVER_IMAGE_SUFFIXES
    )


def find_precanned_cover_image(
    uploaded_name: Optional[str],
    root: Path,
    public_root: Path,
    url_prefix: str = "/uploads/precanned",
) -> Optional[str]:
    """Publish the standalone cover image matching an upload and return its URL.

    ``BeachRead.pdf`` matches ``uploads/beach_read.jpg``. The image is copied
    to ``<public_root>/uploads/<name>`` unless it is already there.
    """
    if not uploaded_name:
        return None
    for image_name in list_upload_images(root):
        if not filenames_match(image_name, uploaded_name):
            continue
        destination = Path(public_root) / UPLOADS_DIR_NAME / image_name
        if not destination.exists():
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(Path(root) / UPLOADS_DIR_NAME / image_name, destination)
            logger.debug("Published precanned cover %s to %s", image_name, destination)
        return f"{url_prefix.rstrip('/')}/{UPLOADS_DIR_NAME}/{image_name}"
    return None

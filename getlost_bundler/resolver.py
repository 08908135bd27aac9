"""Locate referenced media files on disk and determine their MIME types."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from filetype import guess

from .models import MediaReference, ResolvedMedia

logger = logging.getLogger("getlost_bundler")

IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}
ASSET_MIME_TYPES = {
    **IMAGE_MIME_TYPES,
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
    ".m4v": "video/x-m4v",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    ".pdf": "application/pdf",
    ".html": "text/html",
    ".htm": "text/html",
}
DEFAULT_IMAGE_MIME = "image/jpeg"
DEFAULT_ASSET_MIME = "application/octet-stream"


def image_mime_type(path: Path) -> str:
    """MIME type used for data URIs; unknown extensions are treated as JPEG."""
    return IMAGE_MIME_TYPES.get(path.suffix.lower(), DEFAULT_IMAGE_MIME)


def guess_mime_type(path: Path, data: Optional[bytes] = None) -> str:
    """MIME type for serving an arbitrary stored asset."""
    known = ASSET_MIME_TYPES.get(path.suffix.lower())
    if known:
        return known
    if data:
        kind = guess(data)
        if kind:
            return kind.mime
    return DEFAULT_ASSET_MIME


def is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


def list_subdirectories(directory: Path) -> List[Path]:
    """Immediate subdirectories in name order; empty when unreadable or absent."""
    if not directory.is_dir():
        return []
    try:
        return sorted(entry for entry in directory.iterdir() if entry.is_dir())
    except OSError as exc:
        logger.debug("Could not list %s: %s", directory, exc)
        return []


def build_search_dirs(
    primary: Optional[Path], reports_dir: Optional[Path] = None
) -> List[Path]:
    """Primary dir, its subdirs, then the reports dir and its subdirs.

    Either root may be ``None`` or missing, in which case it is skipped.
    """
    search_dirs: List[Path] = []
    for root in (primary, reports_dir):
        if root is None or not root.is_dir():
            continue
        search_dirs.append(root)
        search_dirs.extend(list_subdirectories(root))
    return search_dirs


def _candidates(raw_path: str, search_dir: Path) -> Iterator[Tuple[Path, Tuple[Path, Path]]]:
    base = search_dir.resolve()
    parent = base.parent
    safe_roots = (base, parent)
    yield base / raw_path, safe_roots
    yield parent / raw_path, safe_roots
    for subdir in list_subdirectories(base):
        yield subdir / raw_path, safe_roots
    for subdir in list_subdirectories(parent):
        yield subdir / raw_path, safe_roots


def locate(raw_path: str, search_dirs: Sequence[Path]) -> Optional[Path]:
    """Find ``raw_path`` under the ordered ``search_dirs``.

    Each directory is probed directly, through its parent, through its
    subdirectories and through its parent's subdirectories before moving on
    to the next directory. A hit that resolves outside the directory or its
    parent is skipped. Returns ``None`` when nothing qualifies.
    """
    absent: Set[Path] = set()
    for search_dir in search_dirs:
        for candidate, safe_roots in _candidates(raw_path, Path(search_dir)):
            resolved = candidate.resolve()
            if resolved in absent:
                continue
            if not resolved.is_file():
                absent.add(resolved)
                continue
            if not any(is_within(resolved, root) for root in safe_roots):
                logger.warning("Skipping %s: resolves outside the search directories", raw_path)
                continue
            return resolved
    return None


def resolve(reference: MediaReference, search_dirs: Sequence[Path]) -> Optional[ResolvedMedia]:
    """Locate and read a referenced file; read errors propagate as ``OSError``."""
    path = locate(reference.raw_path, search_dirs)
    if path is None:
        return None
    data = path.read_bytes()
    return ResolvedMedia(
        reference=reference,
        absolute_path=path,
        mime_type=image_mime_type(path),
        data=data,
    )

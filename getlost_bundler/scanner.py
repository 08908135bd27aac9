"""Pattern-based discovery of media references inside HTML text."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Sequence

from .models import MediaKind, MediaReference

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp", "svg")
VIDEO_EXTENSIONS = ("mp4", "mov", "webm", "avi", "mkv", "m4v")
SKIPPED_PREFIXES = ("http://", "https://", "data:")


def _build_pattern(extensions: Sequence[str]) -> re.Pattern:
    ext = "|".join(extensions)
    return re.compile(
        rf"""(?P<attr>src|href)\s*=\s*["'](?P<attr_path>[^"']+\.(?:{ext}))["']"""
        rf"""|(?P<css>background-image:\s*url|url)\(\s*["']?(?P<css_path>[^"')]+\.(?:{ext}))["']?\s*\)""",
        re.IGNORECASE,
    )


IMAGE_PATTERN = _build_pattern(IMAGE_EXTENSIONS)
VIDEO_PATTERN = _build_pattern(VIDEO_EXTENSIONS)


def is_external(raw_path: str) -> bool:
    """True for references that need no resolution (remote or inlined)."""
    return raw_path.lower().startswith(SKIPPED_PREFIXES)


def _iter_references(
    html: str, pattern: re.Pattern, video: bool
) -> Iterable[MediaReference]:
    for match in pattern.finditer(html):
        if match.group("attr_path"):
            raw_path = match.group("attr_path")
            kind = MediaKind.IMAGE
        else:
            raw_path = match.group("css_path")
            kind = MediaKind.BACKGROUND
        if video:
            kind = MediaKind.VIDEO
        raw_path = raw_path.strip()
        if not raw_path or is_external(raw_path):
            continue
        yield MediaReference(raw_path=raw_path, kind=kind)


def _dedupe(references: Iterable[MediaReference]) -> List[MediaReference]:
    unique: Dict[str, MediaReference] = {}
    for reference in references:
        unique.setdefault(reference.raw_path, reference)
    return list(unique.values())


def scan_images(html: str) -> List[MediaReference]:
    """Return unique image and background references, first occurrence first."""
    return _dedupe(_iter_references(html, IMAGE_PATTERN, video=False))


def scan_videos(html: str) -> List[MediaReference]:
    """Return unique video references, first occurrence first."""
    return _dedupe(_iter_references(html, VIDEO_PATTERN, video=True))


def scan(html: str) -> List[MediaReference]:
    """Images followed by videos, each deduplicated by raw path."""
    return scan_images(html) + scan_videos(html)

"""Turn HTML with relative media references into a self-contained document."""

from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .assets import AssetStore
from .models import BundledDocument, ResolvedMedia
from .resolver import locate, resolve
from .scanner import scan_images, scan_videos

logger = logging.getLogger("getlost_bundler")

QUOTES = ('"', "'")


@dataclass
class BundleOptions:
    """Which passes of the bundler run."""

    embed_images: bool = True
    rewrite_videos: bool = True


def data_uri(media: ResolvedMedia) -> str:
    encoded = base64.b64encode(media.data).decode("ascii")
    return f"data:{media.mime_type};base64,{encoded}"


def _context_patterns(raw_path: str) -> List[re.Pattern]:
    escaped = re.escape(raw_path)
    return [
        re.compile(rf"""(src\s*=\s*["']){escaped}(["'])""", re.IGNORECASE),
        re.compile(rf"""(href\s*=\s*["']){escaped}(["'])""", re.IGNORECASE),
        re.compile(
            rf"""(background-image:\s*url\(\s*["']?){escaped}(["']?\s*\))""",
            re.IGNORECASE,
        ),
        re.compile(rf"""(url\(\s*["']?){escaped}(["']?\s*\))""", re.IGNORECASE),
    ]


def replace_media_reference(html: str, raw_path: str, replacement: str) -> Tuple[str, int]:
    """Replace every src/href/url() occurrence of ``raw_path``, keeping quotes."""
    total = 0
    for pattern in _context_patterns(raw_path):
        html, count = pattern.subn(
            lambda match: match.group(1) + replacement + match.group(2), html
        )
        total += count
    return html, total


def _replace_video_path(html: str, old_path: str, new_url: str) -> Tuple[str, int]:
    total = 0
    for quote in QUOTES:
        literal = f"{quote}{old_path}{quote}"
        total += html.count(literal)
        html = html.replace(literal, f"{quote}{new_url}{quote}")
    html, count = re.subn(
        rf"(url\(\s*){re.escape(old_path)}(\s*\))",
        lambda match: match.group(1) + new_url + match.group(2),
        html,
        flags=re.IGNORECASE,
    )
    return html, total + count


def rewrite_video_references(html: str, replacements: Mapping[str, str]) -> str:
    """Swap video paths for stored URLs.

    Quoted literals (``"path"`` / ``'path'``) and unquoted ``url(path)`` are
    replaced; a stored URL ending in the same filename is left alone.
    """
    updated = html
    for old_path, new_url in replacements.items():
        if not old_path or not new_url:
            continue
        updated, _ = _replace_video_path(updated, old_path, new_url)
    return updated


def _embed_images(html: str, search_dirs: Sequence[Path]) -> Tuple[str, int, List[str]]:
    embedded = 0
    missing: List[str] = []
    for reference in scan_images(html):
        try:
            media = resolve(reference, search_dirs)
        except OSError as exc:
            logger.warning("Failed to read image %s: %s", reference.raw_path, exc)
            missing.append(reference.raw_path)
            continue
        if media is None:
            logger.warning("Image not found in any search directory: %s", reference.raw_path)
            missing.append(reference.raw_path)
            continue

        html, _ = replace_media_reference(html, reference.raw_path, data_uri(media))
        embedded += 1
        logger.debug(
            "Embedded image %s (%.1fKB)", reference.raw_path, len(media.data) / 1024
        )
    return html, embedded, missing


def _store_videos(
    html: str,
    search_dirs: Sequence[Path],
    asset_store: AssetStore,
    scope_id: str,
    category: str,
) -> Tuple[List[Tuple[str, str]], List[str]]:
    stored_paths: List[Tuple[str, str]] = []
    missing: List[str] = []
    for reference in scan_videos(html):
        path = locate(reference.raw_path, search_dirs)
        if path is None:
            logger.warning("Video not found in any search directory: %s", reference.raw_path)
            missing.append(reference.raw_path)
            continue
        try:
            stored = asset_store.store(path, scope_id, category, path.name)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to store video %s", reference.raw_path)
            missing.append(reference.raw_path)
            continue

        stored_paths.append((reference.raw_path, stored.file_url))
        logger.debug("Stored video %s -> %s", reference.raw_path, stored.file_url)
    return stored_paths, missing


def _rewrite_videos(
    html: str, stored_paths: Sequence[Tuple[str, str]]
) -> Tuple[str, List[str], List[str]]:
    """Apply stored URLs; returns the HTML, rewritten URLs and unrewritten paths.

    Exact raw paths are replaced first. A bare filename is then rewritten
    too, unless another stored video was referenced by exactly that name.
    """
    raw_paths = {raw_path for raw_path, _ in stored_paths}
    counts: Dict[str, int] = {}
    for raw_path, file_url in stored_paths:
        html, counts[raw_path] = _replace_video_path(html, raw_path, file_url)
    for raw_path, file_url in stored_paths:
        name = PurePosixPath(raw_path).name
        if name != raw_path and name not in raw_paths:
            html, count = _replace_video_path(html, name, file_url)
            counts[raw_path] += count

    rewritten: List[str] = []
    untouched: List[str] = []
    for raw_path, file_url in stored_paths:
        if counts[raw_path]:
            rewritten.append(file_url)
        else:
            logger.warning("Stored video %s but found no reference to rewrite", raw_path)
            untouched.append(raw_path)
    return html, rewritten, untouched


def bundle_html(
    html: str,
    search_dirs: Sequence[Path],
    asset_store: Optional[AssetStore] = None,
    scope_id: str = "",
    category: str = "report",
    options: Optional[BundleOptions] = None,
) -> BundledDocument:
    """Inline images as data URIs and point videos at stored-asset URLs.

    References that cannot be resolved are left untouched and reported in
    ``BundledDocument.missing``. Videos are only rewritten when an asset
    store is supplied. Any unexpected error returns the original HTML.
    """
    options = options or BundleOptions()
    try:
        bundled = html
        embedded = 0
        missing: List[str] = []
        if options.embed_images:
            bundled, embedded, missing = _embed_images(bundled, search_dirs)

        stored_urls: List[str] = []
        if options.rewrite_videos and asset_store is not None:
            stored_paths, missing_videos = _store_videos(
                bundled, search_dirs, asset_store, scope_id, category
            )
            bundled, stored_urls, untouched = _rewrite_videos(bundled, stored_paths)
            missing.extend(missing_videos)
            missing.extend(untouched)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unexpected error while bundling HTML; returning it unchanged")
        return BundledDocument(html=html)

    document = BundledDocument(
        html=bundled,
        images_embedded=embedded,
        videos_rewritten=len(stored_urls),
        missing=tuple(missing),
        video_urls=tuple(stored_urls),
    )
    logger.info(document.summary())
    return document

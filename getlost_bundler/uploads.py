"""Bundle admin uploads (single HTML files or zip archives) end to end."""

from __future__ import annotations

import io
import logging
import shutil
import tempfile
import zipfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

from .assets import AssetStore
from .bundler import BundleOptions, bundle_html
from .config import BundleConfig
from .models import BundledDocument
from .resolver import build_search_dirs
from .summary import extract_cover_image_data, extract_report_summary

logger = logging.getLogger("getlost_bundler")


@dataclass
class UploadResult:
    """Bundled upload plus the details admins see after uploading."""

    document: BundledDocument
    html_filename: str
    uploaded_as_zip: bool
    extracted_files_count: int = 0
    primary_video_url: Optional[str] = None
    summary: Optional[str] = None
    cover_image_data: Optional[str] = None

    @property
    def html(self) -> str:
        return self.document.html


@contextmanager
def extraction_dir(root: Optional[Path] = None) -> Iterator[Path]:
    """Create a unique ``upload-*`` directory and always remove it afterwards."""
    if root is not None:
        root.mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix="upload-", dir=root))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Cleaned up temp directory %s", path)


def is_zip_upload(filename: str, data: bytes) -> bool:
    return filename.lower().endswith(".zip") or zipfile.is_zipfile(io.BytesIO(data))


def extract_archive(data: bytes, destination: Path) -> List[str]:
    """Extract a zip payload and return its file entry names."""
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            archive.extractall(destination)
            return [info.filename for info in archive.infolist() if not info.is_dir()]
    except zipfile.BadZipFile as exc:
        raise ValueError(f"Invalid ZIP archive: {exc}") from exc


def pick_html_entry(entries: List[str]) -> str:
    html_files = sorted(
        name for name in entries if name.lower().endswith((".html", ".htm"))
    )
    if not html_files:
        raise ValueError("No HTML file found in ZIP archive")
    if len(html_files) > 1:
        logger.warning("Multiple HTML files found, using first: %s", html_files[0])
    return html_files[0]


def _bundle_extracted_zip(
    filename: str,
    data: bytes,
    config: BundleConfig,
    source_dir: Optional[Path],
    bundle: Callable[[str, List[Path]], BundledDocument],
) -> Tuple[BundledDocument, str, int]:
    with extraction_dir(config.upload_tmp_root) as workdir:
        # Parent probes of the payload stay inside this request's directory.
        payload = workdir / "payload"
        payload.mkdir()
        entries = extract_archive(data, payload)
        html_filename = pick_html_entry(entries)
        html_path = payload / html_filename
        raw_html = html_path.read_text(encoding="utf-8", errors="replace")
        logger.info(
            "Extracted %d file(s) from %s, using %s", len(entries), filename, html_filename
        )

        search_dirs = build_search_dirs(html_path.parent, config.reports_dir)
        extra_roots = [payload] + ([source_dir] if source_dir is not None else [])
        for root in extra_roots:
            search_dirs.extend(d for d in build_search_dirs(root) if d not in search_dirs)
        return bundle(raw_html, search_dirs), html_filename, len(entries)


def process_upload(
    filename: str,
    data: bytes,
    scope_id: str,
    category: str,
    config: BundleConfig,
    asset_store: Optional[AssetStore] = None,
    source_dir: Optional[Path] = None,
) -> UploadResult:
    """Bundle an uploaded HTML document or zip into one self-contained page.

    A plain HTML upload is resolved against ``source_dir`` (the folder the
    file was read from, when known) and then the reports directory. Zip
    archives are extracted into a per-call temporary directory that is
    searched first and removed before returning; ``source_dir`` comes last.
    Raises ``ValueError`` when a zip holds no HTML file.
    """
    options = BundleOptions(
        embed_images=config.embed_images, rewrite_videos=config.rewrite_videos
    )

    def bundle(raw_html: str, search_dirs: List[Path]) -> BundledDocument:
        return bundle_html(
            raw_html,
            search_dirs,
            asset_store=asset_store,
            scope_id=scope_id,
            category=category,
            options=options,
        )

    uploaded_as_zip = is_zip_upload(filename, data)
    if uploaded_as_zip:
        document, html_filename, extracted = _bundle_extracted_zip(
            filename, data, config, source_dir, bundle
        )
    else:
        html_filename = filename
        extracted = 0
        raw_html = data.decode("utf-8", errors="replace")
        document = bundle(raw_html, build_search_dirs(source_dir, config.reports_dir))

    return UploadResult(
        document=document,
        html_filename=html_filename,
        uploaded_as_zip=uploaded_as_zip,
        extracted_files_count=extracted,
        primary_video_url=document.video_urls[0] if document.video_urls else None,
        summary=extract_report_summary(document.html),
        cover_image_data=extract_cover_image_data(document.html),
    )

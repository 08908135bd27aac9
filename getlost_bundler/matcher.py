"""Match uploaded manuscripts against seeded ("precanned") content."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .config import SYSTEM_SEED_OWNER
from .models import ContentKind, MatchResult, ReportFiles
from .resolver import list_subdirectories
from .store import ContentStore
from .utils import extract_core, normalize, normalize_filename

logger = logging.getLogger("getlost_bundler")

REPORT_SUFFIXES = {".html": "html", ".pdf": "pdf"}


def _overlaps(left: str, right: str) -> bool:
    if not left or not right:
        return False
    return left == right or left in right or right in left


def filenames_match(candidate: str, uploaded: str) -> bool:
    """True when normalized names or their core names overlap."""
    if _overlaps(normalize_filename(candidate), normalize_filename(uploaded)):
        return True
    return _overlaps(extract_core(candidate), extract_core(uploaded))


def find_seeded_match(
    uploaded_name: str,
    kind: ContentKind,
    store: ContentStore,
    system_owner: str = SYSTEM_SEED_OWNER,
) -> Optional[MatchResult]:
    """Return the first seeded record of ``kind`` whose names match the upload.

    Records are checked in the order the store returns them (insertion
    order), so when several seeds match the earliest one wins.
    """
    for record in store.list_records(kind, system_owner):
        for candidate in record.filename_candidates:
            if filenames_match(candidate, uploaded_name):
                logger.info(
                    "Matched %r with seeded %s %r", uploaded_name, kind.value, candidate
                )
                return MatchResult(record=record, matched_candidate=candidate)
    logger.debug("No seeded %s matches %r", kind.value, uploaded_name)
    return None


def _walk_report_files(directory: Path) -> Iterator[Tuple[Path, str]]:
    try:
        files = sorted(entry for entry in directory.iterdir() if entry.is_file())
    except OSError as exc:
        logger.warning("Could not read %s: %s", directory, exc)
        return
    for path in files:
        file_type = REPORT_SUFFIXES.get(path.suffix.lower())
        if file_type:
            yield path, file_type
    for subdir in list_subdirectories(directory):
        yield from _walk_report_files(subdir)


def find_matching_report(
    uploaded_name: str,
    reports_dir: Optional[Path],
    book_title: Optional[str] = None,
    include_pdf: bool = True,
) -> ReportFiles:
    """Find HTML (and optionally PDF) reports for a manuscript on disk.

    A file matches when its normalized name equals or contains the
    normalized upload name (or vice versa), or when its folder name equals
    the normalized book title. The first HTML and first PDF found win.
    """
    if reports_dir is None or not reports_dir.is_dir():
        logger.info("Book reports directory not found: %s", reports_dir)
        return ReportFiles()

    wanted = normalize(Path(uploaded_name).stem)
    wanted_title = normalize(book_title) if book_title else ""
    html_path: Optional[Path] = None
    pdf_path: Optional[Path] = None

    for path, file_type in _walk_report_files(reports_dir):
        if file_type == "pdf" and not include_pdf:
            continue
        by_name = _overlaps(normalize(path.stem), wanted)
        by_folder = bool(wanted_title) and normalize(path.parent.name) == wanted_title
        if not (by_name or by_folder):
            continue
        if file_type == "html" and html_path is None:
            html_path = path
        elif file_type == "pdf" and pdf_path is None:
            pdf_path = path
        else:
            continue
        logger.info(
            "Found matching %s by %s: %s",
            file_type.upper(),
            "filename" if by_name else "folder name",
            path,
        )

    result = ReportFiles(html_path=html_path, pdf_path=pdf_path)
    if not result.found:
        logger.info("No matching report found for %r", uploaded_name)
    return result

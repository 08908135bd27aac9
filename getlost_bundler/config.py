"""Configuration objects and constants for bundling and seeded content."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger("getlost_bundler")

SYSTEM_SEED_OWNER = "SYSTEM_SEEDED_REPORTS"
DEFAULT_REPORTS_DIR = Path("./book-reports")
DEFAULT_ASSET_ROOT = Path("public/uploads/admin")
DEFAULT_ASSET_URL_PREFIX = "/api/uploads/admin"
DEFAULT_PRECANNED_ROOT = Path("precannedcontent")
DEFAULT_PRECANNED_PUBLIC_ROOT = Path("public/uploads/precanned")
DEFAULT_PRECANNED_URL_PREFIX = "/uploads/precanned"


@dataclass
class BundleConfig:
    """Top-level settings for bundling uploads and locating seeded reports."""

    reports_dir: Optional[Path] = None
    asset_root: Path = DEFAULT_ASSET_ROOT
    asset_url_prefix: str = DEFAULT_ASSET_URL_PREFIX
    upload_tmp_root: Optional[Path] = None
    precanned_root: Path = DEFAULT_PRECANNED_ROOT
    precanned_public_root: Path = DEFAULT_PRECANNED_PUBLIC_ROOT
    precanned_url_prefix: str = DEFAULT_PRECANNED_URL_PREFIX
    system_owner: str = SYSTEM_SEED_OWNER
    embed_images: bool = True
    rewrite_videos: bool = True
    include_pdf: bool = True

    @classmethod
    def from_env(cls) -> "BundleConfig":
        """Build a config from ``BOOK_REPORTS_PATH`` and ``GETLOST_*`` variables.

        Outside production a missing ``BOOK_REPORTS_PATH`` falls back to
        ``./book-reports``; in production the reports directory is skipped.
        """
        production = os.getenv("APP_ENV", "").lower() == "production"
        reports_env = os.getenv("BOOK_REPORTS_PATH", "").strip()
        reports_dir: Optional[Path]
        if reports_env:
            reports_dir = Path(reports_env).expanduser()
        elif production:
            logger.warning(
                "BOOK_REPORTS_PATH is not set in production; the book reports directory will be skipped"
            )
            reports_dir = None
        else:
            reports_dir = DEFAULT_REPORTS_DIR

        tmp_env = os.getenv("GETLOST_UPLOAD_TMP")
        return cls(
            reports_dir=reports_dir,
            asset_root=Path(os.getenv("GETLOST_ASSET_ROOT") or DEFAULT_ASSET_ROOT),
            asset_url_prefix=os.getenv("GETLOST_ASSET_URL_PREFIX") or DEFAULT_ASSET_URL_PREFIX,
            upload_tmp_root=Path(tmp_env) if tmp_env else None,
            precanned_root=Path(os.getenv("GETLOST_PRECANNED_ROOT") or DEFAULT_PRECANNED_ROOT),
            precanned_public_root=Path(
                os.getenv("GETLOST_PRECANNED_PUBLIC_ROOT") or DEFAULT_PRECANNED_PUBLIC_ROOT
            ),
        )

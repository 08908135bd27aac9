"""Self-contained report bundling and seeded-content linking."""

from .bundler import BundleOptions, bundle_html
from .linker import link_to_book
from .matcher import find_matching_report, find_seeded_match
from .models import BundledDocument, ContentKind, MatchResult, SeededRecord
from .precanned import find_precanned_cover_image, find_precanned_package

__all__ = [
    "BundleOptions",
    "BundledDocument",
    "ContentKind",
    "MatchResult",
    "SeededRecord",
    "bundle_html",
    "find_precanned_cover_image",
    "find_precanned_package",
    "find_matching_report",
    "find_seeded_match",
    "link_to_book",
]

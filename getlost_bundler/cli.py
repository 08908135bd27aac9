"""Command-line entry point for bundling reports and linking seeded content."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Sequence

from .assets import LocalAssetStore
from .config import BundleConfig, SYSTEM_SEED_OWNER
from .linker import link_to_book
from .matcher import find_matching_report, find_seeded_match
from .models import ContentKind
from .precanned import (
    find_precanned_cover_image,
    find_precanned_package,
    find_precanned_package_by_key,
    load_manifest,
)
from .store import JsonContentStore
from .uploads import process_upload

logger = logging.getLogger("getlost_bundler.cli")

KIND_CHOICES = [kind.value for kind in ContentKind]


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_store_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("filename", help="Uploaded manuscript filename or title")
    parser.add_argument(
        "--store",
        required=True,
        type=Path,
        help="JSON file holding content records",
    )
    parser.add_argument(
        "--kind",
        choices=KIND_CHOICES,
        default=ContentKind.REPORT.value,
        help="Kind of seeded content to look up",
    )
    parser.add_argument(
        "--system-owner",
        default=SYSTEM_SEED_OWNER,
        help="Owner id that seeded templates are stored under",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Bundle report HTML into self-contained documents and link seeded content to books.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    bundle_parser = subparsers.add_parser(
        "bundle", help="Inline images of an HTML file or zip upload"
    )
    bundle_parser.add_argument(
        "paths", nargs="+", type=Path, help="HTML files or zip archives to bundle"
    )
    bundle_parser.add_argument(
        "--output",
        default="output",
        type=Path,
        help="Directory where bundled HTML should be written",
    )
    bundle_parser.add_argument(
        "--scope",
        default="local",
        help="Book id that stored videos are filed under",
    )
    bundle_parser.add_argument(
        "--category",
        default="report",
        help="Asset category (report, marketing-assets, covers, landing-page)",
    )
    bundle_parser.add_argument(
        "--reports-dir",
        type=Path,
        default=None,
        help="Extra directory searched for images (defaults to BOOK_REPORTS_PATH)",
    )
    bundle_parser.add_argument(
        "--no-videos",
        action="store_true",
        help="Leave video references untouched",
    )
    _add_common_arguments(bundle_parser)

    match_parser = subparsers.add_parser(
        "match", help="Find seeded content matching an uploaded filename"
    )
    _add_store_arguments(match_parser)
    _add_common_arguments(match_parser)

    link_parser = subparsers.add_parser(
        "link", help="Copy matching seeded content onto a book"
    )
    _add_store_arguments(link_parser)
    link_parser.add_argument(
        "--target", required=True, help="Book (or book version) id to link to"
    )
    _add_common_arguments(link_parser)

    report_parser = subparsers.add_parser(
        "find-report", help="Find HTML/PDF reports on disk for a manuscript"
    )
    report_parser.add_argument("filename", help="Uploaded manuscript filename")
    report_parser.add_argument("--title", default=None, help="Book title")
    report_parser.add_argument(
        "--reports-dir",
        type=Path,
        default=None,
        help="Book reports directory (defaults to BOOK_REPORTS_PATH)",
    )
    report_parser.add_argument(
        "--html-only", action="store_true", help="Ignore PDF renditions"
    )
    _add_common_arguments(report_parser)

    precanned_parser = subparsers.add_parser(
        "precanned", help="Find the precanned package and cover image for an upload"
    )
    precanned_parser.add_argument("filename", help="Uploaded manuscript filename")
    precanned_parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Precanned content directory (defaults to GETLOST_PRECANNED_ROOT)",
    )
    precanned_parser.add_argument(
        "--key", default=None, help="Package key to use instead of filename matching"
    )
    _add_common_arguments(precanned_parser)

    return parser.parse_args(list(sys.argv[1:] if argv is None else argv))


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _run_bundle(args: argparse.Namespace) -> int:
    config = BundleConfig.from_env()
    if args.reports_dir is not None:
        config.reports_dir = args.reports_dir.resolve()
    config.rewrite_videos = not args.no_videos
    asset_store = LocalAssetStore(config.asset_root, config.asset_url_prefix)

    output_root = Path(args.output).resolve()
    output_root.mkdir(parents=True, exist_ok=True)
    overall_start = time.perf_counter()
    failures = 0
    for path in args.paths:
        try:
            data = path.read_bytes()
            result = process_upload(
                path.name,
                data,
                args.scope,
                args.category,
                config,
                asset_store,
                source_dir=path.resolve().parent,
            )
        except (OSError, ValueError) as exc:
            logger.error("Skipping %s: %s", path, exc)
            failures += 1
            continue

        output_path = output_root / (Path(result.html_filename).stem + ".html")
        output_path.write_text(result.html, encoding="utf-8")
        logger.info("%s -> %s (%s)", path, output_path, result.document.summary())
        for raw_path in result.document.missing:
            logger.debug("Unresolved reference in %s: %s", path, raw_path)

    total_elapsed = time.perf_counter() - overall_start
    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        total_elapsed,
        len(args.paths) - failures,
        len(args.paths),
        failures,
    )
    return 1 if failures else 0


def _run_match(args: argparse.Namespace) -> int:
    store = JsonContentStore(args.store)
    match = find_seeded_match(
        args.filename, ContentKind(args.kind), store, system_owner=args.system_owner
    )
    if match is None:
        sys.stdout.write("No match\n")
        return 1
    sys.stdout.write(f"{match.record.id}\t{match.matched_candidate}\n")
    return 0


def _run_link(args: argparse.Namespace) -> int:
    store = JsonContentStore(args.store)
    match = find_seeded_match(
        args.filename, ContentKind(args.kind), store, system_owner=args.system_owner
    )
    if match is None:
        logger.error("No seeded %s matches %r", args.kind, args.filename)
        return 1
    new_id = link_to_book(match.record, args.target, store)
    sys.stdout.write(f"{new_id}\n")
    return 0


def _run_find_report(args: argparse.Namespace) -> int:
    reports_dir = args.reports_dir or BundleConfig.from_env().reports_dir
    result = find_matching_report(
        args.filename, reports_dir, book_title=args.title, include_pdf=not args.html_only
    )
    if not result.found:
        sys.stdout.write("No match\n")
        return 1
    sys.stdout.write(f"html\t{result.html_path or '-'}\n")
    sys.stdout.write(f"pdf\t{result.pdf_path or '-'}\n")
    return 0


def _run_precanned(args: argparse.Namespace) -> int:
    config = BundleConfig.from_env()
    root = args.root or config.precanned_root
    try:
        manifest = load_manifest(root)
    except (OSError, ValueError) as exc:
        logger.error("Could not load precanned manifest from %s: %s", root, exc)
        return 1

    package = find_precanned_package_by_key(args.key, manifest) or find_precanned_package(
        args.filename, manifest
    )
    cover_url = find_precanned_cover_image(
        args.filename, root, config.precanned_public_root, config.precanned_url_prefix
    )
    if package is None and cover_url is None:
        sys.stdout.write("No match\n")
        return 1
    sys.stdout.write(f"package\t{package.key if package else '-'}\n")
    sys.stdout.write(f"cover\t{cover_url or '-'}\n")
    return 0


COMMANDS = {
    "bundle": _run_bundle,
    "match": _run_match,
    "link": _run_link,
    "find-report": _run_find_report,
    "precanned": _run_precanned,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())

"""Copy seeded records onto real books."""

from __future__ import annotations

import copy
import datetime as dt
import logging
import uuid
from typing import Optional

from .models import ContentKind, SeededRecord
from .store import ContentStore
from .utils import slugify

logger = logging.getLogger("getlost_bundler")

MAX_SLUG_LENGTH = 120


def unique_slug(base_slug: str, target_id: str, store: ContentStore) -> str:
    """``base_slug``, or ``base_slug-<target prefix>[-n]`` if already taken.

    The base is shortened before the suffix is appended so every candidate
    stays within ``MAX_SLUG_LENGTH`` and still differs per attempt.
    """
    safe_base = base_slug or f"landing-{target_id[:8]}"
    target_part = slugify(target_id[:8], fallback="copy")
    candidate = safe_base
    attempt = 0
    while store.slug_exists(candidate):
        attempt += 1
        suffix = target_part + (f"-{attempt}" if attempt > 1 else "")
        stem = slugify(safe_base, fallback="landing")[: MAX_SLUG_LENGTH - len(suffix) - 1]
        candidate = f"{stem.rstrip('-')}-{suffix}"
    return candidate


def link_to_book(
    seeded: SeededRecord,
    target_id: str,
    store: ContentStore,
    now: Optional[dt.datetime] = None,
) -> str:
    """Insert a copy of ``seeded`` owned by ``target_id`` and return its id.

    The seeded template is not modified. Calling this twice creates two
    independent copies; callers check for existing linked content first.
    """
    timestamp = now or dt.datetime.now(dt.timezone.utc).replace(microsecond=0)
    slug = seeded.slug
    if seeded.kind == ContentKind.LANDING_PAGE and slug:
        slug = unique_slug(slug, target_id, store)

    record = SeededRecord(
        id=str(uuid.uuid4()),
        kind=seeded.kind,
        owner_id=target_id,
        title=seeded.title,
        slug=slug,
        metadata=copy.deepcopy(seeded.metadata),
        fields=copy.deepcopy(seeded.fields),
        created_at=timestamp,
        updated_at=timestamp,
    )
    new_id = store.insert_record(record)
    logger.info(
        "Linked seeded %s %s to %s as %s", seeded.kind.value, seeded.id, target_id, new_id
    )
    return new_id

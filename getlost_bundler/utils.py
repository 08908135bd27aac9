"""Utility helpers for filename normalization and slug handling."""

from __future__ import annotations

import re

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9]")
EXTENSION_PATTERN = re.compile(r"\.[^.]*$")
GENERIC_WORDS_PATTERN = re.compile(
    r"\s*(?:final|book|report|manuscript|draft|version)\s*"
)
CORE_RUN_PATTERN = re.compile(r"[a-z]{3,}")


def slugify(value: str, fallback: str = "page") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def normalize(text: str) -> str:
    """Lowercase ``text`` and keep only ASCII letters and digits."""
    return NON_ALNUM_PATTERN.sub("", text.lower())


def strip_filename_noise(name: str) -> str:
    """Drop the extension and generic words such as "final" or "draft"."""
    stripped = EXTENSION_PATTERN.sub("", name.lower())
    return GENERIC_WORDS_PATTERN.sub("", stripped)


def normalize_filename(name: str) -> str:
    """Comparison key for an uploaded filename or seeded title."""
    return normalize(strip_filename_noise(name))


def extract_core(name: str) -> str:
    """Return the longest alphabetic run (3+ chars) of the normalized name.

    ``"The Everlasting Gift Book.pdf"`` and ``"everlasting-gift-final.pdf"``
    both reduce to ``"theeverlastinggift"`` / ``"everlastinggift"``, which
    overlap. The first of several equally long runs wins. A key with no
    alphabetic run is returned whole, so an empty name yields ``""``.
    """
    key = normalize_filename(name)
    runs = CORE_RUN_PATTERN.findall(key)
    if not runs:
        return key
    return max(runs, key=len)

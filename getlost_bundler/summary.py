"""Read-only extraction of summary text and cover images from report HTML."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

_MIN_SUMMARY_CHARS = 50
_MIN_PARAGRAPH_CHARS = 100
_TARGET_SUMMARY_CHARS = 200
_MAX_SUMMARY_CHARS = 800
_FALLBACK_CHARS = 500
_WHITESPACE = re.compile(r"\s+")
_DATA_IMAGE = re.compile(r"^data:image/", re.IGNORECASE)


def _text(tag: Tag) -> str:
    return _WHITESPACE.sub(" ", tag.get_text(" ")).strip()


def _has_classes(tag: Tag, *names: str) -> bool:
    classes = tag.get("class") or []
    return all(name in classes for name in names)


def _classification_text(scope: Tag) -> Optional[str]:
    """Text of the value block that follows a "Classification" label."""
    for label in scope.find_all("div"):
        if not _has_classes(label, "text-sm", "font-medium"):
            continue
        if "classification" not in _text(label).lower():
            continue
        value = label.find_next_sibling("div")
        if value is not None and _has_classes(value, "text-sm", "text-gray-600"):
            text = _text(value)
            if len(text) > _MIN_SUMMARY_CHARS:
                return text
    return None


def _sentences_after_classification(text: str) -> Optional[str]:
    index = text.lower().find("classification")
    if index == -1:
        return None
    remainder = text[index + len("classification") :]
    sentences = [s for s in re.split(r"\.\s+", remainder) if len(s) > _MIN_SUMMARY_CHARS]
    summary = ""
    for sentence in sentences:
        if len(summary) + len(sentence) > _MAX_SUMMARY_CHARS:
            break
        summary += (". " if summary else "") + sentence
        if len(summary) > _TARGET_SUMMARY_CHARS:
            break
    summary = summary.strip()
    if len(summary) <= _MIN_SUMMARY_CHARS:
        return None
    return summary if summary.endswith(".") else summary + "."


def _overview_summary(overview: Tag) -> Optional[str]:
    found = _classification_text(overview)
    if found:
        return found

    for tag in overview(["script", "style"]):
        tag.decompose()
    text = _text(overview)
    found = _sentences_after_classification(text)
    if found:
        return found

    for paragraph in overview.find_all("p"):
        paragraph_text = _text(paragraph)
        if len(paragraph_text) > _MIN_PARAGRAPH_CHARS:
            return paragraph_text

    if len(text) > _MIN_PARAGRAPH_CHARS:
        suffix = "..." if len(text) > _FALLBACK_CHARS else ""
        return text[:_FALLBACK_CHARS].strip() + suffix
    return None


def _summary_containers(soup: BeautifulSoup) -> Iterable[Tag]:
    for name in ("div", "p", "section"):
        for tag in soup.find_all(name):
            if any("summary" in cls for cls in tag.get("class") or []):
                yield tag


def extract_report_summary(html: Optional[str]) -> Optional[str]:
    """Pull a short summary out of an analysis report, if one is present."""
    if not html:
        return None
    soup = BeautifulSoup(html, "html.parser")

    found = _classification_text(soup)
    if found:
        return found

    overview = soup.find(id="overview")
    if isinstance(overview, Tag):
        found = _overview_summary(overview)
        if found:
            return found

    for container in _summary_containers(soup):
        text = _text(container)
        if len(text) > _MIN_SUMMARY_CHARS:
            return text
    return None


def extract_cover_image_data(html: Optional[str]) -> Optional[str]:
    """First inlined ``data:image/...`` URI used by an ``<img>`` tag."""
    if not html:
        return None
    soup = BeautifulSoup(html, "html.parser")
    image = soup.find("img", src=_DATA_IMAGE)
    if image is None:
        return None
    return image.get("src")

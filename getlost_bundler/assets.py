"""Stored-asset collaborator used for videos and other large media."""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from .resolver import guess_mime_type, is_within

logger = logging.getLogger("getlost_bundler")

RANGE_PATTERN = re.compile(r"bytes=(\d*)-(\d*)")
RANGE_SUFFIXES = {".mp4", ".webm", ".mov"}


@dataclass(frozen=True)
class StoredAsset:
    """Location of a copied asset and the URL it is served from."""

    file_url: str
    destination_path: Path


@dataclass(frozen=True)
class ServedAsset:
    """Bytes returned for a stored asset request."""

    data: bytes
    mime_type: str
    status: int = 200
    content_range: Optional[str] = None
    total_size: int = 0


class AssetStore(Protocol):
    def store(
        self, source: Path, scope_id: str, category: str, filename: str
    ) -> StoredAsset:
        ...


class LocalAssetStore:
    """Copies assets below ``root`` as ``<scope>/<category>/videos/<filename>``."""

    def __init__(self, root: Path, url_prefix: str = "/api/uploads/admin") -> None:
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def store(
        self, source: Path, scope_id: str, category: str, filename: str
    ) -> StoredAsset:
        segments = [scope_id, category, "videos", filename]
        destination_dir = self.root.joinpath(*segments[:-1])
        destination_dir.mkdir(parents=True, exist_ok=True)
        destination = destination_dir / filename
        shutil.copyfile(source, destination)
        logger.debug("Copied %s to %s", source, destination)

        file_url = self.url_prefix + "/" + "/".join(
            segment.replace("\\", "/") for segment in segments
        )
        return StoredAsset(file_url=file_url, destination_path=destination)

    def read(
        self, segments: Sequence[str], range_header: Optional[str] = None
    ) -> Optional[ServedAsset]:
        """Serve a stored file back, or ``None`` when it does not exist.

        Raises ``PermissionError`` when the segments escape the store root.
        Video files honor a ``bytes=start-end`` range header with a 206.
        """
        if not segments or not segments[-1]:
            raise ValueError("File path required")
        base = self.root.resolve()
        path = base.joinpath(*segments).resolve()
        if not is_within(path, base):
            raise PermissionError("Invalid file path")
        if not path.is_file():
            return None

        data = path.read_bytes()
        mime_type = guess_mime_type(path, data)
        total = len(data)
        match = RANGE_PATTERN.fullmatch(range_header.strip()) if range_header else None
        if match and path.suffix.lower() in RANGE_SUFFIXES and total:
            start = int(match.group(1) or 0)
            end = int(match.group(2)) if match.group(2) else total - 1
            end = min(end, total - 1)
            if start <= end:
                return ServedAsset(
                    data=data[start : end + 1],
                    mime_type=mime_type,
                    status=206,
                    content_range=f"bytes {start}-{end}/{total}",
                    total_size=total,
                )
        return ServedAsset(data=data, mime_type=mime_type, total_size=total)

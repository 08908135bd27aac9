"""MCP server exposing the report bundler and seeded-content lookup."""

from __future__ import annotations

import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .assets import LocalAssetStore
from .config import BundleConfig
from .matcher import find_seeded_match
from .models import ContentKind
from .store import JsonContentStore
from .uploads import process_upload

logger = logging.getLogger("getlost_bundler.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="getlost-bundler")


@mcp.tool()
def bundle(path: str, scope: str = "local", category: str = "report") -> str:
    """Bundle an HTML file or zip upload and return self-contained HTML."""

    source = Path(path).expanduser()
    if not source.is_file():
        raise FileNotFoundError(f"Upload path does not exist: {source}")

    config = BundleConfig.from_env()
    asset_store = LocalAssetStore(config.asset_root, config.asset_url_prefix)
    result = process_upload(
        source.name,
        source.read_bytes(),
        scope,
        category,
        config,
        asset_store,
        source_dir=source.resolve().parent,
    )
    return result.html


@mcp.tool()
def match(filename: str, store_path: str, kind: str = ContentKind.REPORT.value) -> str:
    """Return the id and matched name of seeded content for an upload."""

    store = JsonContentStore(Path(store_path).expanduser())
    result = find_seeded_match(filename, ContentKind(kind), store)
    if result is None:
        return "No match"
    return f"{result.record.id}\t{result.matched_candidate}"


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()

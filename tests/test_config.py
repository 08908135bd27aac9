from pathlib import Path

import pytest

from getlost_bundler.config import (
    DEFAULT_ASSET_ROOT,
    DEFAULT_ASSET_URL_PREFIX,
    DEFAULT_PRECANNED_ROOT,
    DEFAULT_REPORTS_DIR,
    BundleConfig,
)

ENV_VARS = (
    "APP_ENV",
    "BOOK_REPORTS_PATH",
    "GETLOST_ASSET_ROOT",
    "GETLOST_ASSET_URL_PREFIX",
    "GETLOST_UPLOAD_TMP",
    "GETLOST_PRECANNED_ROOT",
    "GETLOST_PRECANNED_PUBLIC_ROOT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_outside_production():
    config = BundleConfig.from_env()
    assert config.reports_dir == DEFAULT_REPORTS_DIR
    assert config.asset_root == DEFAULT_ASSET_ROOT
    assert config.asset_url_prefix == DEFAULT_ASSET_URL_PREFIX
    assert config.upload_tmp_root is None
    assert config.precanned_root == DEFAULT_PRECANNED_ROOT
    assert config.embed_images and config.rewrite_videos


def test_production_without_reports_path_skips_directory(monkeypatch, caplog):
    monkeypatch.setenv("APP_ENV", "production")
    with caplog.at_level("WARNING", logger="getlost_bundler"):
        config = BundleConfig.from_env()
    assert config.reports_dir is None
    assert "BOOK_REPORTS_PATH is not set" in caplog.text


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("BOOK_REPORTS_PATH", str(tmp_path / "reports"))
    monkeypatch.setenv("GETLOST_ASSET_ROOT", str(tmp_path / "assets"))
    monkeypatch.setenv("GETLOST_ASSET_URL_PREFIX", "/media")
    monkeypatch.setenv("GETLOST_UPLOAD_TMP", str(tmp_path / "tmp"))
    monkeypatch.setenv("GETLOST_PRECANNED_ROOT", str(tmp_path / "precanned"))
    monkeypatch.setenv("GETLOST_PRECANNED_PUBLIC_ROOT", str(tmp_path / "public"))

    config = BundleConfig.from_env()

    assert config.reports_dir == tmp_path / "reports"
    assert config.asset_root == Path(tmp_path / "assets")
    assert config.asset_url_prefix == "/media"
    assert config.upload_tmp_root == tmp_path / "tmp"
    assert config.precanned_root == tmp_path / "precanned"
    assert config.precanned_public_root == tmp_path / "public"

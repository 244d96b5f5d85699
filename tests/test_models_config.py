"""Tests for configuration models."""

import json

import pytest
from pydantic import ValidationError

from src.models.config import RendererConfig, ScreenshotConfig, ViewportConfig


class TestViewportConfig:
    """Tests for ViewportConfig model."""

    def test_default_values(self):
        config = ViewportConfig()
        assert config.width == 1280
        assert config.height == 720
        assert config.name == "desktop"

    def test_serialization(self):
        config = ViewportConfig(width=768, height=1024, name="tablet")
        assert config.model_dump() == {"width": 768, "height": 1024, "name": "tablet"}


class TestRendererConfig:
    def test_default_values(self):
        config = RendererConfig()
        assert config.headless is True
        assert config.full_page is True
        assert config.wait_until == "networkidle"
        assert config.settle_timeout_ms == 3000
        assert config.user_agent is None
        assert config.disable_animations is True
        assert isinstance(config.viewport, ViewportConfig)


class TestScreenshotConfig:
    """Tests for the top-level ScreenshotConfig model."""

    def test_default_values(self):
        config = ScreenshotConfig()
        assert config.base_url == ""
        assert config.expected_screenshots_dir == "expected-screenshots"
        assert config.processed_screenshots_dir == "processed-screenshots"
        assert config.screenshot_diff_dir == "screenshot-diffs"
        assert config.print_logs is False
        assert config.store_in_ui_tests_repo is False
        assert config.ui_tests_dir == ""

    def test_base_url_from_env(self, monkeypatch):
        monkeypatch.setenv("VISUAL_BASE_URL", "http://ci.example.com/")
        config = ScreenshotConfig(base_url="env:VISUAL_BASE_URL")
        assert config.base_url == "http://ci.example.com/"

    def test_base_url_env_missing(self, monkeypatch):
        monkeypatch.delenv("VISUAL_BASE_URL", raising=False)
        with pytest.raises(ValidationError, match="VISUAL_BASE_URL"):
            ScreenshotConfig(base_url="env:VISUAL_BASE_URL")

    def test_ui_tests_repo_requires_dir(self):
        with pytest.raises(ValidationError, match="ui_tests_dir"):
            ScreenshotConfig(store_in_ui_tests_repo=True)

    def test_ui_tests_repo_with_dir(self):
        config = ScreenshotConfig(store_in_ui_tests_repo=True, ui_tests_dir="/ui-tests")
        assert config.ui_tests_dir == "/ui-tests"


class TestConfigPersistence:
    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "visual-config.json"
        config = ScreenshotConfig(base_url="http://localhost/", print_logs=True)

        config.save(path)
        loaded = ScreenshotConfig.load(path)

        assert loaded == config

    def test_saved_file_is_json(self, tmp_path):
        path = tmp_path / "visual-config.json"
        ScreenshotConfig(base_url="http://localhost/").save(path)

        data = json.loads(path.read_text())
        assert data["base_url"] == "http://localhost/"
        assert data["renderer"]["viewport"]["width"] == 1280

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ScreenshotConfig.load(tmp_path / "missing.json")

    def test_load_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "visual-config.json"
        path.write_text(json.dumps({"base_url": "http://localhost/", "renderer": {"full_page": False}}))

        config = ScreenshotConfig.load(path)

        assert config.renderer.full_page is False
        assert config.renderer.headless is True
        assert config.screenshot_diff_dir == "screenshot-diffs"

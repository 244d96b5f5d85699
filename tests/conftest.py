"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, Mock

import pytest
from PIL import Image

from src.models.config import RendererConfig, ScreenshotConfig, ViewportConfig
from src.models.screenshot import MismatchResult, SuiteContext
from src.reporter.failure_log import FailureLog
from src.storage.image_store import ImageStore
from src.storage.layout import ScreenshotLayout
from src.verdict.containment_engine import ContainmentVerdictEngine
from src.verdict.screenshot_engine import ScreenshotVerdictEngine

REPRO_URL = "http://localhost/index.php?module=Dashboard&action=index"


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def screenshot_config() -> ScreenshotConfig:
    """Create a test screenshot configuration."""
    return ScreenshotConfig(
        base_url="http://localhost/",
        expected_screenshots_dir="expected-screenshots",
        processed_screenshots_dir="processed-screenshots",
        screenshot_diff_dir="screenshot-diffs",
        renderer=RendererConfig(viewport=ViewportConfig(width=1350, height=768, name="desktop")),
    )


@pytest.fixture
def suite(tmp_path: Path) -> SuiteContext:
    """Create a suite rooted in a temporary directory."""
    return SuiteContext(title="Dashboard", base_directory=tmp_path / "suite")


@pytest.fixture
def layout(screenshot_config: ScreenshotConfig) -> ScreenshotLayout:
    return ScreenshotLayout(screenshot_config)


@pytest.fixture
def image_store(layout: ScreenshotLayout) -> ImageStore:
    return ImageStore(layout)


@pytest.fixture
def failure_log() -> FailureLog:
    return FailureLog()


# ============================================================================
# Collaborator Fixtures
# ============================================================================


def capture_writing(data: Optional[bytes]):
    """Build a capture side effect that writes data to the destination."""
    def _capture(destination, selector=None):
        if destination is not None and data is not None:
            Path(destination).write_bytes(data)
    return _capture


@pytest.fixture
def mock_renderer() -> Mock:
    """Create a mock page renderer that writes nothing when capturing."""
    renderer = Mock()
    renderer.page_logs = []
    renderer.get_current_url = Mock(return_value=REPRO_URL)
    renderer.capture = AsyncMock(side_effect=capture_writing(None))
    renderer.contains = AsyncMock(return_value=True)
    renderer.load = AsyncMock()
    return renderer


@pytest.fixture
def mock_diff_client() -> Mock:
    """Create a mock perceptual diff client reporting no mismatch."""
    client = Mock()
    client.compare = AsyncMock(return_value=MismatchResult(percentage=0))
    return client


@pytest.fixture
def screenshot_engine(
    mock_renderer: Mock,
    image_store: ImageStore,
    mock_diff_client: Mock,
    failure_log: FailureLog,
    suite: SuiteContext,
    screenshot_config: ScreenshotConfig,
) -> ScreenshotVerdictEngine:
    return ScreenshotVerdictEngine(
        renderer=mock_renderer,
        image_store=image_store,
        diff_client=mock_diff_client,
        failure_log=failure_log,
        suite=suite,
        config=screenshot_config,
    )


@pytest.fixture
def containment_engine(
    mock_renderer: Mock,
    layout: ScreenshotLayout,
    suite: SuiteContext,
    screenshot_config: ScreenshotConfig,
) -> ContainmentVerdictEngine:
    return ContainmentVerdictEngine(
        renderer=mock_renderer,
        layout=layout,
        suite=suite,
        config=screenshot_config,
    )


# ============================================================================
# Helper Functions
# ============================================================================


def write_png(
    path: Path,
    size: tuple[int, int] = (100, 100),
    color: tuple[int, int, int] = (255, 0, 0),
    changed_rows: int = 0,
    changed_color: tuple[int, int, int] = (0, 0, 255),
) -> Path:
    """Write a solid PNG, optionally recoloring the first changed_rows rows."""
    img = Image.new("RGB", size, color)
    if changed_rows:
        img.paste(changed_color, (0, 0, size[0], changed_rows))
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path)
    return path


@pytest.fixture
def png_helper():
    """Fixture that provides the write_png function."""
    return write_png


@pytest.fixture
def capture_with():
    """Fixture that provides the capture_writing side effect builder."""
    return capture_writing

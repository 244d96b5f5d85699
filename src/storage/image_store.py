"""Image store: file system access for expected, processed and diff images."""

from __future__ import annotations

import logging
from pathlib import Path

from .layout import ScreenshotLayout

logger = logging.getLogger(__name__)


class ImageStore:
    """Reads screenshot bytes and keeps the screenshot directories in place."""

    def __init__(self, layout: ScreenshotLayout):
        self.layout = layout

    def is_directory(self, path: Path) -> bool:
        return Path(path).is_dir()

    def make_tree(self, path: Path) -> None:
        """Create a directory and its parents. An existing directory is fine."""
        Path(path).mkdir(parents=True, exist_ok=True)

    def is_file(self, path: Path) -> bool:
        return Path(path).is_file()

    def read(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def ensure_directory(self, path: Path) -> Path:
        if not self.is_directory(path):
            logger.debug("Creating screenshot directory %s", path)
            self.make_tree(path)
        return Path(path)

    def prepare(self, base_directory: Path) -> None:
        """Make sure the expected, processed and diff directories exist."""
        self.ensure_directory(self.layout.expected_dir(base_directory))
        self.ensure_directory(self.layout.processed_dir(base_directory))
        self.ensure_directory(self.layout.diff_dir(base_directory))

    def existing(self, path: Path) -> Path | None:
        """Return the path if it names an existing file, otherwise None."""
        return Path(path) if self.is_file(path) else None

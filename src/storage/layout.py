"""Screenshot directory layout: where expected, processed and diff images live."""

from __future__ import annotations

from pathlib import Path

from src.models.config import ScreenshotConfig


class ScreenshotLayout:
    """Maps suite directories and screenshot names to file system paths.

    Expected images always live under the suite directory. Processed and
    diff images follow it too unless the config redirects them to a shared
    UI tests checkout.
    """

    def __init__(self, config: ScreenshotConfig):
        self.config = config

    def _output_root(self, base_directory: Path) -> Path:
        if self.config.store_in_ui_tests_repo:
            return Path(self.config.ui_tests_dir)
        return Path(base_directory)

    def expected_dir(self, base_directory: Path) -> Path:
        return Path(base_directory) / self.config.expected_screenshots_dir

    def processed_dir(self, base_directory: Path) -> Path:
        return self._output_root(base_directory) / self.config.processed_screenshots_dir

    def diff_dir(self, base_directory: Path) -> Path:
        return self._output_root(base_directory) / self.config.screenshot_diff_dir

    def expected_path(self, base_directory: Path, name: str) -> Path:
        return self.expected_dir(base_directory) / screenshot_file_name(name)

    def processed_path(self, base_directory: Path, name: str) -> Path:
        return self.processed_dir(base_directory) / screenshot_file_name(name)

    def diff_path(self, base_directory: Path, name: str) -> Path:
        return self.diff_dir(base_directory) / screenshot_file_name(name)


def screenshot_file_name(name: str) -> str:
    return f"{name}.png"

"""Tests for the diff viewer generator."""

import time
from unittest.mock import patch

from PIL import Image

from src.diff.perceptual import DIFF_HIGHLIGHT
from src.models.screenshot import ScreenshotTest
from src.reporter.diff_viewer import VIEWER_FILE_NAME, DiffViewerGenerator
from src.reporter.failure_log import FailureLog


def _failure(tmp_path, png_helper, name="Dashboard_loaded", with_expected=True):
    base = tmp_path / "suite"
    processed = png_helper(base / "processed-screenshots" / f"{name}.png", changed_rows=5)
    expected = None
    if with_expected:
        expected = png_helper(base / "expected-screenshots" / f"{name}.png")
    return ScreenshotTest(name=name, processed_path=processed, expected_path=expected, base_directory=base)


class TestDiffViewerGenerator:
    def test_writes_diff_image(self, layout, tmp_path, png_helper):
        test = _failure(tmp_path, png_helper)

        diff_path = DiffViewerGenerator(layout).write_diff(test)

        assert diff_path == tmp_path / "suite" / "screenshot-diffs" / "Dashboard_loaded.png"
        assert Image.open(diff_path).convert("RGB").getpixel((0, 0)) == DIFF_HIGHLIGHT

    def test_no_diff_without_expected(self, layout, tmp_path, png_helper):
        test = _failure(tmp_path, png_helper, with_expected=False)

        assert DiffViewerGenerator(layout).write_diff(test) is None

    def test_generate_html(self, layout, tmp_path, png_helper):
        log = FailureLog()
        log.append(_failure(tmp_path, png_helper, "Dashboard_loaded"))
        log.append(_failure(tmp_path, png_helper, "Dashboard_menu", with_expected=False))

        page = DiffViewerGenerator(layout).generate(log)

        assert page == tmp_path / "suite" / "screenshot-diffs" / VIEWER_FILE_NAME
        content = page.read_text(encoding="utf-8")
        assert "2 failed screenshot(s)" in content
        assert "Dashboard_loaded" in content
        assert "Dashboard_menu" in content
        assert "data:image/png;base64," in content
        assert "expected (not found)" in content
        assert "diff (not found)" in content

    def test_generate_custom_output(self, layout, tmp_path):
        output = tmp_path / "report" / "viewer.html"

        page = DiffViewerGenerator(layout).generate(FailureLog(), output)

        assert page == output
        assert "No screenshot failures." in output.read_text(encoding="utf-8")

    def test_corrupt_image_does_not_abort(self, layout, tmp_path, png_helper):
        test = _failure(tmp_path, png_helper)
        test.expected_path.write_bytes(b"not a png")
        log = FailureLog()
        log.append(test)

        page = DiffViewerGenerator(layout).generate(log, tmp_path / "viewer.html")

        assert "diff (not found)" in page.read_text(encoding="utf-8")

    def test_generated_timestamp_is_utc(self, layout, tmp_path):
        frozen = time.struct_time((2024, 3, 5, 14, 30, 0, 1, 65, 0))

        with patch("src.reporter.diff_viewer.time.gmtime", return_value=frozen):
            page = DiffViewerGenerator(layout).generate(FailureLog(), tmp_path / "viewer.html")

        assert "generated 2024-03-05T14:30:00Z" in page.read_text(encoding="utf-8")

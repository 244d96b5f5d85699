"""Diff viewer generator: diff images plus a self-contained HTML page for failed screenshots."""

from __future__ import annotations

import base64
import html
import logging
import time
from pathlib import Path
from typing import Optional

from src.diff.perceptual import PillowDiffClient
from src.models.screenshot import ScreenshotTest
from src.storage.layout import ScreenshotLayout

from .failure_log import FailureLog

logger = logging.getLogger(__name__)

VIEWER_FILE_NAME = "diffviewer.html"


def _embed_image(path: Optional[Path]) -> str:
    """Read an image file and return a base64 data URI, or empty string on failure."""
    if path is None:
        return ""
    try:
        p = Path(path)
        if not p.exists() or p.stat().st_size == 0:
            return ""
        data = base64.b64encode(p.read_bytes()).decode()
        return f"data:image/png;base64,{data}"
    except OSError as e:
        logger.warning("Could not embed %s: %s", path, e)
        return ""


def _image_cell(label: str, path: Optional[Path]) -> str:
    data_uri = _embed_image(path)
    if not data_uri:
        return f'<td class="missing">{html.escape(label)} (not found)</td>'
    return (
        f'<td><a href="{html.escape(Path(path).resolve().as_uri())}">'
        f'<img src="{data_uri}" alt="{html.escape(label)}" loading="lazy"/></a></td>'
    )


class DiffViewerGenerator:
    """Writes diff images for recorded failures and an HTML page to review them."""

    def __init__(self, layout: ScreenshotLayout, diff_client: PillowDiffClient | None = None):
        self.layout = layout
        self.diff_client = diff_client or PillowDiffClient()

    def write_diff(self, test: ScreenshotTest) -> Optional[Path]:
        """Write the diff image for one failure. None when an image is missing."""
        if test.processed_path is None or test.expected_path is None:
            return None
        destination = self.layout.diff_path(test.base_directory, test.name)
        try:
            return self.diff_client.write_diff_image(test.processed_path, test.expected_path, destination)
        except OSError as e:
            logger.warning("Failed to write diff image for %s: %s", test.name, e)
            return None

    def generate(self, failure_log: FailureLog, output_path: Path | None = None) -> Path:
        """Generate diff images and the viewer page. Returns the page path."""
        failures = failure_log.failures
        if output_path is None:
            base = failures[0].base_directory if failures else Path(".")
            output_path = self.layout.diff_dir(base) / VIEWER_FILE_NAME

        rows = []
        for test in failures:
            diff_path = self.write_diff(test)
            rows.append(
                "<tr>"
                f'<td class="name">{html.escape(test.name)}</td>'
                f'{_image_cell("expected", test.expected_path)}'
                f'{_image_cell("processed", test.processed_path)}'
                f'{_image_cell("diff", diff_path)}'
                "</tr>"
            )

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self._render_page(rows, len(failures)), encoding="utf-8")
        logger.info("Diff viewer: %s (%d failures)", output_path, len(failures))
        return output_path

    def _render_page(self, rows: list[str], count: int) -> str:
        generated_at = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        body = "\n".join(rows) if rows else '<tr><td colspan="4">No screenshot failures.</td></tr>'
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Screenshot diff viewer</title>
<style>
  body {{ font-family: -apple-system, BlinkMacSystemFont, sans-serif; margin: 24px; color: #1e293b; }}
  table {{ border-collapse: collapse; width: 100%; }}
  th, td {{ border: 1px solid #e2e8f0; padding: 8px; vertical-align: top; }}
  th {{ background: #f8fafc; text-align: left; }}
  td.name {{ font-family: monospace; white-space: nowrap; }}
  td.missing {{ color: #ef4444; font-style: italic; }}
  img {{ max-width: 400px; border: 1px solid #cbd5e1; }}
</style>
</head>
<body>
<h1>Screenshot diff viewer</h1>
<p>{count} failed screenshot(s) &middot; generated {generated_at}</p>
<table>
<thead><tr><th>Name</th><th>Expected</th><th>Processed</th><th>Difference</th></tr></thead>
<tbody>
{body}
</tbody>
</table>
</body>
</html>
"""

"""Diagnostic formatting shared by the verdict engines."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

INDENT = "     "


def format_logs(page_logs: Sequence[str], indent: str) -> str:
    """Format renderer logs as an indented block.

    Returns an empty string when there are no logs. Otherwise a header line
    followed by one line per message; multi-line messages keep their
    continuation lines aligned. There is no trailing newline.
    """
    if not page_logs:
        return ""
    prefix = indent + "  "
    lines = [f"{indent}Rendering logs:"]
    for message in page_logs:
        lines.append(prefix + message.replace("\n", "\n" + prefix))
    return "\n".join(lines)


def _with_logs(body: str, page_logs: Sequence[str]) -> str:
    logs = format_logs(page_logs, INDENT)
    if not logs:
        return body
    return f"{body}\n\n{logs}"


def _display_path(path: Optional[Path], fallback: Path) -> str:
    if path is not None:
        return str(Path(path).resolve())
    return f"{fallback} (not found)"


def build_capture_failure(message: str, url: str, page_logs: Sequence[str]) -> str:
    body = message
    if url:
        body += f"\n{INDENT}Url to reproduce: {url}"
    return _with_logs(body, page_logs)


def build_screenshot_failure(
    message: str,
    url: str,
    processed: Optional[Path],
    processed_fallback: Path,
    expected: Optional[Path],
    expected_fallback: Path,
    page_logs: Sequence[str],
) -> str:
    """Failure text for a screenshot comparison, with both artifact paths."""
    body = (
        f"{message}\n"
        f"{INDENT}Url to reproduce: {url}\n"
        f"{INDENT}Generated screenshot: {_display_path(processed, processed_fallback)}\n"
        f"{INDENT}Expected screenshot: {_display_path(expected, expected_fallback)}"
    )
    return _with_logs(body, page_logs)


def build_containment_failure(
    message: str, capture_path: Optional[Path], page_logs: Sequence[str]
) -> str:
    if capture_path is not None:
        hint = f"View the captured screenshot at '{capture_path}'."
    else:
        hint = (
            "NOTE: No screenshot name was supplied to this containment check. "
            "Pass a screenshot name and the page will be saved so you can debug this failure."
        )
    return _with_logs(f"{message}\n\n{INDENT}{hint}", page_logs)

"""Containment verdict engine: asserts an element is (or is not) on the page."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Coroutine, Optional

from src.models.config import ScreenshotConfig
from src.models.screenshot import SuiteContext
from src.models.verdict import FailureKind, Verdict
from src.renderer.page_renderer import PageRenderer
from src.storage.layout import ScreenshotLayout
from src.url_utils import resolve_url

from .diagnostics import build_capture_failure, build_containment_failure
from .page_setup import PageSetup, require_name, require_setup, run_page_setup

logger = logging.getLogger(__name__)


class ContainmentVerdictEngine:
    """Checks element presence after page setup.

    Purely structural: images are only written as debugging aids and are
    never compared.
    """

    def __init__(
        self,
        renderer: PageRenderer,
        layout: ScreenshotLayout,
        suite: SuiteContext,
        config: ScreenshotConfig,
    ):
        self.renderer = renderer
        self.layout = layout
        self.suite = suite
        self.config = config

    def with_suite(self, suite: SuiteContext) -> "ContainmentVerdictEngine":
        return ContainmentVerdictEngine(self.renderer, self.layout, suite, self.config)

    def verify_contains(
        self,
        url: Optional[str],
        element_selector: str,
        page_setup: PageSetup,
        screen_name: Optional[str] = None,
        expect_present: bool = True,
    ) -> Coroutine[Any, Any, Verdict]:
        """Load ``url`` if needed, run page_setup and check for element_selector.

        With a screen_name, a debug screenshot is saved under the processed
        screenshots directory whatever the outcome.
        """
        require_name(element_selector, "element selector", "verify_contains")
        require_setup(page_setup, "verify_contains")
        if screen_name is not None:
            require_name(screen_name, "screen name", "verify_contains")
        return self._verify(url, element_selector, page_setup, screen_name, expect_present)

    def verify_not_contains(
        self,
        url: Optional[str],
        element_selector: str,
        page_setup: PageSetup,
        screen_name: Optional[str] = None,
    ) -> Coroutine[Any, Any, Verdict]:
        return self.verify_contains(url, element_selector, page_setup, screen_name, expect_present=False)

    def _capture_path(self, screen_name: Optional[str]) -> Optional[Path]:
        if screen_name is None:
            return None
        path = self.layout.processed_path(self.suite.base_directory, f"{self.suite.title}_{screen_name}")
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    async def _verify(
        self,
        url: Optional[str],
        element_selector: str,
        page_setup: PageSetup,
        screen_name: Optional[str],
        expect_present: bool,
    ) -> Verdict:
        capture_path = self._capture_path(screen_name)
        try:
            if url is not None:
                target = resolve_url(self.config.base_url, url)
                if self.renderer.get_current_url() != target:
                    await self.renderer.load(target)
            await run_page_setup(page_setup, self.renderer)
            await self.renderer.capture(capture_path)
        except Exception as e:
            reason = f"Capture failed: {e}"
            logger.warning("[FAIL] contains '%s': %s", element_selector, reason)
            return Verdict.fail(
                FailureKind.CAPTURE_FAILURE,
                reason,
                build_capture_failure(reason, self.renderer.get_current_url(), self.renderer.page_logs),
            )

        try:
            found = await self.renderer.contains(element_selector)
        except Exception as e:
            reason = f"Element check for '{element_selector}' failed: {e}"
            logger.warning("[FAIL] %s", reason)
            return Verdict.fail(
                FailureKind.CAPTURE_FAILURE,
                reason,
                build_containment_failure(reason, capture_path, self.renderer.page_logs),
            )

        if found == expect_present:
            logger.info("[PASS] contains '%s' (expect_present=%s)", element_selector, expect_present)
            return Verdict.ok()

        if expect_present:
            message = f"Expected page to contain element '{element_selector}', but could not find it in page."
        else:
            message = f"Expected page to not contain element '{element_selector}', but found it in page."
        logger.warning("[FAIL] %s", message)
        return Verdict.fail(
            FailureKind.STRUCTURAL_MISMATCH,
            message,
            build_containment_failure(message, capture_path, self.renderer.page_logs),
        )

"""Screenshot verdict engine: captures a page and judges it against its baseline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Coroutine, Optional

from src.diff.perceptual import PerceptualDiffClient
from src.models.config import ScreenshotConfig
from src.models.screenshot import ScreenshotTest, SuiteContext
from src.models.verdict import FailureKind, Verdict
from src.renderer.page_renderer import PageRenderer
from src.reporter.failure_log import FailureLog
from src.storage.image_store import ImageStore
from src.storage.layout import screenshot_file_name

from .diagnostics import INDENT, build_capture_failure, build_screenshot_failure, format_logs
from .page_setup import PageSetup, require_name, require_setup, run_page_setup

logger = logging.getLogger(__name__)


def format_percentage(percentage: float) -> str:
    if percentage == int(percentage):
        return str(int(percentage))
    return str(percentage)


class ScreenshotVerdictEngine:
    """Compares fresh screenshots with accepted baselines.

    Identical bytes pass without a perceptual diff. Otherwise the diff
    client decides, and only a mismatch of exactly zero passes.
    """

    def __init__(
        self,
        renderer: PageRenderer,
        image_store: ImageStore,
        diff_client: PerceptualDiffClient,
        failure_log: FailureLog,
        suite: SuiteContext,
        config: ScreenshotConfig,
    ):
        self.renderer = renderer
        self.image_store = image_store
        self.diff_client = diff_client
        self.failure_log = failure_log
        self.suite = suite
        self.config = config

    def with_suite(self, suite: SuiteContext) -> "ScreenshotVerdictEngine":
        return ScreenshotVerdictEngine(
            self.renderer, self.image_store, self.diff_client,
            self.failure_log, suite, self.config,
        )

    def baseline_name(self, file: str, prefix: Optional[str] = None) -> str:
        """Name of an accepted screenshot, prefixed with the suite title by default."""
        return f"{prefix or self.suite.title}_{file}"

    def verify(
        self,
        screen_name: str,
        baseline_name: str,
        page_setup: PageSetup,
        selector: Optional[str] = None,
    ) -> Coroutine[Any, Any, Verdict]:
        """Capture ``screen_name`` and compare it with ``baseline_name``.

        Arguments are checked immediately; a UsageError is raised before
        anything is rendered. The returned coroutine yields the Verdict.
        """
        require_name(screen_name, "screen name", "verify")
        require_name(baseline_name, "baseline name", "verify")
        require_setup(page_setup, "verify")
        return self._verify(screen_name, baseline_name, page_setup, selector)

    def verify_named(
        self,
        name: str,
        baseline_name: str,
        page_setup: PageSetup,
        selector: Optional[str] = None,
    ) -> Coroutine[Any, Any, Verdict]:
        """Like verify, with the screen name prefixed by the suite title."""
        require_name(name, "screen name", "verify_named")
        return self.verify(f"{self.suite.title}_{name}", baseline_name, page_setup, selector)

    async def _verify(
        self,
        screen_name: str,
        baseline_name: str,
        page_setup: PageSetup,
        selector: Optional[str],
    ) -> Verdict:
        base_dir = self.suite.base_directory
        layout = self.image_store.layout
        processed_path = layout.processed_path(base_dir, screen_name)
        expected_path = layout.expected_path(base_dir, baseline_name)
        self.image_store.prepare(base_dir)

        logger.debug("Verifying %s against %s", screen_name, baseline_name)
        try:
            await run_page_setup(page_setup, self.renderer)
            await self.renderer.capture(processed_path, selector)
        except Exception as e:
            reason = f"Capture failed: {e}"
            logger.warning("[FAIL] %s: %s", screen_name, reason)
            return Verdict.fail(
                FailureKind.CAPTURE_FAILURE,
                reason,
                build_capture_failure(reason, self.renderer.get_current_url(), self.renderer.page_logs),
            )

        test = ScreenshotTest(
            name=screen_name,
            processed_path=self.image_store.existing(processed_path),
            expected_path=self.image_store.existing(expected_path),
            base_directory=base_dir,
        )
        file_name = screenshot_file_name(screen_name)

        if test.processed_path is None:
            return self._fail(
                test, FailureKind.MISSING_ARTIFACT,
                f"Failed to generate screenshot to {file_name}.",
                processed_path, expected_path,
            )

        if test.expected_path is None:
            return self._fail(
                test, FailureKind.MISSING_ARTIFACT,
                f"No expected screenshot found for {file_name}.",
                processed_path, expected_path,
            )

        try:
            if self.image_store.read(processed_path) == self.image_store.read(expected_path):
                result = None
            else:
                result = await self.diff_client.compare(
                    processed_path.resolve().as_uri(), expected_path.resolve().as_uri()
                )
        except OSError as e:
            return self._fail(
                test, FailureKind.MISSING_ARTIFACT,
                f"Could not compare screenshots for {file_name}: {e}",
                processed_path, expected_path,
            )

        if result is not None and result.percentage != 0:
            return self._fail(
                test, FailureKind.VISUAL_MISMATCH,
                f"Processed screenshot does not match expected for {file_name}. "
                f"(mismatch percentage = {format_percentage(result.percentage)})",
                processed_path, expected_path,
            )

        return self._pass(screen_name)

    def _pass(self, screen_name: str) -> Verdict:
        logger.info("[PASS] %s", screen_name)
        if self.config.print_logs:
            logs = format_logs(self.renderer.page_logs, INDENT)
            if logs:
                logger.info("%s", logs)
        return Verdict.ok()

    def _fail(
        self,
        test: ScreenshotTest,
        kind: FailureKind,
        message: str,
        processed_path: Path,
        expected_path: Path,
    ) -> Verdict:
        self.failure_log.append(test)
        logger.warning("[FAIL] %s: %s", test.name, message)
        diagnostic = build_screenshot_failure(
            message,
            self.renderer.get_current_url(),
            test.processed_path, processed_path,
            test.expected_path, expected_path,
            self.renderer.page_logs,
        )
        return Verdict.fail(kind, message, diagnostic)

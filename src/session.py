"""Visual test session: wires a browser, the image store and both verdict engines."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright

from src.diff.perceptual import PerceptualDiffClient, PillowDiffClient
from src.models.config import ScreenshotConfig
from src.models.screenshot import SuiteContext
from src.renderer.browser import create_render_context, launch_browser
from src.renderer.page_renderer import PageRenderer, PlaywrightPageRenderer
from src.reporter.diff_viewer import DiffViewerGenerator
from src.reporter.failure_log import FailureLog
from src.storage.image_store import ImageStore
from src.storage.layout import ScreenshotLayout
from src.verdict.containment_engine import ContainmentVerdictEngine
from src.verdict.screenshot_engine import ScreenshotVerdictEngine

logger = logging.getLogger(__name__)


def build_engines(
    config: ScreenshotConfig,
    suite: SuiteContext,
    renderer: PageRenderer,
    failure_log: FailureLog,
    diff_client: PerceptualDiffClient | None = None,
) -> tuple[ScreenshotVerdictEngine, ContainmentVerdictEngine]:
    """Create both engines around one renderer and one failure log."""
    layout = ScreenshotLayout(config)
    screenshots = ScreenshotVerdictEngine(
        renderer=renderer,
        image_store=ImageStore(layout),
        diff_client=diff_client or PillowDiffClient(),
        failure_log=failure_log,
        suite=suite,
        config=config,
    )
    containment = ContainmentVerdictEngine(renderer=renderer, layout=layout, suite=suite, config=config)
    return screenshots, containment


class VisualTestSession:
    """Owns one Chromium page for a suite.

    Verifications against the session share its single page, so callers
    must await them one at a time.

        async with VisualTestSession(config, suite) as session:
            verdict = await session.screenshots.verify(...)
    """

    def __init__(
        self,
        config: ScreenshotConfig,
        suite: SuiteContext,
        failure_log: FailureLog | None = None,
        diff_client: PillowDiffClient | None = None,
    ):
        self.config = config
        self.suite = suite
        self.failure_log = failure_log if failure_log is not None else FailureLog()
        self.diff_client = diff_client or PillowDiffClient()
        self.layout = ScreenshotLayout(config)

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self.renderer: Optional[PlaywrightPageRenderer] = None
        self.screenshots: Optional[ScreenshotVerdictEngine] = None
        self.containment: Optional[ContainmentVerdictEngine] = None

    async def __aenter__(self) -> "VisualTestSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        renderer_cfg = self.config.renderer
        logger.debug("Launching Chromium (headless=%s)...", renderer_cfg.headless)
        self._playwright = await async_playwright().start()
        self._browser = await launch_browser(self._playwright, headless=renderer_cfg.headless)
        self._context = await create_render_context(
            self._browser,
            viewport={"width": renderer_cfg.viewport.width, "height": renderer_cfg.viewport.height},
            user_agent=renderer_cfg.user_agent,
            disable_animations=renderer_cfg.disable_animations,
        )
        page = await self._context.new_page()
        self.renderer = PlaywrightPageRenderer(page, base_url=self.config.base_url, config=renderer_cfg)
        self.screenshots, self.containment = build_engines(
            self.config, self.suite, self.renderer, self.failure_log, self.diff_client,
        )
        logger.info("Visual test session started for suite '%s'", self.suite.title)

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._context = self._browser = self._playwright = None
        logger.debug("Visual test session closed")

    def write_diff_viewer(self, output_path: Path | None = None) -> Optional[Path]:
        """Write the diff viewer if anything failed. Returns its path."""
        if not len(self.failure_log):
            return None
        generator = DiffViewerGenerator(self.layout, self.diff_client)
        return generator.generate(self.failure_log, output_path)

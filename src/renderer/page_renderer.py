"""Page renderer: drives a Playwright page for the verdict engines."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

from playwright.async_api import Page

from src.models.config import RendererConfig
from src.url_utils import resolve_url

logger = logging.getLogger(__name__)


class PageRenderer(Protocol):
    """What the verdict engines need from a renderer."""

    page_logs: list[str]

    async def capture(self, destination: Optional[Path], selector: Optional[str] = None) -> None:
        ...

    async def contains(self, selector: str) -> bool:
        ...

    def get_current_url(self) -> str:
        ...

    async def load(self, url: str) -> None:
        ...


class PlaywrightPageRenderer:
    """Renders pages through a single Playwright page.

    Console messages and uncaught page errors are collected into
    ``page_logs`` until ``clear_logs`` is called.
    """

    def __init__(self, page: Page, base_url: str = "", config: RendererConfig | None = None):
        self.page = page
        self.base_url = base_url
        self.config = config or RendererConfig()
        self.page_logs: list[str] = []
        self._setup_listeners()

    def _setup_listeners(self) -> None:
        self.page.on("console", lambda msg: self.page_logs.append(
            f"[{msg.type}] {msg.text}"
        ))
        self.page.on("pageerror", lambda err: self.page_logs.append(
            f"[pageerror] {err}"
        ))

    def clear_logs(self) -> None:
        self.page_logs.clear()

    def get_current_url(self) -> str:
        return self.page.url

    async def load(self, url: str) -> None:
        target = resolve_url(self.base_url, url)
        logger.debug("Loading %s", target)
        await self.page.goto(target, wait_until=self.config.wait_until)

    async def _settle(self) -> None:
        try:
            await self.page.wait_for_load_state("networkidle", timeout=self.config.settle_timeout_ms)
        except Exception:
            # A page that keeps polling never idles; capture what is there
            logger.debug("Page did not reach network idle within %dms", self.config.settle_timeout_ms)

    async def capture(self, destination: Optional[Path], selector: Optional[str] = None) -> None:
        """Wait for the page to settle, then screenshot it to destination.

        With no destination nothing is written. With a selector only the
        first matching element is captured.
        """
        await self._settle()
        if destination is None:
            return

        if selector:
            logger.debug("Capturing '%s' to %s", selector, destination)
            await self.page.locator(selector).first.screenshot(path=str(destination))
        else:
            logger.debug("Capturing page to %s", destination)
            await self.page.screenshot(path=str(destination), full_page=self.config.full_page)

    async def contains(self, selector: str) -> bool:
        return await self.page.query_selector(selector) is not None

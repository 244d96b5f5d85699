"""Browser setup that keeps repeated screenshot renders byte-stable."""

from __future__ import annotations

from typing import Optional

from playwright.async_api import Browser, BrowserContext, Playwright

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

_FREEZE_ANIMATIONS_SCRIPT = """
// Stop CSS animations and transitions, hide the text caret
const style = document.createElement('style');
style.textContent = `
*, *::before, *::after {
    animation-duration: 0s !important;
    animation-delay: 0s !important;
    transition-duration: 0s !important;
    transition-delay: 0s !important;
    caret-color: transparent !important;
}`;
if (document.head) {
    document.head.appendChild(style);
} else {
    document.addEventListener('DOMContentLoaded', () => document.head.appendChild(style));
}
"""


async def launch_browser(playwright: Playwright, headless: bool = True) -> Browser:
    """Launch Chromium with flags that keep font and color rendering stable."""
    return await playwright.chromium.launch(
        headless=headless,
        args=[
            "--font-render-hinting=none",
            "--force-color-profile=srgb",
            "--hide-scrollbars",
        ],
    )


async def create_render_context(
    browser: Browser,
    viewport: dict,
    user_agent: Optional[str] = None,
    disable_animations: bool = True,
) -> BrowserContext:
    """Create a browser context for deterministic screenshots.

    Args:
        disable_animations: When set, an init script freezes CSS animations
            and transitions on every page of the context.
    """
    context = await browser.new_context(
        viewport=viewport,
        device_scale_factor=1,
        user_agent=user_agent or DEFAULT_USER_AGENT,
        locale="en-US",
        timezone_id="UTC",
        reduced_motion="reduce",
    )
    if disable_animations:
        await context.add_init_script(_FREEZE_ANIMATIONS_SCRIPT)
    return context

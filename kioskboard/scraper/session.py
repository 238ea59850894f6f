# kioskboard/scraper/session.py
"""
Browser session management for the kiosk page.

Handles browser lifecycle and exposes the loaded page as a PageSource.
"""

from __future__ import annotations

import logging
from typing import Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeout
from playwright.sync_api import sync_playwright

from kioskboard import config
from kioskboard.exceptions import KioskUnavailableError
from kioskboard.scraper.source import PageState

logger = logging.getLogger(__name__)

# Stamps the marker on every element whose computed style hides it, so the
# serialized HTML carries visibility that stylesheet rules decide.
MARK_HIDDEN_JS = """
(attr) => {
  document.querySelectorAll('[' + attr + ']').forEach((el) => el.removeAttribute(attr));
  if (!document.body) return 0;
  let marked = 0;
  document.body.querySelectorAll('*').forEach((el) => {
    const style = window.getComputedStyle(el);
    if (style.display === 'none' || style.visibility === 'hidden' ||
        style.visibility === 'collapse' || parseFloat(style.opacity) === 0) {
      el.setAttribute(attr, '');
      marked += 1;
    }
  });
  return marked;
}
"""


class PlaywrightPageSource:
    """PageSource backed by a live Playwright page."""

    def __init__(
        self,
        page,
        nudge_pixels: int = config.NUDGE_PIXELS,
        nudge_pause_ms: int = config.NUDGE_PAUSE_MS,
        hidden_marker: str = config.HIDDEN_MARKER_ATTR,
    ):
        self.page = page
        self.hidden_marker = hidden_marker
        self.nudge_pixels = nudge_pixels
        self.nudge_pause_ms = nudge_pause_ms

    def current_dom_state(self) -> PageState:
        if self.hidden_marker:
            try:
                marked = self.page.evaluate(MARK_HIDDEN_JS, self.hidden_marker)
                logger.debug("Marked %s hidden element(s)", marked)
            except PlaywrightError as exc:
                logger.debug("Could not mark hidden elements: %s", exc)
        return PageState(self.page.content(), url=self.page.url)

    def wait_for(self, signal: str, timeout_ms: int) -> bool:
        try:
            self.page.wait_for_selector(signal, timeout=timeout_ms)
            return True
        except PlaywrightTimeout:
            return False

    def request_nudge(self) -> None:
        """Scroll a little and back to coax lazily rendered rows into view."""
        try:
            self.page.mouse.wheel(0, self.nudge_pixels)
            self.page.wait_for_timeout(self.nudge_pause_ms)
            self.page.mouse.wheel(0, -self.nudge_pixels)
        except PlaywrightError as exc:
            logger.debug("Nudge failed: %s", exc)


class KioskSession:
    """
    Open the kiosk in a headless Chromium page.

    Usage:
        with KioskSession(url) as session:
            boards = reconciler.reconcile(session.source)
    """

    def __init__(
        self,
        url: str,
        headless: bool = True,
        navigation_timeout_ms: int = config.NAVIGATION_TIMEOUT_MS,
        network_idle_timeout_ms: int = config.NETWORK_IDLE_TIMEOUT_MS,
    ):
        self.url = url
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self.network_idle_timeout_ms = network_idle_timeout_ms
        self._playwright = None
        self.browser = None
        self.context = None
        self.page = None
        self.source: Optional[PlaywrightPageSource] = None

    def __enter__(self) -> "KioskSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        """
        Launch the browser and load the kiosk page.

        Raises:
            KioskUnavailableError: If the browser cannot start or the page cannot be loaded
        """
        try:
            self._playwright = sync_playwright().start()
            self.browser = self._playwright.chromium.launch(headless=self.headless)
            self.context = self.browser.new_context(
                user_agent=config.USER_AGENT,
                viewport=config.VIEWPORT,
                locale="en-US",
            )
            self.page = self.context.new_page()
            self.page.goto(self.url, wait_until="domcontentloaded", timeout=self.navigation_timeout_ms)
        except PlaywrightError as exc:
            self.close()
            raise KioskUnavailableError(f"Failed to open {self.url}: {exc}") from exc

        # The kiosk keeps sockets open; network idle may never come.
        try:
            self.page.wait_for_load_state("networkidle", timeout=self.network_idle_timeout_ms)
        except PlaywrightTimeout:
            logger.info("Network never went idle, continuing with rendered content")
        except PlaywrightError as exc:
            self.close()
            raise KioskUnavailableError(f"Kiosk page closed while loading {self.url}: {exc}") from exc

        self.source = PlaywrightPageSource(self.page)

    def screenshot(self, path: str) -> None:
        if self.page is not None:
            self.page.screenshot(path=path, full_page=True)

    def dump_html(self, path: str) -> None:
        if self.page is not None:
            with open(path, "w", encoding="utf-8") as f:
                f.write(self.page.content())

    def close(self) -> None:
        """Clean up browser resources (best effort)."""
        if self.context:
            try:
                self.context.close()
            except Exception:
                pass
        if self.browser:
            try:
                self.browser.close()
            except Exception:
                pass
        if self._playwright:
            try:
                self._playwright.stop()
            except Exception:
                pass

        self._playwright = None
        self.browser = None
        self.context = None
        self.page = None
        self.source = None

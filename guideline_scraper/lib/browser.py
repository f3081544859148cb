#!/usr/bin/env python3
"""
Browser Session

Owns the Playwright browser used for a crawl and exposes the narrow set of
page operations the scraper needs through PageDriver.
"""

import re
import logging
from typing import Any, List, Optional, Tuple

from playwright.sync_api import sync_playwright, Page, Browser, BrowserContext, Playwright, Route
from playwright_stealth import Stealth

from ..utils.config import BrowserConfig
from .content_classifier import SNAPSHOT_SCRIPT
from .models import ElementSnapshot

logger = logging.getLogger("guideline_scraper")

LINKS_SCRIPT = """
(elements) => elements.map(a => [a.textContent || '', a.href || ''])
"""


class PageDriver:
    """Navigation, selector probing and in-page evaluation on a single tab"""

    def __init__(self, page: Page):
        self.page = page

    def goto(self, url: str) -> None:
        logger.debug(f"Navigating to {url}")
        self.page.goto(url)

    def wait(self, seconds: float) -> None:
        """Fixed settle pause, not tied to any page event"""
        self.page.wait_for_timeout(seconds * 1000)

    def exists(self, selector: str) -> bool:
        return self.page.query_selector(selector) is not None

    def evaluate_all(self, selector: str, script: str) -> List[Any]:
        """
        Evaluate a pure function against every element matching the selector.

        Args:
            selector: CSS selector
            script: JavaScript function receiving the element array and
                returning serializable data

        Returns:
            The deserialized result of the function
        """
        return self.page.eval_on_selector_all(selector, script)

    def get_links(self, selector: str) -> List[Tuple[str, str]]:
        """(text, absolute href) for every element matching the selector"""
        return [(text, href) for text, href in self.evaluate_all(selector, LINKS_SCRIPT)]

    def snapshot_elements(self, selector: str) -> List[ElementSnapshot]:
        """Snapshot matched elements in document order"""
        return [ElementSnapshot.from_dict(row) for row in self.evaluate_all(selector, SNAPSHOT_SCRIPT)]


class BrowserSession:
    """
    A launched browser with one page.

    Used as a context manager it is always closed on exit. The CLI instead
    calls close() only after a successful crawl so an aborted run can be
    inspected.
    """

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ):
        self.playwright = playwright
        self.browser = browser
        self.context = context
        self.page = page
        self.driver = PageDriver(page)
        self.closed = False

    @classmethod
    def launch(cls, config: Optional[BrowserConfig] = None) -> "BrowserSession":
        """
        Start Playwright, launch Chromium and open the crawl page.

        Args:
            config: Browser settings, defaults when omitted

        Returns:
            BrowserSession: The running session
        """
        config = config or BrowserConfig()

        playwright = sync_playwright().start()
        try:
            browser = playwright.chromium.launch(headless=config.headless)
            context = browser.new_context(viewport=dict(config.viewport))
            page = context.new_page()

            if config.stealth:
                Stealth().apply_stealth_sync(page)

            if config.block_trackers and config.blocked_url_patterns:
                page.route("**/*", cls._tracker_blocker(config.blocked_url_patterns))
        except Exception:
            playwright.stop()
            raise

        logger.info(
            f"Browser launched (headless={config.headless}, stealth={config.stealth}, "
            f"viewport={config.viewport['width']}x{config.viewport['height']})"
        )
        return cls(playwright, browser, context, page)

    @staticmethod
    def _tracker_blocker(patterns: List[str]):
        compiled = [re.compile(pattern, re.IGNORECASE) for pattern in patterns]

        def handle_route(route: Route) -> None:
            request_url = route.request.url
            if any(pattern.search(request_url) for pattern in compiled):
                route.abort()
            else:
                route.continue_()

        return handle_route

    def close(self) -> None:
        """Close the browser and stop Playwright, once"""
        if self.closed:
            return
        self.closed = True
        try:
            self.context.close()
            self.browser.close()
        finally:
            self.playwright.stop()
        logger.info("Browser closed")

    def __enter__(self) -> "BrowserSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

"""
Direct-Control Backend

Playwright implementation of the backend interface. Resources form a
four-level hierarchy (playwright -> browser -> context -> page) that is torn
down innermost first. Locators are lazy and every action auto-waits for
actionability.

A SharedBrowser lets many sessions reuse one playwright/browser pair while
each session still gets its own isolated context and page.
"""

import logging
from pathlib import Path
from typing import Optional

from playwright.sync_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    sync_playwright,
)

from ..config import AutomationConfig
from ..locators import LazyLocator
from ..models import BackendKind, LocatorSpec, ResolutionMode
from ..translate import playwright_errors
from ..waits import AutoWait
from .base import Backend, ReleaseStep

logger = logging.getLogger(__name__)

# browser_type -> Playwright engine
BROWSER_ENGINES = {
    "chrome": "chromium",
    "chromium": "chromium",
    "edge": "chromium",
    "firefox": "firefox",
    "safari": "webkit",
    "webkit": "webkit",
}

LOAD_STATES = ("load", "domcontentloaded", "networkidle", "commit")


def _launch(playwright: Playwright, config: AutomationConfig) -> Browser:
    engine = BROWSER_ENGINES.get(config.browser_type.lower())
    if engine is None:
        raise ValueError(
            f"Unsupported browser '{config.browser_type}' for Playwright. "
            f"Valid values: {', '.join(BROWSER_ENGINES)}"
        )
    launcher = getattr(playwright, engine)
    return launcher.launch(headless=config.headless, slow_mo=config.slow_mo)


class SharedBrowser:
    """
    A playwright/browser pair shared read-only by several sessions.

    Usage:
        >>> with SharedBrowser(config) as shared:
        ...     manager = SessionManager(config, shared_browser=shared)
    """

    def __init__(self, config: AutomationConfig):
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def is_started(self) -> bool:
        return self._browser is not None

    @property
    def browser(self) -> Browser:
        """The shared browser, launched on first access."""
        if self._browser is None:
            self.start()
        return self._browser

    def start(self) -> "SharedBrowser":
        if self._browser is not None:
            return self
        logger.info(f"Launching shared {self.config.browser_type} browser")
        if self._playwright is None:
            self._playwright = sync_playwright().start()
        self._browser = _launch(self._playwright, self.config)
        return self

    def release_steps(self) -> list[ReleaseStep]:
        steps = []
        if self._browser is not None:
            steps.append(("browser", self._close_browser))
        if self._playwright is not None:
            steps.append(("playwright", self._stop_playwright))
        return steps

    def _close_browser(self) -> None:
        browser, self._browser = self._browser, None
        browser.close()

    def _stop_playwright(self) -> None:
        playwright, self._playwright = self._playwright, None
        playwright.stop()

    def close(self) -> None:
        """Release the browser and playwright, continuing past failures."""
        for step, release in self.release_steps():
            try:
                release()
            except Exception as e:
                logger.warning(f"Failed to release shared {step}: {e}")

    def __enter__(self) -> "SharedBrowser":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class DirectControlBackend(Backend):
    """
    Drives the browser through Playwright.

    Usage:
        >>> backend = DirectControlBackend(AutomationConfig())
        >>> backend.open()
        >>> backend.navigate("https://example.com")
    """

    kind = BackendKind.DIRECT_CONTROL
    resolution_mode = ResolutionMode.LAZY

    def __init__(
        self,
        config: AutomationConfig,
        shared: Optional[SharedBrowser] = None,
    ):
        super().__init__(config)
        self._shared = shared
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Playwright page not created")
        return self._page

    @property
    def context(self) -> BrowserContext:
        if self._context is None:
            raise RuntimeError("Browser context not created")
        return self._context

    @property
    def owns_browser(self) -> bool:
        return self._shared is None

    @property
    def is_open(self) -> bool:
        return self._page is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        if self._page is not None:
            return

        if self._shared is not None:
            browser = self._shared.browser
        else:
            logger.info(f"Launching {self.config.browser_type} browser")
            self._playwright = sync_playwright().start()
            self._browser = _launch(self._playwright, self.config)
            browser = self._browser

        self._context = browser.new_context(
            viewport={
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            },
            locale=self.config.locale,
        )
        self._context.set_default_timeout(self.config.auto_wait.timeout_ms)
        self._context.set_default_navigation_timeout(self.config.auto_wait.timeout_ms)
        self._page = self._context.new_page()
        self._wait = AutoWait(self.config.auto_wait)

    def release_steps(self) -> list[ReleaseStep]:
        steps = []
        if self._page is not None:
            steps.append(("page", self._close_page))
        if self._context is not None:
            steps.append(("context", self._close_context))
        if self._browser is not None:
            steps.append(("browser", self._close_browser))
        if self._playwright is not None:
            steps.append(("playwright", self._stop_playwright))
        return steps

    def _close_page(self) -> None:
        page, self._page = self._page, None
        page.close()

    def _close_context(self) -> None:
        context, self._context = self._context, None
        context.close()

    def _close_browser(self) -> None:
        browser, self._browser = self._browser, None
        browser.close()

    def _stop_playwright(self) -> None:
        playwright, self._playwright = self._playwright, None
        playwright.stop()

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    def locator(self, spec: LocatorSpec) -> LazyLocator:
        return LazyLocator(self.page, spec, self.wait.policy)

    # ------------------------------------------------------------------
    # Actions: Playwright waits for actionability itself
    # ------------------------------------------------------------------

    def _errors(self, locator: LazyLocator, condition: Optional[str] = None):
        return playwright_errors(
            locator.description,
            probe=locator.handle,
            condition=condition,
            timeout=self.wait.timeout,
        )

    def click(self, locator: LazyLocator) -> None:
        with self._errors(locator, "clickable"):
            locator.handle.click(timeout=self.wait.policy.timeout_ms)

    def fill(self, locator: LazyLocator, text: str) -> None:
        with self._errors(locator, "editable"):
            locator.handle.fill(text, timeout=self.wait.policy.timeout_ms)

    def read_text(self, locator: LazyLocator) -> str:
        # inner_text waits for attachment only, not visibility
        with self._errors(locator, "attached"):
            return locator.handle.inner_text(timeout=self.wait.policy.timeout_ms)

    def is_visible(self, locator: LazyLocator) -> bool:
        with playwright_errors(locator.description):
            return locator.handle.is_visible()

    def is_enabled(self, locator: LazyLocator) -> bool:
        with self._errors(locator, "attached"):
            return locator.handle.is_enabled(timeout=self.wait.policy.timeout_ms)

    def get_attribute(self, locator: LazyLocator, name: str) -> Optional[str]:
        with self._errors(locator, "attached"):
            return locator.handle.get_attribute(name, timeout=self.wait.policy.timeout_ms)

    # ------------------------------------------------------------------
    # Page-level operations
    # ------------------------------------------------------------------

    def navigate(self, url: str, wait_until: str = "load") -> None:
        if wait_until not in LOAD_STATES:
            raise ValueError(f"Unknown wait_until '{wait_until}'. Valid values: {', '.join(LOAD_STATES)}")
        logger.info(f"Navigating to {url}")
        with playwright_errors(url, condition=wait_until, timeout=self.wait.timeout):
            self.page.goto(url, wait_until=wait_until, timeout=self.wait.policy.timeout_ms)

    def wait_for_load(self, state: str = "load") -> None:
        if state not in LOAD_STATES[:3]:
            raise ValueError(f"Unknown load state '{state}'. Valid values: {', '.join(LOAD_STATES[:3])}")
        with playwright_errors("page", condition=state, timeout=self.wait.timeout):
            self.page.wait_for_load_state(state, timeout=self.wait.policy.timeout_ms)

    def current_url(self) -> str:
        return self.page.url

    def title(self) -> str:
        return self.page.title()

    def set_content(self, html: str) -> None:
        with playwright_errors("page content"):
            self.page.set_content(html)

    def screenshot(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with playwright_errors(str(path)):
            self.page.screenshot(path=str(path), full_page=True)
        return path
